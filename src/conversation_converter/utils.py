from __future__ import annotations

import logging
import os
import re
import time
from pathlib import Path

from .errors import PathExhausted


logger = logging.getLogger(__name__)

SLUG_RUN_RE = re.compile(r"[^a-z0-9]+")
DEFAULT_SLUG = "chatgpt_conversation"
MAX_SLUG_LEN = 120
RESERVED_BASENAMES = frozenset(
    {"con", "prn", "aux", "nul"}
    | {f"com{index}" for index in range(1, 10)}
    | {f"lpt{index}" for index in range(1, 10)}
)


def slugify(value: str, max_length: int = MAX_SLUG_LEN, fallback: str = DEFAULT_SLUG) -> str:
    """Derive a lowercase ``[a-z0-9_]`` file stem from a conversation title.

    The fallback is applied before truncation and the reserved-name check runs
    last, because a cut can itself land on a device name such as ``com1``.
    """
    normalized = SLUG_RUN_RE.sub("_", value.lower()).strip("_")
    if not normalized:
        normalized = fallback
    if len(normalized) > max_length:
        normalized = normalized[:max_length].rstrip("_")
    if normalized in RESERVED_BASENAMES:
        normalized = f"{normalized}_chatgpt"
    return normalized


def unique_path(base_path: Path, max_suffix: int | None = None) -> Path:
    if not base_path.exists():
        return base_path
    index = 2
    while max_suffix is None or index <= max_suffix:
        candidate = base_path.with_name(f"{base_path.stem}_{index}{base_path.suffix}")
        if not candidate.exists():
            logger.debug("Resolved %s to %s", base_path, candidate)
            return candidate
        index += 1
    raise PathExhausted(base_path, max_suffix)


def temp_path_for(path: Path) -> Path:
    return path.with_name(f".{path.name}.tmp-{int(time.time() * 1000)}")


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = temp_path_for(path)
    with tmp_path.open("w", encoding=encoding, newline="") as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
    os.replace(tmp_path, path)
    logger.debug("Wrote %d characters to %s", len(data), path)
