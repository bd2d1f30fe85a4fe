from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CONFIG_FILE = Path("config.toml")

DEFAULT_TIMEOUT_MS = 60_000
DEFAULT_SELECTOR = "article [data-message-author-role]"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36"
)


@dataclass(slots=True)
class RetryConfig:
    attempts: int = 3
    base_delay_ms: int = 500


@dataclass(slots=True)
class NamingConfig:
    max_slug_len: int = 120
    fallback_slug: str = "chatgpt_conversation"
    max_suffix: int | None = None


@dataclass(slots=True)
class RuntimeConfig:
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    output_dir: Path = Path(".")
    generate_html: bool = True
    headless: bool = True
    content_selector: str = DEFAULT_SELECTOR
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _positive_int(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _non_negative_int(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def _optional_positive_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        timeout_ms=_positive_int(data.get("timeout_ms"), DEFAULT_TIMEOUT_MS),
        output_dir=Path(str(data.get("output_dir", "."))),
        generate_html=bool(data.get("generate_html", True)),
        headless=bool(data.get("headless", True)),
        content_selector=str(data.get("content_selector", DEFAULT_SELECTOR)),
        user_agent=str(data.get("user_agent", DEFAULT_USER_AGENT)),
    )


def _build_retry(data: Mapping[str, object] | None) -> RetryConfig:
    if not data:
        return RetryConfig()
    return RetryConfig(
        attempts=_positive_int(data.get("attempts"), 3),
        base_delay_ms=_non_negative_int(data.get("base_delay_ms"), 500),
    )


def _build_naming(data: Mapping[str, object] | None) -> NamingConfig:
    if not data:
        return NamingConfig()
    return NamingConfig(
        max_slug_len=_positive_int(data.get("max_slug_len"), 120),
        fallback_slug=str(data.get("fallback_slug", "chatgpt_conversation")),
        max_suffix=_optional_positive_int(data.get("max_suffix")),
    )


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name) if isinstance(raw, Mapping) else None
    return value if isinstance(value, Mapping) else None


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    return AppConfig(
        runtime=_build_runtime(_section(raw, "runtime")),
        retry=_build_retry(_section(raw, "retry")),
        naming=_build_naming(_section(raw, "naming")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "timeout_ms": config.runtime.timeout_ms,
            "output_dir": str(config.runtime.output_dir),
            "generate_html": config.runtime.generate_html,
            "headless": config.runtime.headless,
            "content_selector": config.runtime.content_selector,
            "user_agent": config.runtime.user_agent,
        },
        "retry": {
            "attempts": config.retry.attempts,
            "base_delay_ms": config.retry.base_delay_ms,
        },
        "naming": {
            "max_slug_len": config.naming.max_slug_len,
            "fallback_slug": config.naming.fallback_slug,
            "max_suffix": config.naming.max_suffix,
        },
    }
    return json.dumps(payload, indent=2)
