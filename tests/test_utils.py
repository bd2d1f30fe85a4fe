import os
import re
from pathlib import Path

import pytest

from conversation_converter import utils
from conversation_converter.errors import PathExhausted
from conversation_converter.utils import RESERVED_BASENAMES, atomic_write, slugify, unique_path


SLUG_RE = re.compile(r"^[a-z0-9_]*$")


def test_slugify_basic() -> None:
    assert slugify("Hello World!") == "hello_world"


def test_slugify_empty_and_symbols_use_fallback() -> None:
    assert slugify("") == "chatgpt_conversation"
    assert slugify("!!!") == "chatgpt_conversation"


def test_slugify_reserved_names() -> None:
    assert slugify("CON") == "con_chatgpt"
    assert slugify("lpt9") == "lpt9_chatgpt"
    assert slugify("console") == "console"


def test_slugify_truncates_to_max_length() -> None:
    assert len(slugify("a" * 200)) == 120
    assert slugify("word " * 40).endswith("word")


def test_slugify_reserved_check_runs_after_truncation() -> None:
    assert slugify("com1 and more", max_length=4) == "com1_chatgpt"


def test_slugify_custom_fallback() -> None:
    assert slugify("???", fallback="untitled") == "untitled"


@pytest.mark.parametrize(
    "title",
    ["", " ", "Ünïcödé tëxt", "../../etc/passwd", "NUL", "a/b\\c:d*e?f", "x" * 500, "__a__", "日本語"],
)
def test_slugify_output_is_always_safe(title: str) -> None:
    slug = slugify(title)
    assert slug
    assert SLUG_RE.match(slug)
    assert len(slug) <= 120
    assert slug not in RESERVED_BASENAMES
    assert slugify(title) == slug


def test_unique_path_returns_missing_path_unchanged(tmp_path: Path) -> None:
    target = tmp_path / "notes.md"
    assert unique_path(target) == target


def test_unique_path_increments_suffix(tmp_path: Path) -> None:
    target = tmp_path / "notes.md"
    target.write_text("first", encoding="utf-8")
    second = unique_path(target)
    assert second == tmp_path / "notes_2.md"
    second.write_text("second", encoding="utf-8")
    third = unique_path(target)
    assert third == tmp_path / "notes_3.md"
    assert not third.exists()


def test_unique_path_respects_bound(tmp_path: Path) -> None:
    target = tmp_path / "notes.md"
    target.write_text("x", encoding="utf-8")
    (tmp_path / "notes_2.md").write_text("x", encoding="utf-8")
    with pytest.raises(PathExhausted):
        unique_path(target, max_suffix=2)


def test_atomic_write_creates_file(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out.md"
    atomic_write(target, "hello\n")
    assert target.read_text(encoding="utf-8") == "hello\n"
    assert [p.name for p in target.parent.iterdir()] == ["out.md"]


def test_atomic_write_failure_keeps_previous_content(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "out.md"
    target.write_text("old", encoding="utf-8")

    def failing_replace(src, dst):  # type: ignore[no-untyped-def]
        raise OSError("rename failed")

    monkeypatch.setattr(utils.os, "replace", failing_replace)
    with pytest.raises(OSError, match="rename failed"):
        atomic_write(target, "new content")
    assert target.read_text(encoding="utf-8") == "old"


def test_atomic_write_failure_leaves_target_absent(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "out.md"

    def failing_replace(src, dst):  # type: ignore[no-untyped-def]
        raise OSError("rename failed")

    monkeypatch.setattr(utils.os, "replace", failing_replace)
    with pytest.raises(OSError):
        atomic_write(target, "new content")
    assert not target.exists()
    leftovers = [p.name for p in tmp_path.iterdir()]
    assert len(leftovers) == 1
    assert leftovers[0].startswith(".out.md.tmp-")


def test_temp_path_is_in_target_directory(tmp_path: Path) -> None:
    temp = utils.temp_path_for(tmp_path / "out.md")
    assert temp.parent == tmp_path
    assert temp.name.startswith(".out.md.tmp-")
    assert os.path.dirname(temp) == str(tmp_path)
