from __future__ import annotations

import re
from typing import Callable

from bs4 import Tag
from markdownify import ATX, MarkdownConverter

from .sanitize import clean_html


LANGUAGE_CLASS_RE = re.compile(r"language-([\w-]+)")
BLANK_RUN_RE = re.compile(r"\n{3,}")
NBSP = "\u00a0"

PreRule = tuple[Callable[[Tag], bool], Callable[[Tag], str]]


def _first_child_is_code(el: Tag) -> bool:
    first = el.find(True, recursive=False)
    return first is not None and first.name == "code"


def _code_language(code: Tag) -> str:
    classes = code.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    matches = LANGUAGE_CLASS_RE.findall(" ".join(classes))
    return matches[-1] if matches else ""


def fenced_code_block(el: Tag) -> str:
    code = el.find(True, recursive=False)
    language = _code_language(code)
    text = code.get_text().replace(NBSP, " ")
    return f"\n\n```{language}\n{text}\n```\n\n"


class FencedCodeConverter(MarkdownConverter):
    """markdownify converter that keeps the ``language-*`` tag on code fences.

    ``<pre>`` elements go through ``pre_rules`` in order and the first matching
    predicate wins; markdownify's own ``convert_pre`` handles anything left.
    """

    pre_rules: tuple[PreRule, ...] = ((_first_child_is_code, fenced_code_block),)

    def __init__(self, **options):  # type: ignore[no-untyped-def]
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        super().__init__(**options)

    def convert_pre(self, el, text, parent_tags):  # type: ignore[no-untyped-def]
        for matches, render in self.pre_rules:
            if matches(el):
                return render(el)
        return super().convert_pre(el, text, parent_tags)


def html_to_markdown(html: str, converter: MarkdownConverter | None = None) -> str:
    converter = converter or FencedCodeConverter()
    return converter.convert(html)


def collapse_blank_lines(markdown: str) -> str:
    return BLANK_RUN_RE.sub("\n\n", markdown)


def convert_message(html: str, converter: MarkdownConverter | None = None) -> str:
    markdown = html_to_markdown(clean_html(html), converter)
    return collapse_blank_lines(markdown).strip()


__all__ = [
    "FencedCodeConverter",
    "collapse_blank_lines",
    "convert_message",
    "fenced_code_block",
    "html_to_markdown",
]
