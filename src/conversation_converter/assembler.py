from __future__ import annotations

import re
from datetime import datetime, timezone

from markdownify import MarkdownConverter

from .converter import FencedCodeConverter, collapse_blank_lines, convert_message
from .errors import EmptyConversation
from .models import Conversation, Document


TITLE_PREFIX_RE = re.compile(r"^ChatGPT\s*-?\s*", re.IGNORECASE)
LINE_SEPARATOR_RE = re.compile("[\u2028\u2029]")
HEADING_PREFIX = "ChatGPT Conversation"


def strip_title_prefix(title: str) -> str:
    return TITLE_PREFIX_RE.sub("", title, count=1)


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_line_terminators(markdown: str) -> str:
    # LS/PS break editors and linters that treat them as line ends.
    return LINE_SEPARATOR_RE.sub("\n", markdown)


def _ensure_utf8(text: str) -> str:
    return text.encode("utf-8", errors="replace").decode("utf-8")


def assemble(conversation: Conversation, converter: MarkdownConverter | None = None) -> Document:
    if not conversation.messages:
        raise EmptyConversation()
    converter = converter or FencedCodeConverter()
    lines = [
        f"# {HEADING_PREFIX}: {strip_title_prefix(conversation.title)}",
        "",
        f"Source: {conversation.source_url}",
        f"Retrieved: {format_timestamp(conversation.retrieved_at)}",
        "",
    ]
    for message in conversation.messages:
        lines.append(f"## {message.role.heading}")
        lines.append("")
        lines.append(convert_message(message.html, converter))
        lines.append("")
    markdown = normalize_line_terminators("\n".join(lines))
    return Document(markdown=_ensure_utf8(collapse_blank_lines(markdown)))


__all__ = [
    "assemble",
    "format_timestamp",
    "normalize_line_terminators",
    "strip_title_prefix",
]
