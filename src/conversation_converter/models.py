"""Domain models for conversation exports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        """Map a ``data-message-author-role`` value onto a known role."""

        if value == cls.USER.value:
            return cls.USER
        if value == cls.ASSISTANT.value:
            return cls.ASSISTANT
        return cls.UNKNOWN

    @property
    def heading(self) -> str:
        return "Assistant" if self is Role.ASSISTANT else "User"


@dataclass(frozen=True, slots=True)
class Message:
    """One conversation turn as raw HTML."""

    role: Role
    html: str


@dataclass(frozen=True, slots=True)
class Conversation:
    """A scraped conversation, messages in page order."""

    title: str
    messages: tuple[Message, ...]
    source_url: str
    retrieved_at: datetime


@dataclass(frozen=True, slots=True)
class Document:
    markdown: str


@dataclass(slots=True)
class ExportResult:
    """Result metadata for a single export run."""

    title: str
    markdown_path: Path
    html_path: Path | None
    retrieved_at: str
    message_count: int


__all__ = [
    "Conversation",
    "Document",
    "ExportResult",
    "Message",
    "Role",
]
