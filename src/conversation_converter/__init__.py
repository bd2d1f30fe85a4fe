"""Shared conversation page to Markdown export toolkit."""

__version__ = "0.1.0"

from .config import AppConfig, load_config
from .core import ExportService
from .errors import ConversionError, EmptyConversation, PathExhausted, RetryExhausted
from .models import Conversation, Document, ExportResult, Message, Role

__all__ = [
    "AppConfig",
    "load_config",
    "Conversation",
    "ConversionError",
    "Document",
    "EmptyConversation",
    "ExportResult",
    "ExportService",
    "Message",
    "PathExhausted",
    "RetryExhausted",
    "Role",
]
