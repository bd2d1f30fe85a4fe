from __future__ import annotations


class ConversionError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class EmptyConversation(ConversionError):
    """Raised when a page yields no messages. Never retried."""

    def __init__(self, message: str = "No messages were found in the shared conversation.") -> None:
        super().__init__("EMPTY_CONVERSATION", message)


class RetryExhausted(ConversionError):
    def __init__(self, attempts: int, label: str, last_error: BaseException | None) -> None:
        super().__init__(
            "RETRY_EXHAUSTED",
            f"Failed after {attempts} attempts while {label}. Last error: {last_error}",
        )
        self.attempts = attempts
        self.label = label
        self.last_error = last_error


class PathExhausted(ConversionError):
    def __init__(self, base_path: object, limit: int) -> None:
        super().__init__("PATH_EXHAUSTED", f"No free name for {base_path} below suffix {limit}")
        self.limit = limit


__all__ = [
    "ConversionError",
    "EmptyConversation",
    "PathExhausted",
    "RetryExhausted",
]
