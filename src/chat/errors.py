"""Errors raised while talking to the chat backend."""


class ChatBackendError(RuntimeError):
    """Base error for chat backend failures."""

    def __init__(self, message: str, code: str = "CHAT_ERROR") -> None:
        super().__init__(message)
        self.code = code


class TransportError(ChatBackendError):
    """Raised on a non-2xx response or a network failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, code="CHAT_TRANSPORT")
        self.status_code = status_code


class BackendStreamError(ChatBackendError):
    """Raised when the stream carries an ``error`` record."""

    def __init__(self, message: str, code: str = "CHAT_STREAM") -> None:
        super().__init__(message, code=code)


class StreamOverflowError(BackendStreamError):
    """Raised when buffered stream text never resolves into a record."""

    def __init__(self, buffered: int, limit: int) -> None:
        super().__init__(
            f"Stream buffer exceeded {limit} characters without a complete record "
            f"({buffered} buffered)",
            code="CHAT_STREAM_OVERFLOW",
        )
        self.buffered = buffered
        self.limit = limit


class ConfigurationError(ChatBackendError):
    """Raised when no usable chat or embedding model can be resolved."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CHAT_CONFIG")
