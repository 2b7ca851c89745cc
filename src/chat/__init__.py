"""Chat backend package."""

from src.chat.client import ChatClient, new_chat_id
from src.chat.errors import (
    BackendStreamError,
    ChatBackendError,
    ConfigurationError,
    StreamOverflowError,
    TransportError,
)
from src.chat.providers import resolve_providers
from src.chat.stream import NDJSONDecoder

__all__ = [
    "ChatClient",
    "new_chat_id",
    "NDJSONDecoder",
    "resolve_providers",
    "ChatBackendError",
    "TransportError",
    "BackendStreamError",
    "StreamOverflowError",
    "ConfigurationError",
]
