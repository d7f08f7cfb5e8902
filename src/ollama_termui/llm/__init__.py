from .base import ChatProvider
from .exceptions import ChatError, ProtocolError, TransportError
from .factory import create_chat_provider
from .models import (
    ChatMessage,
    EventStream,
    PullStatus,
    StreamEvent,
    decode_event,
    decode_pull_status,
)
from .providers import OllamaProvider

__all__ = [
    "ChatError",
    "ChatMessage",
    "ChatProvider",
    "EventStream",
    "OllamaProvider",
    "ProtocolError",
    "PullStatus",
    "StreamEvent",
    "TransportError",
    "create_chat_provider",
    "decode_event",
    "decode_pull_status",
]
