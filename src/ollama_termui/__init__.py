"""
ollama-termui: a terminal chat client for models served by Ollama.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .conversation import ConversationStore, Exchange
from .history import HistoryBuffer, load_history
from .llm import ChatProvider, OllamaProvider, create_chat_provider
from .metrics import RateMeter
from .session import SessionBusyError, SessionState, StreamingSession

__all__ = [
    "ChatProvider",
    "ConversationStore",
    "Exchange",
    "HistoryBuffer",
    "OllamaProvider",
    "RateMeter",
    "SessionBusyError",
    "SessionState",
    "StreamingSession",
    "create_chat_provider",
    "load_history",
]
