"""Input history module for ollama-termui.

Provides a bounded, navigable history of submitted inputs that can be
persisted to a plain text file.
"""

from .base import HistoryStore
from .buffer import DEFAULT_MAX_SIZE, HistoryBuffer, load_history
from .factory import create_history_store
from .stores import DEFAULT_HISTORY_PATH, FileHistoryStore, InMemoryHistoryStore

__all__ = [
    "DEFAULT_HISTORY_PATH",
    "DEFAULT_MAX_SIZE",
    "FileHistoryStore",
    "HistoryBuffer",
    "HistoryStore",
    "InMemoryHistoryStore",
    "create_history_store",
    "load_history",
]
