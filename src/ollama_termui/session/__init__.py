"""Chat session module for ollama-termui.

Drives turns against the chat service and owns the conversation, history
and rate meter for the lifetime of the program.
"""

from .controller import StreamingSession
from .states import SessionBusyError, SessionState

__all__ = ["SessionBusyError", "SessionState", "StreamingSession"]
