from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a single chat turn."""

    IDLE = "idle"              # No turn in progress
    SENDING = "sending"        # Request issued, waiting for the stream
    STREAMING = "streaming"    # Pulling partial responses
    COMPLETED = "completed"    # Stream exhausted
    CANCELLED = "cancelled"    # Stopped by the user
    FAILED = "failed"          # Transport, protocol or decode error

    @property
    def busy(self) -> bool:
        return self in (SessionState.SENDING, SessionState.STREAMING)

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED)


class SessionBusyError(RuntimeError):
    """A turn was submitted while another one is still in flight."""
