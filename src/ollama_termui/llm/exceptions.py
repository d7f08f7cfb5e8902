"""Errors raised while talking to the chat service.

Every turn-level failure derives from ChatError so the session and the UI can
catch one type and show ``str(error)`` to the user.
"""


class ChatError(Exception):
    """Base class for chat service errors.

    Attributes:
        code: Machine-readable error code (e.g. "TRANSPORT_ERROR")
        message: Human-readable error message
        http_status: HTTP status when the server answered, else None
        extra: Any additional context
    """

    code = "CHAT_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        http_status: int | None = None,
        **extra
    ):
        self.message = message
        self.code = code or self.code
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class TransportError(ChatError):
    """Connection refused, DNS failure, timeout or a dropped stream."""

    code = "TRANSPORT_ERROR"


class ProtocolError(ChatError):
    """Error status from the server or a line that cannot be decoded."""

    code = "PROTOCOL_ERROR"
