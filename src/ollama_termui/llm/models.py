import re
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ProtocolError

# Ollama reports nanoseconds; datetime stops at microseconds
_FRACTION = re.compile(r"(\.\d{6})\d+")


class EventStream:
    """Handle on a line-delimited response stream.

    Acts as an async iterator of raw lines and owns the underlying
    transport, which ``aclose`` releases. Once closed, iteration stops.

    Usage:
        stream = await provider.chat_stream(model, messages)
        try:
            async for line in stream:
                event = decode_event(line)
        finally:
            await stream.aclose()
    """

    def __init__(
        self,
        lines: AsyncIterator[str],
        close: Callable[[], Awaitable[None]] | None = None,
    ):
        """Initialize with an async iterator of lines.

        Args:
            lines: Async iterator yielding raw lines
            close: Coroutine function releasing the transport
        """
        self._lines = lines
        self._close = close
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the transport has been released."""
        return self._closed

    def __aiter__(self) -> "EventStream":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get the next line from the underlying iterator."""
        if self._closed:
            raise StopAsyncIteration
        return await self._lines.__anext__()

    async def aclose(self) -> None:
        """Release the transport. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._lines, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._close is not None:
            await self._close()


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(default="", description="Content of the message")


class StreamEvent(BaseModel):
    """One line of a streamed chat response."""

    model_config = ConfigDict(frozen=True)

    model: str | None = Field(default=None, description="Model producing the response")
    message: ChatMessage | None = Field(default=None, description="Partial assistant message")
    created_at: datetime | None = Field(default=None, description="Server timestamp of the event")
    done: bool = Field(default=False, description="Set on the final event")
    error: str | None = Field(default=None, description="Error reported mid-stream")
    prompt_eval_count: int | None = Field(default=None, description="Prompt tokens evaluated")
    eval_count: int | None = Field(default=None, description="Tokens generated")
    eval_duration: int | None = Field(default=None, description="Generation time in nanoseconds")

    @field_validator("created_at", mode="before")
    @classmethod
    def _trim_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _FRACTION.sub(r"\1", value)
        return value

    @property
    def content(self) -> str:
        """Text carried by this event, "" when none."""
        return self.message.content if self.message else ""

    def usage(self) -> dict[str, int]:
        """Token counters reported on the final event."""
        counters = {
            "prompt_tokens": self.prompt_eval_count,
            "completion_tokens": self.eval_count,
            "eval_duration_ns": self.eval_duration,
        }
        return {key: value for key, value in counters.items() if value is not None}


class PullStatus(BaseModel):
    """One line of a streamed model pull."""

    status: str = Field(default="", description="Human readable step")
    digest: str | None = Field(default=None, description="Layer digest being downloaded")
    total: int | None = Field(default=None, description="Layer size in bytes")
    completed: int | None = Field(default=None, description="Bytes downloaded so far")
    error: str | None = Field(default=None, description="Error reported mid-stream")

    @property
    def fraction(self) -> float:
        """Completed share of the layer, 0.0 when unknown."""
        if not self.total:
            return 0.0
        return min((self.completed or 0) / self.total, 1.0)


def decode_event(line: str | bytes) -> StreamEvent:
    """Decode one chat stream line.

    Raises:
        ProtocolError: If the line is not a valid event object
    """
    try:
        return StreamEvent.model_validate_json(line)
    except ValidationError as e:
        raise ProtocolError(f"Malformed stream event: {e.errors()[0]['msg']}") from e


def decode_pull_status(line: str | bytes) -> PullStatus:
    """Decode one pull stream line.

    Raises:
        ProtocolError: If the line is not a valid status object
    """
    try:
        return PullStatus.model_validate_json(line)
    except ValidationError as e:
        raise ProtocolError(f"Malformed pull status: {e.errors()[0]['msg']}") from e
