"""Turn orchestration for a streaming chat.

Hides how a user submission becomes a request, how the response stream is
consumed, and how cancellation and failures are resolved.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ..conversation import ConversationStore
from ..history import HistoryBuffer
from ..llm import ChatError, ChatProvider, EventStream, ProtocolError, decode_event
from ..metrics import RateMeter
from .states import SessionBusyError, SessionState

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Turn:
    """Per-turn cancellation token and transport handle."""

    __slots__ = ("cancelled", "stream")

    def __init__(self) -> None:
        self.cancelled = False
        self.stream: EventStream | None = None


class StreamingSession:
    """State machine driving one chat turn at a time.

    ``submit`` runs a whole turn: it opens an exchange, issues the request and
    pulls the response line by line, yielding to the event loop between
    lines. Everything else (``cancel``, ``reset``, history navigation,
    resizing) is a plain call made from the same event loop.

    Cancellation is cooperative: ``cancel`` settles the exchange and state
    immediately, and the pulling loop stops at its next line, discarding it
    and closing the transport.

    Example:
        session = StreamingSession(provider, "llama3.2")
        state = await session.submit("hello")
        session.transcript  # rendered conversation
    """

    def __init__(
        self,
        provider: ChatProvider,
        model: str,
        conversation: ConversationStore | None = None,
        meter: RateMeter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._provider = provider
        self._model = model
        self._conversation = conversation or ConversationStore()
        self._meter = meter or RateMeter()
        self._clock = clock
        self._state = SessionState.IDLE
        self._error: str | None = None
        self._usage: dict[str, int] = {}
        self._turn: _Turn | None = None
        self._update_callback: Callable[[], None] | None = None

    def set_update_callback(self, callback: Callable[[], None] | None) -> None:
        """Set a callback invoked after every state change and reply chunk."""
        self._update_callback = callback

    def _notify(self) -> None:
        if self._update_callback is not None:
            self._update_callback()

    def _set_state(self, state: SessionState) -> None:
        if state is not self._state:
            logger.debug("Session %s -> %s", self._state.value, state.value)
            self._state = state
        self._notify()

    @property
    def model(self) -> str:
        return self._model

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a request is being sent or streamed."""
        return self._state.busy

    @property
    def error(self) -> str | None:
        """Message of the last failure, cleared when a new turn starts."""
        return self._error

    @property
    def usage(self) -> dict[str, int]:
        """Token counters reported at the end of the last turn."""
        return dict(self._usage)

    @property
    def rate(self) -> float:
        """Tokens per second observed in the current or last turn."""
        return self._meter.rate()

    @property
    def conversation(self) -> ConversationStore:
        return self._conversation

    @property
    def history(self) -> HistoryBuffer:
        return self._conversation.history

    @property
    def meter(self) -> RateMeter:
        return self._meter

    @property
    def transcript(self) -> str:
        return self._conversation.render()

    def acknowledge(self) -> None:
        """Return to idle once a terminal state has been observed."""
        if self._state.terminal:
            self._set_state(SessionState.IDLE)

    async def submit(self, text: str) -> SessionState:
        """Run one turn for ``text``.

        Returns:
            The state the turn resolved to

        Raises:
            SessionBusyError: If a turn is already sending or streaming
        """
        if not text:
            return self._state
        if self.busy:
            raise SessionBusyError("A response is still streaming")

        self.acknowledge()
        turn = _Turn()
        self._turn = turn
        self._error = None
        self._usage = {}

        self._conversation.add(text)
        self._meter.reset()
        self._set_state(SessionState.SENDING)
        logger.info("Sending turn %d to %s", len(self._conversation), self._model)

        try:
            stream = await self._provider.chat_stream(
                self._model, list(self._conversation.messages())
            )
        except ChatError as e:
            if not turn.cancelled:
                self._fail(e)
            return self._state
        except asyncio.CancelledError:
            self._cancel_turn(turn)
            raise
        except Exception as e:
            if not turn.cancelled:
                self._fail(e)
            raise

        turn.stream = stream
        try:
            if turn.cancelled:
                return self._state

            self._set_state(SessionState.STREAMING)
            await self._consume(turn, stream)

            if not turn.cancelled:
                self._conversation.complete()
                self._set_state(SessionState.COMPLETED)
                logger.info(
                    "Turn %d complete, %.1f tok/s", len(self._conversation), self._meter.rate()
                )
        except ChatError as e:
            if not turn.cancelled:
                self._fail(e)
        except asyncio.CancelledError:
            self._cancel_turn(turn)
            raise
        except Exception as e:
            if not turn.cancelled:
                self._fail(e)
            raise
        finally:
            await stream.aclose()

        return self._state

    async def _consume(self, turn: _Turn, stream: EventStream) -> None:
        """Apply stream events until exhaustion or cancellation."""
        async for line in stream:
            if turn.cancelled:
                logger.debug("Discarding in-flight event of a cancelled turn")
                return
            if not line.strip():
                continue

            event = decode_event(line)
            if event.error:
                raise ProtocolError(event.error)

            if event.content:
                self._conversation.append_assistant_text(event.content)
                self._meter.observe(event.created_at or self._clock())
                self._notify()

            if event.done:
                self._usage = event.usage()

    def _fail(self, error: Exception) -> None:
        self._error = str(error) or error.__class__.__name__
        logger.error("Turn %d failed: %s", len(self._conversation), self._error)
        self._set_state(SessionState.FAILED)

    def _cancel_turn(self, turn: _Turn) -> None:
        if turn.cancelled:
            return
        turn.cancelled = True
        if turn is self._turn:
            self._conversation.cancel()
            self._set_state(SessionState.CANCELLED)

    def cancel(self) -> bool:
        """Stop the turn in flight.

        Returns:
            True if a sending or streaming turn was cancelled
        """
        if not self.busy or self._turn is None:
            return False
        logger.info("Cancelling turn %d", len(self._conversation))
        self._cancel_turn(self._turn)
        return True

    def reset(self) -> bool:
        """Clear the conversation. Refused while a turn is in flight.

        Returns:
            True if the conversation was cleared
        """
        if self.busy:
            logger.warning("Reset refused while a response is streaming")
            return False
        self._conversation.reset()
        self._meter.reset()
        self._error = None
        self._usage = {}
        self.acknowledge()
        self._notify()
        return True

    def resize(self, width: int, height: int) -> None:
        """Propagate a viewport size change to the transcript."""
        self._conversation.set_width(width)
        self._conversation.set_height(height)

    def previous_line(self) -> str:
        return self._conversation.history.previous_line()

    def next_line(self) -> str:
        return self._conversation.history.next_line()
