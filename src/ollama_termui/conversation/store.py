"""Conversation state and its rendered projection.

The store is the single point of mutation for the exchanges of a chat and
keeps the rendered transcript cached until something changes.
"""

import logging
from collections.abc import Iterator

from ..history import HistoryBuffer
from ..llm.models import ChatMessage
from .models import Exchange, RenderStyle
from .rendering import make_console, render_message, wrap_width

logger = logging.getLogger(__name__)


class MessageView:
    """Restartable view of the messages to send to the chat service.

    Every iteration walks the live exchanges again. Cancelled exchanges are
    skipped entirely, and an assistant message is only produced when some
    reply text was received.
    """

    def __init__(self, exchanges: list[Exchange]) -> None:
        self._exchanges = exchanges

    def __iter__(self) -> Iterator[ChatMessage]:
        for exchange in self._exchanges:
            if exchange.cancelled:
                continue
            yield exchange.user_message
            if exchange.assistant_text:
                yield exchange.assistant_message


class ConversationStore:
    """Ordered exchanges of a chat plus a cached transcript.

    Example:
        store = ConversationStore(history=HistoryBuffer())
        store.add("hello")
        store.append_assistant_text("Hi")
        store.complete()
        list(store.messages())  # [user "hello", assistant "Hi"]
    """

    def __init__(
        self,
        history: HistoryBuffer | None = None,
        style: RenderStyle | None = None,
        width: int = 0,
        height: int = 0,
    ) -> None:
        self._exchanges: list[Exchange] = []
        self._history = history if history is not None else HistoryBuffer()
        self._style = style or RenderStyle()
        self._width = width
        self._height = height
        self._rendered: str | None = None

    @property
    def history(self) -> HistoryBuffer:
        """Input history fed by ``add``."""
        return self._history

    @property
    def style(self) -> RenderStyle:
        return self._style

    @property
    def exchanges(self) -> list[Exchange]:
        """Snapshot of the exchanges in turn order."""
        return list(self._exchanges)

    @property
    def last_exchange(self) -> Exchange | None:
        return self._exchanges[-1] if self._exchanges else None

    def __len__(self) -> int:
        return len(self._exchanges)

    def _invalidate(self) -> None:
        self._rendered = None

    def add(self, user_text: str) -> Exchange:
        """Open a new exchange and record the input in the history."""
        exchange = Exchange(user_text)
        self._exchanges.append(exchange)
        self._invalidate()
        self._history.push(user_text)
        return exchange

    def append_assistant_text(self, delta: str) -> bool:
        """Extend the reply of the open exchange.

        Returns:
            False, leaving everything untouched, when there is no open
            exchange. That only happens if the caller sequenced turns wrongly.
        """
        exchange = self.last_exchange
        if exchange is None or not exchange.append(delta):
            logger.warning("Dropped %d chars of reply: no open exchange", len(delta))
            return False
        self._invalidate()
        return True

    def complete(self) -> None:
        """Mark the last exchange complete if it is still open."""
        exchange = self.last_exchange
        if exchange is not None and exchange.mark_complete():
            self._invalidate()
            logger.debug("Exchange %d complete", len(self._exchanges))

    def cancel(self) -> None:
        """Mark the last exchange cancelled unless it already finished."""
        exchange = self.last_exchange
        if exchange is not None and exchange.mark_cancelled():
            self._invalidate()
            logger.debug("Exchange %d cancelled", len(self._exchanges))

    def reset(self) -> None:
        """Discard every exchange. The input history is kept."""
        self._exchanges.clear()
        self._invalidate()

    def messages(self) -> MessageView:
        """Messages to submit to the chat service, oldest first."""
        return MessageView(self._exchanges)

    def set_width(self, width: int) -> None:
        self._width = width
        self._invalidate()

    def set_height(self, height: int) -> None:
        self._height = height
        self._invalidate()

    def render(self) -> str:
        """The transcript, rebuilt only after a change."""
        if self._rendered is None:
            self._rendered = self._build()
        return self._rendered

    def height(self) -> int:
        """Rows needed to show the transcript, capped at the viewport."""
        return min(self._height, len(self.render().splitlines()))

    def _build(self) -> str:
        console = make_console(wrap_width(self._width), self._style)
        parts: list[str] = []
        for exchange in self._exchanges:
            parts.append(render_message(exchange.user_message, console, self._style))
            if exchange.assistant_text:
                parts.append(render_message(exchange.assistant_message, console, self._style))
        return "\n".join(parts)
