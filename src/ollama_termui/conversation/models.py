"""Data models for the conversation.

Hides the internal representation of a turn and of rendering options.
"""

from dataclasses import dataclass

from ..llm.models import ChatMessage


class Exchange:
    """One user submission and the (possibly partial) reply it produced.

    An exchange is open until it is marked complete or cancelled; after that
    it never changes again.
    """

    __slots__ = ("_user_text", "_assistant_text", "_complete", "_cancelled")

    def __init__(self, user_text: str) -> None:
        self._user_text = user_text
        self._assistant_text = ""
        self._complete = False
        self._cancelled = False

    def __repr__(self) -> str:
        return (
            f"Exchange(user_text={self._user_text!r}, "
            f"assistant_text={self._assistant_text!r}, "
            f"complete={self._complete}, cancelled={self._cancelled})"
        )

    @property
    def user_text(self) -> str:
        return self._user_text

    @property
    def assistant_text(self) -> str:
        return self._assistant_text

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def closed(self) -> bool:
        """True once complete or cancelled."""
        return self._complete or self._cancelled

    @property
    def user_message(self) -> ChatMessage:
        return ChatMessage(role="user", content=self._user_text)

    @property
    def assistant_message(self) -> ChatMessage:
        return ChatMessage(role="assistant", content=self._assistant_text)

    def append(self, delta: str) -> bool:
        """Extend the reply. Returns False if the exchange is closed."""
        if self.closed:
            return False
        self._assistant_text += delta
        return True

    def mark_complete(self) -> bool:
        """Close as complete. Returns False if already closed."""
        if self.closed:
            return False
        self._complete = True
        return True

    def mark_cancelled(self) -> bool:
        """Close as cancelled. Returns False if already closed."""
        if self.closed:
            return False
        self._cancelled = True
        return True


@dataclass(frozen=True)
class RenderStyle:
    """How the transcript is turned into text.

    Passed explicitly to the renderer instead of living in module globals.
    """

    user_label: str = "User: "
    assistant_label: str = "Assistant: "
    markdown: bool = True
    color: bool = True
    code_theme: str = "monokai"

    def label_for(self, role: str) -> str:
        if role == "user":
            return self.user_label
        if role == "assistant":
            return self.assistant_label
        return f"{role.capitalize()}: "
