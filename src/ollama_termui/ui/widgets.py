"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history navigation
- Status line formatting and the spinner
- Log rendering and level filtering
- Transcript display
"""

from datetime import datetime
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.text import Text
from textual.containers import VerticalScroll
from textual.events import Paste, Resize
from textual.message import Message
from textual.widgets import Input, RichLog, Static

from .config import (
    INPUT_PLACEHOLDER,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    SPINNER_FRAMES,
    LogLevel,
)

if TYPE_CHECKING:
    from ..history import HistoryBuffer
    from ..session import SessionState


class HistoryInput(Input):
    """Single-line input with history navigation.

    Use Up/Down arrow keys to browse the attached history buffer.
    Multi-line pastes are converted to single line (newlines become spaces),
    which keeps every history entry on one line of the history file.
    """

    def __init__(self, *args, **kwargs) -> None:
        kwargs.setdefault("placeholder", INPUT_PLACEHOLDER)
        super().__init__(*args, **kwargs)
        self._history: "HistoryBuffer | None" = None

    def set_history(self, history: "HistoryBuffer") -> None:
        """Attach the history buffer to browse."""
        self._history = history

    def _on_paste(self, event: Paste) -> None:
        """Handle paste events - convert newlines to spaces for single-line input."""
        if event.text:
            clean_text = " ".join(event.text.split())
            self.insert_text_at_cursor(clean_text)
            event.prevent_default()
            event.stop()

    def _on_key(self, event) -> None:
        """Handle key events for history navigation."""
        if self._history is None:
            return
        if event.key == "up":
            line = self._history.previous_line()
            if line:
                self.value = line
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()
        elif event.key == "down":
            self.value = self._history.next_line()
            self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()


class TranscriptView(VerticalScroll):
    """Scrollable view of the rendered conversation."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation"
    ALLOW_MAXIMIZE = True

    class Resized(Message):
        """Posted when the viewport size changes."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._shown: str | None = None

    def compose(self):
        yield Static("", id="transcript-body")

    def on_resize(self, event: Resize) -> None:
        self.post_message(self.Resized(event.size.width, event.size.height))

    def show(self, transcript: str, exchanges: int = 0) -> None:
        """Display ``transcript`` (ANSI styled text) and follow the tail."""
        if transcript == self._shown:
            return
        self._shown = transcript
        self.query_one("#transcript-body", Static).update(Text.from_ansi(transcript))
        self.border_subtitle = f"{exchanges} turns" if exchanges else "Conversation"
        self.scroll_end(animate=False)


class StatusBar(Static):
    """One-line status: spinner, turn state, token rate and counters."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._state: str = "idle"
        self._busy = False
        self._rate = 0.0
        self._prompt_tokens = 0
        self._completion_tokens = 0
        self._error: str | None = None
        self._frame = 0

    def on_mount(self) -> None:
        self._update_display()

    def update_status(
        self,
        state: "SessionState",
        rate: float = 0.0,
        usage: dict[str, int] | None = None,
        error: str | None = None,
    ) -> None:
        """Update the status display.

        Args:
            state: Current session state
            rate: Tokens per second
            usage: Token counters of the last turn
            error: Failure message, if the turn failed
        """
        usage = usage or {}
        self._state = state.value
        self._busy = state.busy
        self._rate = rate
        self._prompt_tokens = usage.get("prompt_tokens", 0)
        self._completion_tokens = usage.get("completion_tokens", 0)
        self._error = error
        self.set_class(error is not None, "failed")
        self._update_display()

    def tick(self) -> None:
        """Advance the spinner; driven by an app timer, not by the stream."""
        if self._busy:
            self._frame = (self._frame + 1) % len(SPINNER_FRAMES)
            self._update_display()

    def _update_display(self) -> None:
        spinner = SPINNER_FRAMES[self._frame] if self._busy else " "
        parts = [
            f"[bold yellow]{spinner}[/]",
            f"[bold cyan]State:[/] {self._state}",
            f"[bold magenta]Rate:[/] {self._rate:.1f} tok/s",
        ]
        if self._prompt_tokens or self._completion_tokens:
            parts.append(
                f"[bold green]Tokens:[/] {self._prompt_tokens + self._completion_tokens:,} "
                f"[dim]({self._prompt_tokens:,}/{self._completion_tokens:,})[/]"
            )
        if self._error:
            parts.append(f"[bold red]Error:[/] {escape(self._error)}")
        self.update("  ".join(parts))


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped records from the application loggers.
    Hidden by default, shown with --log-level or toggled with ctrl+g.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    COMPONENT_COLORS = {
        "controller": "green",
        "store": "bright_green",
        "buffer": "bright_blue",
        "ollama": "magenta",
        "progress": "bright_cyan",
        "rendering": "bright_white",
        "app": "cyan",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Short logger name (controller, ollama, ...)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.assemble(
            (timestamp, "dim"),
            " ",
            (f"{LogLevel.name(level):<7}", level_color),
            " ",
            (f"[{component}]", comp_color),
            " ",
            message,
        )
        self.write(line)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
