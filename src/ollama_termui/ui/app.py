"""Main Textual TUI application.

Orchestrates the UI components and handles user interaction with a
StreamingSession.
"""

import asyncio
import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..session import SessionBusyError, SessionState, StreamingSession
from .callbacks import PanelLogHandler
from .config import COMMAND_HELP, COMMAND_QUIT, COMMAND_SET, SPINNER_INTERVAL, LogLevel
from .screens import HelpScreen
from .styles import APP_CSS
from .themes import GRAPHITE
from .widgets import DebugPanel, HistoryInput, StatusBar, TranscriptView

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "ollama_termui"


class ChatApp(App):
    """Textual TUI for streaming chat with an Ollama model."""

    CSS = APP_CSS
    TITLE = "Ollama"

    BINDINGS = [
        Binding("ctrl+c", "cancel", "Cancel", priority=True),
        Binding("ctrl+l", "clear_chat", "Clear", priority=True),
        Binding("ctrl+d", "quit", "Quit", priority=True),
        Binding("ctrl+g", "toggle_log", "Log", priority=True),
        Binding("ctrl+z", "suspend_process", "Suspend", show=False, priority=True),
        Binding("pageup", "scroll_transcript(-1)", "Up", show=False),
        Binding("pagedown", "scroll_transcript(1)", "Down", show=False),
    ]

    def __init__(
        self,
        session: StreamingSession,
        log_level: str | None = None,
        subtitle: str | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._log_level = log_level
        self._subtitle = subtitle
        self._log_handler: PanelLogHandler | None = None

    @property
    def session(self) -> StreamingSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield TranscriptView(id="transcript")
        yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield StatusBar(id="status")
            yield HistoryInput(id="chat-input")

        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(GRAPHITE)
        self.theme = "graphite"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()

        self._log_handler = PanelLogHandler(log_panel, app=self)
        logging.getLogger(PACKAGE_LOGGER).addHandler(self._log_handler)

        self.sub_title = self._subtitle or self._default_subtitle()

        chat_input = self.query_one("#chat-input", HistoryInput)
        chat_input.set_history(self._session.history)
        chat_input.focus()

        self._session.set_update_callback(self._refresh_view)
        self.set_interval(SPINNER_INTERVAL, self._tick_spinner)
        self._refresh_view()
        logger.info("Chat with %s started", self._session.model)

    def on_unmount(self) -> None:
        """Detach the session and the log bridge."""
        self._session.set_update_callback(None)
        if self._log_handler is not None:
            logging.getLogger(PACKAGE_LOGGER).removeHandler(self._log_handler)
            self._log_handler = None

    def _default_subtitle(self) -> str:
        persist = self._session.history.persist
        return f"{self._session.model} | history {'on' if persist else 'off'}"

    def _tick_spinner(self) -> None:
        self.query_one("#status", StatusBar).tick()

    def _refresh_view(self) -> None:
        """Redraw transcript and status from the session."""
        session = self._session
        transcript = self.query_one("#transcript", TranscriptView)
        transcript.show(session.transcript, len(session.conversation))
        transcript.set_class(session.state is SessionState.STREAMING, "streaming")

        self.query_one("#status", StatusBar).update_status(
            session.state,
            rate=session.rate,
            usage=session.usage,
            error=session.error if session.state is SessionState.FAILED else None,
        )

    def on_transcript_view_resized(self, event: TranscriptView.Resized) -> None:
        self._session.resize(event.width, event.height)
        self._refresh_view()

    def on_input_submitted(self, event: HistoryInput.Submitted) -> None:
        """Handle user input submission."""
        value = event.value
        if not value:
            return

        if value.startswith("/") and self._run_command(value):
            event.input.clear()
            return

        if self._session.busy:
            self.notify("Still answering, ctrl+c to cancel", severity="warning", timeout=2)
            return

        event.input.clear()
        self._run_turn(value)

    def _run_command(self, value: str) -> bool:
        """Run a slash command. Returns False if ``value`` is not one."""
        if value == COMMAND_HELP:
            self.push_screen(HelpScreen())
            return True
        if value == COMMAND_QUIT:
            self.exit()
            return True
        if value.startswith(COMMAND_SET):
            option = value[len(COMMAND_SET):].strip()
            history = self._session.history
            if option == "history":
                history.persist = True
            elif option == "nohistory":
                history.persist = False
            else:
                self.notify(f"Unknown option: {option}", severity="warning", timeout=3)
                return True
            self.sub_title = self._default_subtitle()
            self.notify(f"History {'enabled' if history.persist else 'disabled'}", timeout=2)
            return True
        return False

    @work(exclusive=True, group="turn")
    async def _run_turn(self, text: str) -> None:
        """Run one chat turn as a background async worker."""
        try:
            state = await self._session.submit(text)
        except SessionBusyError:
            self.notify("Still answering, ctrl+c to cancel", severity="warning", timeout=2)
            return
        except Exception as e:
            logger.exception("Unexpected error during turn")
            self.notify(f"Error: {str(e)[:50]}", severity="error", timeout=5)
            return

        if state is SessionState.FAILED:
            self.notify(f"Error: {self._session.error}", severity="error", timeout=5)

    def action_cancel(self) -> None:
        """Cancel the response in flight, or clear the input when idle."""
        if self._session.cancel():
            self.workers.cancel_group(self, "turn")
            self.notify("Response cancelled", timeout=2)
        else:
            self.query_one("#chat-input", HistoryInput).clear()

    def action_clear_chat(self) -> None:
        """Clear the conversation."""
        if self._session.reset():
            self.notify("Chat cleared", timeout=2)
        else:
            self.notify("Cannot clear while answering", severity="warning", timeout=2)

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_scroll_transcript(self, direction: int) -> None:
        transcript = self.query_one("#transcript", TranscriptView)
        if direction < 0:
            transcript.scroll_page_up()
        else:
            transcript.scroll_page_down()


async def run_chat_tui(
    session: StreamingSession,
    log_level: str | None = None,
    subtitle: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        session: Streaming session bound to a provider and model
        log_level: Log level for panel (debug/info/warning/error), None to hide
        subtitle: Header subtitle, defaults to model and history status
    """
    app = ChatApp(session=session, log_level=log_level, subtitle=subtitle)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        session.cancel()
