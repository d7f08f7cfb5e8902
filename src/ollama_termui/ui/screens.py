"""Modal screens for the TUI.

This module hides the design decisions about:
- Help dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs

To change how help looks, modify only this file.
"""

from rich.table import Table
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from .config import HELP_LINES


class HelpScreen(ModalScreen[None]):
    """Modal listing key bindings and slash commands.

    Any of escape, q or enter closes it.
    """

    CSS = """
    HelpScreen {
        align: center middle;
        background: $background 70%;
    }

    #help-dialog {
        width: 60;
        height: auto;
        max-height: 24;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #help-title {
        width: 100%;
        height: auto;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #help-body {
        width: 100%;
        height: auto;
        padding: 0 1;
        color: $foreground;
    }

    #help-hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
        Binding("q", "close", "Close", show=False),
        Binding("enter", "close", "Close", show=False),
    ]

    def compose(self) -> ComposeResult:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold cyan", no_wrap=True)
        table.add_column()
        for keys, description in HELP_LINES:
            table.add_row(keys, description)

        with Vertical(id="help-dialog"):
            yield Static("Available commands", id="help-title")
            yield Static(table, id="help-body")
            yield Static("esc to close", id="help-hint")

    def action_close(self) -> None:
        self.dismiss(None)
