"""Terminal UI module for ollama-termui.

Provides a Textual-based TUI for streaming chat.

Module structure (Parnas principle - each module hides a design decision):
- config.py: Constants (spinner, log levels, slash commands)
- widgets.py: Custom widgets (input history, status line, log rendering)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (help screen)
- callbacks.py: Logging integration (how the TUI receives log records)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatApp, run_chat_tui
from .callbacks import PanelLogHandler
from .config import LogLevel
from .widgets import DebugPanel, HistoryInput, StatusBar, TranscriptView

__all__ = [
    "ChatApp",
    "DebugPanel",
    "HistoryInput",
    "LogLevel",
    "PanelLogHandler",
    "StatusBar",
    "TranscriptView",
    "run_chat_tui",
]
