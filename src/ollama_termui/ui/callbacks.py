"""Logging bridge into the TUI.

Hides the details of how log records reach the log panel.
Uses thread-safe methods to update UI from worker threads.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import DebugPanel


class PanelLogHandler(logging.Handler):
    """Logging handler that writes records to the log panel.

    Uses call_from_thread when a record is emitted off the app thread.
    """

    def __init__(
        self,
        panel: "DebugPanel",
        app: "App | None" = None,
        level: int = logging.DEBUG,
    ) -> None:
        super().__init__(level)
        self.panel = panel
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any, **kwargs: Any) -> None:
        """Call a function in a thread-safe manner for UI updates."""
        if self.app is not None and self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args, **kwargs)
        else:
            func(*args, **kwargs)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            component = record.name.rsplit(".", 1)[-1]
            self._call_thread_safe(self.panel.add_entry, component, message, record.levelno)
        except Exception:
            self.handleError(record)
