"""Unit tests for the non-visual parts of the ui module."""
import logging

from ollama_termui.ui import ChatApp, LogLevel, PanelLogHandler, StatusBar
from ollama_termui.ui.config import HELP_LINES


class RecordingPanel:
    """Stands in for DebugPanel, keeping the entries it receives."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, str, int]] = []

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        self.entries.append((component, message, level))


class TestLogLevel:
    """Tests for LogLevel helpers."""

    def test_from_string(self):
        assert LogLevel.from_string("WARNING") == LogLevel.WARNING
        assert LogLevel.from_string("bogus") == LogLevel.DEBUG

    def test_name_rounds_down(self):
        assert LogLevel.name(LogLevel.INFO) == "INFO"
        assert LogLevel.name(25) == "INFO"
        assert LogLevel.name(logging.CRITICAL) == "ERROR"
        assert LogLevel.name(0) == "DEBUG"

    def test_matches_logging_levels(self):
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.ERROR == logging.ERROR


class TestPanelLogHandler:
    """Tests for the logging bridge into the log panel."""

    def test_records_reach_panel(self):
        panel = RecordingPanel()
        logger = logging.getLogger("ollama_termui.session.controller")
        handler = PanelLogHandler(panel)
        logger.addHandler(handler)
        old_level = logger.level
        logger.setLevel(logging.DEBUG)
        try:
            logger.info("Turn %d complete", 3)
        finally:
            logger.removeHandler(handler)
            logger.setLevel(old_level)

        assert panel.entries == [("controller", "Turn 3 complete", LogLevel.INFO)]

    def test_handler_level_filters(self):
        panel = RecordingPanel()
        logger = logging.getLogger("ollama_termui.history.buffer")
        handler = PanelLogHandler(panel, level=logging.WARNING)
        logger.addHandler(handler)
        old_level = logger.level
        logger.setLevel(logging.DEBUG)
        try:
            logger.debug("quiet")
            logger.warning("loud")
        finally:
            logger.removeHandler(handler)
            logger.setLevel(old_level)

        assert panel.entries == [("buffer", "loud", LogLevel.WARNING)]


class TestBindings:
    """Tests for the application key map."""

    def test_ctrl_z_suspends(self):
        actions = {binding.key: binding.action for binding in ChatApp.BINDINGS}

        assert actions["ctrl+z"] == "suspend_process"
        assert "ctrl+z" in dict(HELP_LINES)

    def test_every_binding_is_documented(self):
        documented = " ".join(key for key, _ in HELP_LINES)

        for binding in ChatApp.BINDINGS:
            if binding.show:
                assert binding.key in documented

    def test_status_bar_has_no_clipboard_export(self):
        assert not hasattr(StatusBar, "get_plain_text")
