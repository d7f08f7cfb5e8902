"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - transcript over input
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Transcript - Primary Focus Area
   ============================================ */
#transcript {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus {
        border: round $primary;
    }

    /* Streaming state */
    &.streaming {
        border: round $accent 80%;
        border-title-color: $accent;
    }
}

#transcript-body {
    width: 100%;
    height: auto;
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;
}

/* ============================================
   Bottom Bar - Status + Input
   ============================================ */
#bottom-bar {
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status {
    height: 1;
    padding: 0 1;
    background: $surface;
    color: $foreground;

    &.failed {
        color: $error;
    }
}

#chat-input {
    border: round $primary 60%;
    background: $panel;

    &:focus {
        border: round $primary;
    }

    &:disabled {
        border: round $border;
        color: $text-muted;
    }
}
"""
