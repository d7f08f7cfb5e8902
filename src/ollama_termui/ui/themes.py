"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Muted graphite palette with a warm accent for the streaming indicator
GRAPHITE = Theme(
    name="graphite",
    primary="#7aa2f7",      # Blue - transcript accent
    secondary="#bb9af7",    # Violet - assistant accent
    accent="#e0af68",       # Amber - spinner and highlights
    foreground="#c0caf5",   # Light text
    background="#15161e",   # Deepest background
    success="#9ece6a",      # Green - completed turns
    warning="#ff9e64",      # Orange - cancelled turns
    error="#f7768e",        # Red - failed turns
    surface="#1a1b26",      # Main surface
    panel="#16161e",        # Panel backgrounds
    dark=True,
    variables={
        "input-cursor-background": "#c0caf5",
        "input-cursor-foreground": "#15161e",
        "input-selection-background": "#7aa2f7 30%",

        "border": "#3b4261",
        "border-blurred": "#292e42",

        "scrollbar": "#292e42",
        "scrollbar-hover": "#3b4261",
        "scrollbar-active": "#7aa2f7",
        "scrollbar-background": "#16161e",

        "footer-foreground": "#a9b1d6",
        "footer-background": "#15161e",
        "footer-key-foreground": "#e0af68",
        "footer-key-background": "#292e42",

        "text-muted": "#565f89",
    },
)
