"""Text rendering for the transcript.

Hides the details of markdown rendering, wrapping and styling.
"""

import io
import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from ..llm.models import ChatMessage
from .models import RenderStyle

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
MIN_WRAP_WIDTH = 20
WRAP_MARGIN = 4


def wrap_width(width: int) -> int:
    """Columns available to message bodies in a viewport ``width`` wide."""
    if width <= 0:
        width = DEFAULT_WIDTH
    return max(width - WRAP_MARGIN, MIN_WRAP_WIDTH)


def make_console(width: int, style: RenderStyle) -> Console:
    """Create an off-screen console that renders at ``width`` columns."""
    return Console(
        file=io.StringIO(),
        width=width,
        force_terminal=style.color,
        color_system="truecolor" if style.color else None,
        highlight=False,
        emoji=False,
    )


def _strip_trailing(text: str) -> str:
    return "\n".join(line.rstrip() for line in text.splitlines())


def render_message(message: ChatMessage, console: Console, style: RenderStyle) -> str:
    """Render one message as a bold role label followed by its body.

    Falls back to the raw, unformatted text if rendering fails.
    """
    label = style.label_for(message.role)
    try:
        with console.capture() as capture:
            console.print(Text(label.rstrip(), style="bold"))
            if style.markdown:
                console.print(Markdown(message.content, code_theme=style.code_theme))
            else:
                console.print(Text(message.content))
        return _strip_trailing(capture.get()) + "\n"
    except Exception as e:
        logger.debug("Rendering %s message failed, showing raw text: %s", message.role, e)
        return f"{label}{message.content}\n"
