"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Values match the standard ``logging`` module: DEBUG < INFO < WARNING < ERROR.
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level, rounding down to a known level."""
        known = [value for value in cls._names if value <= level]
        return cls._names[max(known)] if known else "DEBUG"

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Spinner (MiniDot frames, ticked by an independent timer)
SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
SPINNER_INTERVAL = 1 / 12  # Seconds between frames

# Input configuration
INPUT_PLACEHOLDER = "Type here..."

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Slash commands understood by the input bar
COMMAND_HELP = "/?"
COMMAND_QUIT = "/bye"
COMMAND_SET = "/set "

HELP_LINES = (
    ("enter", "send message"),
    ("up / down", "browse input history"),
    ("ctrl+c", "cancel response (or clear input)"),
    ("ctrl+l", "clear conversation"),
    ("ctrl+g", "toggle log panel"),
    ("ctrl+z", "suspend to the shell"),
    ("pgup / pgdown", "scroll conversation"),
    ("ctrl+d, /bye", "quit"),
    ("/set history", "save input history to disk"),
    ("/set nohistory", "stop saving input history"),
    ("/?", "show this help"),
)
