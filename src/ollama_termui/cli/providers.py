"""Provider factory functions for CLI.

Centralizes creation of the chat provider and input history from environment
variables. Hides configuration details from command implementations.
"""

import os
from pathlib import Path

import typer
from rich.console import Console

from ..history import DEFAULT_HISTORY_PATH, DEFAULT_MAX_SIZE, HistoryBuffer, create_history_store
from ..llm import ChatProvider, create_chat_provider
from ..llm.providers import DEFAULT_BASE_URL

# Default console for output
_console = Console()


def get_base_url(override: str | None = None) -> str:
    """Resolve the Ollama service URL.

    Args:
        override: Value of --base-url, wins over the environment

    Environment variables:
        OLLAMA_HOST: Service address (default: http://127.0.0.1:11434).
            A bare "host:port" gets an http:// scheme.
    """
    url = override or os.getenv("OLLAMA_HOST") or DEFAULT_BASE_URL
    url = url.strip().rstrip("/")
    if "://" not in url:
        url = f"http://{url}"
    return url


def get_history_path(override: Path | None = None) -> Path:
    """Resolve the input history file.

    Environment variables:
        OLLAMA_TERMUI_HISTORY: History file path (default: ~/.ollama/history)
    """
    if override is not None:
        return override
    env_path = os.getenv("OLLAMA_TERMUI_HISTORY")
    return Path(env_path).expanduser() if env_path else DEFAULT_HISTORY_PATH


def get_history_size(console: Console | None = None) -> int:
    """Read the history capacity.

    Raises:
        SystemExit: If OLLAMA_TERMUI_HISTORY_SIZE is not a non-negative integer

    Environment variables:
        OLLAMA_TERMUI_HISTORY_SIZE: Maximum number of entries (default: 1000)
    """
    con = console or _console
    raw = os.getenv("OLLAMA_TERMUI_HISTORY_SIZE")
    if not raw:
        return DEFAULT_MAX_SIZE
    try:
        size = int(raw)
    except ValueError:
        size = -1
    if size < 0:
        con.print(f"[red]Error: invalid OLLAMA_TERMUI_HISTORY_SIZE: {raw}[/red]")
        raise typer.Exit(code=1)
    return size


def get_history(
    path: Path | None = None,
    persist: bool = True,
    console: Console | None = None,
) -> HistoryBuffer:
    """Create the input history.

    Args:
        path: History file, defaults to get_history_path()
        persist: Write the file on every submission; when False the file is
            still read but never written
        console: Optional Rich console for output
    """
    store = create_history_store("file", path=get_history_path(path))
    return HistoryBuffer(
        max_size=get_history_size(console),
        persist=persist,
        store=store,
    )


def get_provider(base_url: str | None = None) -> ChatProvider:
    """Create the Ollama chat provider.

    Args:
        base_url: Value of --base-url, wins over OLLAMA_HOST
    """
    return create_chat_provider("ollama", base_url=get_base_url(base_url))
