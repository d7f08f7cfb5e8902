"""Main CLI application using Typer."""
import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TransferSpeedColumn,
)
from rich.table import Table
from rich.text import Text

from ..conversation import ConversationStore
from ..llm import ChatError, ChatProvider, PullStatus
from ..pull import pull_model
from ..session import StreamingSession
from .providers import get_base_url, get_history, get_history_path, get_provider

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="ollama-termui",
    help="Terminal chat client for models served by Ollama",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

PACKAGE_LOGGER = "ollama_termui"


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    to_console: bool = True,
) -> None:
    """Attach handlers to the package logger.

    The TUI adds its own panel handler while it runs, so ``chat`` passes
    ``to_console=False`` to keep stderr clean under the full-screen UI.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.getLevelName((log_level or "info").upper())
    if not isinstance(level, int):
        console.print(f"[red]Error: unknown log level: {log_level}[/red]")
        raise typer.Exit(code=1)
    logger.setLevel(level)

    if to_console:
        logger.addHandler(
            RichHandler(console=Console(stderr=True), show_path=False, level=level)
        )
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())


async def _pull_with_progress(provider: ChatProvider, model: str) -> None:
    """Pull ``model`` showing one progress bar per layer."""
    with Progress(
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console,
        transient=False,
    ) as progress:
        tasks: dict[str, TaskID] = {}

        def _on_progress(status: PullStatus) -> None:
            if not status.digest:
                progress.console.print(f"[dim]{status.status}[/dim]")
                return
            task_id = tasks.get(status.digest)
            if task_id is None:
                label = f"pulling {status.digest.removeprefix('sha256:')[:12]}"
                task_id = progress.add_task(label, total=status.total or None)
                tasks[status.digest] = task_id
            progress.update(
                task_id,
                completed=status.completed or 0,
                total=status.total or None,
            )

        await pull_model(provider, model, on_progress=_on_progress)


@app.command()
def chat(
    model: str = typer.Argument(..., help="Model to chat with, e.g. llama3.2"),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Ollama server address (default: $OLLAMA_HOST or http://127.0.0.1:11434)"
    ),
    history_file: Path | None = typer.Option(
        None,
        "--history-file",
        help="Input history file (default: $OLLAMA_TERMUI_HISTORY or ~/.ollama/history)"
    ),
    no_history: bool = typer.Option(
        False,
        "--no-history",
        help="Do not write submissions to the history file"
    ),
    no_pull: bool = typer.Option(
        False,
        "--no-pull",
        help="Skip pulling the model before starting"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write log records to this file"
    ),
):
    """Chat with a model in an interactive terminal UI."""
    _configure_logging(log_level, log_file, to_console=False)

    async def _chat():
        from ..ui import run_chat_tui

        provider = get_provider(base_url)
        try:
            if not no_pull:
                try:
                    await _pull_with_progress(provider, model)
                except ChatError as e:
                    console.print(f"[red]Error: {e}[/red]")
                    raise typer.Exit(code=1)

            history = get_history(history_file, persist=not no_history, console=console)
            session = StreamingSession(
                provider, model, conversation=ConversationStore(history=history)
            )
            await run_chat_tui(session, log_level=log_level)
        finally:
            await provider.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def pull(
    model: str = typer.Argument(..., help="Model to download"),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Ollama server address (default: $OLLAMA_HOST or http://127.0.0.1:11434)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, or error"
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write log records to this file"
    ),
):
    """Download a model, showing progress per layer."""
    _configure_logging(log_level or "warning", log_file)

    async def _pull():
        provider = get_provider(base_url)
        try:
            console.print(f"[dim]Pulling {model} from {get_base_url(base_url)}[/dim]")
            await _pull_with_progress(provider, model)
            console.print(f"[green]{model} is ready[/green]")
        except ChatError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await provider.close()

    asyncio.run(_pull())


@app.command()
def history(
    clear: bool = typer.Option(
        False,
        "--clear",
        help="Delete every saved entry"
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Show only the most recent N entries"
    ),
    history_file: Path | None = typer.Option(
        None,
        "--history-file",
        help="Input history file (default: $OLLAMA_TERMUI_HISTORY or ~/.ollama/history)"
    ),
):
    """Show or clear the saved input history."""
    path = get_history_path(history_file)

    if not path.exists():
        console.print(f"[dim]No history at {path}[/dim]")
        return

    buffer = get_history(path, persist=True, console=console)

    if clear:
        count = len(buffer)
        buffer.clear()
        console.print(f"[green]Cleared {count} entries from {path}[/green]")
        return

    entries = buffer.entries
    if limit is not None:
        entries = entries[-limit:]
    if not entries:
        console.print(f"[dim]History at {path} is empty[/dim]")
        return

    table = Table(show_header=False, box=None)
    table.add_column("#", style="bold cyan", justify="right")
    table.add_column("Entry")

    first = len(buffer) - len(entries) + 1
    for number, entry in enumerate(entries, start=first):
        table.add_row(str(number), Text(entry))

    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
