"""Concrete history backing stores.

- FileHistoryStore: plain text, one entry per line, rewritten in full
- InMemoryHistoryStore: session-only, lost when the app exits
"""

import os
from collections.abc import Iterable
from pathlib import Path

from .base import HistoryStore

DEFAULT_HISTORY_PATH = Path.home() / ".ollama" / "history"


class FileHistoryStore(HistoryStore):
    """History stored in a plain text file, one entry per line.

    The file is created on demand with owner-only permissions.
    Bytes that are not valid UTF-8 survive a load and save unchanged.
    """

    def __init__(self, path: str | Path = DEFAULT_HISTORY_PATH):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        """Location of the history file."""
        return self._path

    def load(self) -> list[str]:
        """Read all lines; a missing file is created empty."""
        fd = os.open(self._path, os.O_RDONLY | os.O_CREAT, 0o600)
        with open(fd, encoding="utf-8", errors="surrogateescape") as f:
            return [line.rstrip("\r\n") for line in f]

    def save(self, entries: Iterable[str]) -> None:
        """Truncate the file and write every entry newline-terminated."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with open(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
            for entry in entries:
                f.write(entry + "\n")

    @property
    def backend_type(self) -> str:
        return "file"


class InMemoryHistoryStore(HistoryStore):
    """In-memory history store (session-only).

    Suitable for tests and for embedding without a history file.
    """

    def __init__(self, entries: Iterable[str] | None = None):
        self._entries: list[str] = list(entries or [])

    def load(self) -> list[str]:
        return list(self._entries)

    def save(self, entries: Iterable[str]) -> None:
        self._entries = list(entries)

    @property
    def backend_type(self) -> str:
        return "memory"
