"""Bounded input history with a browsing cursor.

Hides how past inputs are kept, de-duplicated, navigated and persisted.
"""

import logging
from collections import deque
from collections.abc import Iterator

from .base import HistoryStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000


class HistoryBuffer:
    """Order-preserving input history with up/down navigation.

    Entries are oldest first. The cursor is either at rest (``None``) or the
    index of the entry currently shown. Consecutive duplicates are dropped
    and the oldest entry is evicted once the buffer holds more than
    ``max_size`` entries.

    When ``persist`` is enabled, every push rewrites the whole buffer to the
    backing store. Store failures are logged and otherwise ignored; the
    buffer keeps working in memory.

    Example:
        history = HistoryBuffer(max_size=100, store=FileHistoryStore())
        history.push("hello")
        history.previous_line()  # "hello"
        history.next_line()      # "" (back at rest)
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        persist: bool = False,
        store: HistoryStore | None = None,
    ) -> None:
        if max_size < 0:
            raise ValueError(f"max_size must be >= 0, got {max_size}")

        self._entries: deque[str] = deque()
        self._cursor: int | None = None
        self._max_size = max_size
        self._store = store
        # Replay without writing back what was just read
        self._persist = False
        self._load()
        self._persist = persist

    def _load(self) -> None:
        if self._store is None:
            return
        try:
            lines = self._store.load()
        except (OSError, ValueError) as e:
            logger.debug("History load failed, continuing in memory: %s", e)
            return

        for line in lines:
            self.push(line)
        logger.debug("Loaded %d history entries (%d kept)", len(lines), len(self._entries))

    def _save(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save(self._entries)
        except (OSError, ValueError) as e:
            logger.debug("History save failed, continuing in memory: %s", e)

    @property
    def max_size(self) -> int:
        """Maximum number of entries kept."""
        return self._max_size

    @property
    def persist(self) -> bool:
        """Whether each push rewrites the backing store."""
        return self._persist

    @persist.setter
    def persist(self, enabled: bool) -> None:
        self._persist = enabled

    @property
    def store(self) -> HistoryStore | None:
        """The backing store, if any."""
        return self._store

    @property
    def entries(self) -> list[str]:
        """Snapshot of the entries, oldest first."""
        return list(self._entries)

    @property
    def at_rest(self) -> bool:
        """True when the cursor is not pointing at any entry."""
        return self._cursor is None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def push(self, value: str) -> None:
        """Append ``value`` unless it repeats the newest entry.

        The cursor always returns to rest. Evicting the oldest entry can
        therefore never leave the cursor pointing at a removed entry.
        """
        self._cursor = None

        if self._entries and self._entries[-1] == value:
            return

        self._entries.append(value)
        while len(self._entries) > self._max_size:
            self._entries.popleft()

        if self._persist:
            self._save()

    def previous_line(self) -> str:
        """Step toward older entries.

        Returns:
            The entry now under the cursor, or "" when the buffer is empty or
            the cursor already sits on the oldest entry.
        """
        if not self._entries:
            return ""

        if self._cursor is None:
            self._cursor = len(self._entries) - 1
            return self._entries[self._cursor]

        if self._cursor > 0:
            self._cursor -= 1
            return self._entries[self._cursor]

        return ""

    def next_line(self) -> str:
        """Step toward newer entries.

        Returns:
            The entry now under the cursor, or "" when at rest or when
            stepping past the newest entry (which puts the cursor at rest).
        """
        if self._cursor is None:
            return ""

        if self._cursor >= len(self._entries) - 1:
            self._cursor = None
            return ""

        self._cursor += 1
        return self._entries[self._cursor]

    def clear(self) -> None:
        """Drop every entry, writing the empty history when persisting."""
        self._entries.clear()
        self._cursor = None
        if self._persist:
            self._save()


def load_history(
    max_size: int = DEFAULT_MAX_SIZE,
    persist: bool = True,
    store: HistoryStore | None = None,
) -> HistoryBuffer:
    """Build a history buffer restored from the default history file.

    Args:
        max_size: Maximum number of entries kept
        persist: Rewrite the file on every push
        store: Backing store (default: FileHistoryStore at ~/.ollama/history)

    Returns:
        HistoryBuffer replaying the stored entries
    """
    if store is None:
        from .factory import create_history_store
        store = create_history_store("file")
    return HistoryBuffer(max_size=max_size, persist=persist, store=store)
