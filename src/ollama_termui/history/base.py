"""Abstract base class for input history backing stores.

This module defines the interface for persisting the input history.
The abstraction hides:
- Storage format (plain text file, in-memory list)
- Persistence mechanism and its failure modes
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable


class HistoryStore(ABC):
    """Abstract input history backing store.

    Stores hold a flat, ordered list of entries (oldest first). They know
    nothing about capacity or de-duplication; those rules belong to the
    buffer that replays the entries.
    """

    @abstractmethod
    def load(self) -> list[str]:
        """Read every stored entry, oldest first.

        Raises:
            OSError: If the underlying storage cannot be read
        """

    @abstractmethod
    def save(self, entries: Iterable[str]) -> None:
        """Overwrite the stored entries with ``entries``.

        Raises:
            OSError: If the underlying storage cannot be written
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
