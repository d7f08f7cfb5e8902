"""Factory for creating history backing stores."""

from typing import Any

from .base import HistoryStore


def create_history_store(
    backend: str = "file",
    **kwargs: Any
) -> HistoryStore:
    """Create a history backing store.

    Args:
        backend: Backend type ("file" or "memory")
        **kwargs: Backend-specific configuration
            For file:
                - path: str | Path (default: ~/.ollama/history)
            For memory:
                - entries: Iterable[str] | None

    Returns:
        HistoryStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "file":
        from .stores import FileHistoryStore
        return FileHistoryStore(**kwargs)

    elif backend == "memory":
        from .stores import InMemoryHistoryStore
        return InMemoryHistoryStore(**kwargs)

    raise ValueError(
        f"Unsupported history backend: {backend}. "
        f"Supported backends: file, memory"
    )
