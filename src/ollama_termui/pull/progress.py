"""Model download progress.

Hides how pull status lines are grouped into one entry per layer.
"""

import logging
from collections.abc import Callable

from ..llm import ChatProvider, ProtocolError, PullStatus, decode_pull_status

logger = logging.getLogger(__name__)


class PullProgress:
    """Ordered pull statuses, one entry per layer digest.

    Status lines without a digest ("pulling manifest", "success", ...) are
    appended as they arrive. Lines for a known digest only update that
    entry's progress.
    """

    def __init__(self) -> None:
        self._entries: list[PullStatus] = []
        self._by_digest: dict[str, int] = {}

    @property
    def entries(self) -> list[PullStatus]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def update(self, status: PullStatus) -> PullStatus:
        """Merge ``status`` and return the entry it now lives in."""
        if status.digest and status.digest in self._by_digest:
            index = self._by_digest[status.digest]
            merged = self._entries[index].model_copy(
                update={
                    "completed": status.completed,
                    "total": status.total or self._entries[index].total,
                }
            )
            self._entries[index] = merged
            return merged

        if status.digest:
            self._by_digest[status.digest] = len(self._entries)
        self._entries.append(status)
        return status


async def pull_model(
    provider: ChatProvider,
    model: str,
    on_progress: Callable[[PullStatus], None] | None = None,
) -> PullProgress:
    """Download ``model``, reporting each merged status.

    Args:
        provider: Chat provider to pull through
        model: Model name
        on_progress: Called with the merged entry after every status line

    Returns:
        The final progress

    Raises:
        TransportError: If the service cannot be reached
        ProtocolError: On an error status, a malformed line or an error event
    """
    progress = PullProgress()
    stream = await provider.pull_stream(model)
    try:
        async for line in stream:
            if not line.strip():
                continue
            status = decode_pull_status(line)
            if status.error:
                raise ProtocolError(status.error)
            entry = progress.update(status)
            if on_progress is not None:
                on_progress(entry)
    finally:
        await stream.aclose()

    logger.info("Pulled %s (%d steps)", model, len(progress))
    return progress
