from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from .models import ChatMessage, EventStream


class ChatProvider(ABC):
    """Abstract base class for chat service providers.

    This module hides the design decision of how the chat service is reached.
    Implementations must handle provider-specific details like:
    - HTTP client setup
    - Request format conversion
    - Mapping transport and status failures onto ChatError subclasses

    Providers make exactly one attempt per call; retry policy belongs to the
    caller.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            stream = await provider.chat_stream(model, messages)
        # Automatically cleaned up
    """

    @abstractmethod
    async def chat_stream(
        self,
        model: str,
        messages: Iterable[ChatMessage],
        **kwargs: Any
    ) -> EventStream:
        """Start a streaming chat completion.

        Args:
            model: Model name
            messages: Conversation so far, oldest first
            **kwargs: Provider-specific request fields

        Returns:
            EventStream yielding one raw JSON line per partial response.
            The caller owns the stream and must close it.

        Raises:
            TransportError: If the service cannot be reached
            ProtocolError: If the service answers with an error status
        """
        pass

    @abstractmethod
    async def pull_stream(self, model: str) -> EventStream:
        """Start downloading ``model``, streaming progress lines.

        Raises:
            TransportError: If the service cannot be reached
            ProtocolError: If the service answers with an error status
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "ChatProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the provider on exit.

        An "Event loop is closed" RuntimeError from the transport is ignored:
        it only means the loop shut down before the connection pool did
        (https://github.com/encode/httpx/issues/914).
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
