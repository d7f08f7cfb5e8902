import json
import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any

import httpx

from ..base import ChatProvider
from ..exceptions import ProtocolError, TransportError
from ..models import ChatMessage, EventStream

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:11434"


def _error_message(response: httpx.Response, body: bytes) -> str:
    """Pick the most useful description of an error response.

    Ollama answers errors with ``{"error": "..."}``; anything else is shown
    verbatim, falling back to the status line when the body is empty.
    """
    text = body.decode("utf-8", errors="replace").strip()
    if text:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            return text
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return text
    return f"{response.status_code} {response.reason_phrase}".strip()


class OllamaProvider(ChatProvider):
    """Ollama chat provider over the native NDJSON API.

    Hidden design decisions:
    - HTTP client initialization (httpx.AsyncClient)
    - Endpoint paths and request body shape
    - Error response parsing
    - Transport error mapping
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        **client_kwargs: Any
    ):
        """Initialize Ollama provider.

        Args:
            base_url: Ollama server address
            timeout: Request timeout in seconds (None waits indefinitely)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            **client_kwargs
        )

    @property
    def base_url(self) -> str:
        """Get the server address."""
        return self._base_url

    async def chat_stream(
        self,
        model: str,
        messages: Iterable[ChatMessage],
        **kwargs: Any
    ) -> EventStream:
        """Start a streaming chat completion against /api/chat.

        Args:
            model: Model name
            messages: Conversation history
            **kwargs: Additional Ollama request fields (e.g. options)

        Returns:
            EventStream of NDJSON lines
        """
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            **kwargs,
        }
        return await self._post_stream("/api/chat", payload)

    async def pull_stream(self, model: str) -> EventStream:
        """Start pulling ``model`` via /api/pull."""
        return await self._post_stream("/api/pull", {"model": model})

    async def _post_stream(self, path: str, payload: dict[str, Any]) -> EventStream:
        logger.debug("POST %s%s", self._base_url, path)
        request = self._client.build_request("POST", path, json=payload)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        if response.status_code >= 400:
            try:
                body = await response.aread()
            except httpx.HTTPError:
                body = b""
            finally:
                await response.aclose()
            message = _error_message(response, body)
            logger.warning("%s failed with %d: %s", path, response.status_code, message)
            raise ProtocolError(message, http_status=response.status_code)

        return EventStream(self._iter_lines(response), response.aclose)

    async def _iter_lines(self, response: httpx.Response) -> AsyncIterator[str]:
        """Yield lines until the server closes the connection."""
        try:
            async for line in response.aiter_lines():
                yield line
        except httpx.RequestError as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
