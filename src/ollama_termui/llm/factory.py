from typing import Any

from .base import ChatProvider
from .providers import OllamaProvider


def create_chat_provider(provider: str = "ollama", **config: Any) -> ChatProvider:
    """Create a chat provider instance.

    This factory function hides the instantiation logic for providers.

    Args:
        provider: Provider type ('ollama')
        **config: Provider-specific configuration
            For Ollama:
                - base_url: str (default: 'http://127.0.0.1:11434')
                - timeout: float | None (default: None, no timeout)

    Returns:
        Initialized chat provider instance

    Raises:
        ValueError: If provider type is not supported

    Examples:
        >>> provider = create_chat_provider(
        ...     "ollama",
        ...     base_url="http://localhost:11434"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "ollama":
        return OllamaProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'ollama'"
    )
