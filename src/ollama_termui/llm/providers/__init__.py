from .ollama import DEFAULT_BASE_URL, OllamaProvider

__all__ = ["DEFAULT_BASE_URL", "OllamaProvider"]
