"""Model pull module for ollama-termui."""

from .progress import PullProgress, pull_model

__all__ = ["PullProgress", "pull_model"]
