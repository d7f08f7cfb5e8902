"""Streaming metrics for ollama-termui."""

from .rate import DEFAULT_INTERVAL, Bucket, RateMeter

__all__ = ["Bucket", "DEFAULT_INTERVAL", "RateMeter"]
