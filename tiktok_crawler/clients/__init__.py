"""API clients for external services."""

from .gemini import GeminiClient

__all__ = ["GeminiClient"]
