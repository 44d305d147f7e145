"""Generation clients wrapping the remote multimodal model."""

from .base import GenerationClient
from .gemini_client import GeminiClient

__all__ = ["GenerationClient", "GeminiClient"]
