"""Providers for cigar-lens."""

from cigar_lens.providers.base import BaseProvider
from cigar_lens.providers.gemini import GeminiProvider
from cigar_lens.providers.openai_chat import OpenAIProvider

__all__ = ["BaseProvider", "GeminiProvider", "OpenAIProvider"]
