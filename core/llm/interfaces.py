"""
LLM Provider Interface - Abstract base for inference service providers.

This module defines the interface the matching pipeline depends on
(OpenAI, Ollama, Gemini's OpenAI-compatible endpoint, etc.).
"""
from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Abstract Interface for text-completion inference services.
    """

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Send a single prompt and return the raw reply text.

        The reply may be wrapped in markdown code fences; callers strip them
        before JSON parsing.

        Raises:
            TransportError: service unreachable or failing after retries
            RateLimitedError: still rate limited after retries
        """
        pass
