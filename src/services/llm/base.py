"""
Abstract base class for generative-model providers.

Provider implementations translate their SDK exceptions into
``LLMProviderError`` so that the retry / fallback policy in the
summarization layer can classify failures without importing any SDK.
"""

from abc import ABC, abstractmethod

from src.core.models import MediaPayload


class LLMProviderError(RuntimeError):
    """A provider call failed.

    Attributes:
        status_code: HTTP-like status reported by the provider, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BaseLLM(ABC):
    """Interface that every generative-model provider must implement."""

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if the provider cannot be used.

        Called once per request before any media is downloaded.
        """

    @abstractmethod
    async def generate(
        self,
        model: str,
        prompt: str,
        media: MediaPayload | None = None,
    ) -> str:
        """Run one generation call against ``model``.

        Args:
            model: Provider model identifier (e.g. ``gemini-1.5-flash``).
            prompt: Instruction text.
            media: Optional inline recording sent alongside the prompt.

        Returns:
            The generated text, or an empty string if the provider
            returned none.

        Raises:
            LLMProviderError: On any provider or transport failure.
        """
