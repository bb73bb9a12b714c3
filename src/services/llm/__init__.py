"""
LLM module - Generative-model abstraction layer.

Factory function for creating provider instances based on configuration.
"""

from .base import BaseLLM, LLMProviderError
from .catalog import ModelCatalog

__all__ = ["BaseLLM", "LLMProviderError", "ModelCatalog", "create_llm"]


def create_llm(provider: str = "gemini", **kwargs) -> BaseLLM:
    """
    Factory function to create LLM instance based on provider.

    Args:
        provider: LLM provider name (only "gemini" is supported)
        **kwargs: Provider-specific configuration

    Returns:
        BaseLLM implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "gemini":
        from .gemini import GeminiLLM

        return GeminiLLM(**kwargs)
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
