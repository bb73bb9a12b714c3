"""
Gemini provider implementation.

Uses the Google Gen AI SDK (``google.genai``) async client. The SDK client
is created lazily so a missing API key surfaces as a ``ConfigurationError``
at request time rather than at import time.
"""

import logging

from google import genai
from google.genai import errors, types

from src.core.config import get_settings
from src.core.exceptions import ConfigurationError
from src.core.models import MediaPayload
from src.services.llm.base import BaseLLM, LLMProviderError

logger = logging.getLogger(__name__)


class GeminiLLM(BaseLLM):
    """Gemini provider sending inline media plus a text prompt."""

    def __init__(self, api_key: str | None = None) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self._client: genai.Client | None = None

    def validate(self) -> None:
        if not self._api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY is not configured in environment variables. "
                "Please add it to your .env file."
            )

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self.validate()
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(
        self,
        model: str,
        prompt: str,
        media: MediaPayload | None = None,
    ) -> str:
        """Send ``prompt`` (and optional inline media) to ``model``."""
        contents: list = []
        if media is not None:
            contents.append(types.Part.from_bytes(data=media.data, mime_type=media.content_type))
        contents.append(prompt)

        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(model=model, contents=contents)
        except errors.APIError as exc:
            logger.debug("Gemini API error from %s: %s", model, exc)
            raise LLMProviderError(str(exc), status_code=exc.code) from exc
        except Exception as exc:
            logger.debug("Unexpected Gemini error from %s: %s", model, exc)
            raise LLMProviderError(f"Gemini error: {exc}") from exc

        return response.text or ""
