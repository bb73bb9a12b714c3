"""
Model discovery with a static safety net.

``ModelCatalog.list_candidates()`` asks the provider's model-listing
endpoint which models the key can see. Discovered names are kept only if
they contain the model-family marker. Any discovery failure falls back to
the configured static list, unfiltered.
"""

import logging

import httpx

from src.core.config import get_settings
from src.core.models import DiscoverySource, ModelCandidate

logger = logging.getLogger(__name__)

_MAX_PAGES = 10


class ModelCatalog:
    """Ordered list of model candidates, discovered first, static second.

    Args:
        api_key: Provider key (falls back to settings).
        base_url: Provider REST base, e.g. ``.../v1beta``.
        fallback_models: Static list used when discovery fails.
        marker: Substring a discovered model name must contain.
        client: Optional shared ``httpx.AsyncClient``.
        timeout: Network timeout for a fresh client.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        fallback_models: list[str] | None = None,
        marker: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self._base_url = (base_url or settings.gemini_api_base_url).rstrip("/")
        self._fallback = list(
            fallback_models if fallback_models is not None else settings.gemini_fallback_models
        )
        self._marker = marker if marker is not None else settings.gemini_model_marker
        self._client = client
        self._timeout = timeout or settings.http_timeout_seconds

    async def _list_remote(self, client: httpx.AsyncClient) -> list[str]:
        """Page through ``GET /models`` and return bare model names."""
        names: list[str] = []
        page_token: str | None = None
        for _ in range(_MAX_PAGES):
            params = {"key": self._api_key}
            if page_token:
                params["pageToken"] = page_token
            response = await client.get(f"{self._base_url}/models", params=params)
            response.raise_for_status()
            data = response.json()
            for entry in data.get("models") or []:
                name = entry.get("name") or ""
                if name:
                    names.append(name.removeprefix("models/"))
            page_token = data.get("nextPageToken")
            if not page_token:
                break
        return names

    async def discover(self) -> list[str]:
        """Return every model name the provider lists (unfiltered)."""
        if self._client is not None:
            return await self._list_remote(self._client)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._list_remote(client)

    def _fallback_candidates(self) -> list[ModelCandidate]:
        return [ModelCandidate(name, DiscoverySource.static_fallback) for name in self._fallback]

    async def list_candidates(self) -> list[ModelCandidate]:
        """Return candidates in preference order.

        An empty result means discovery succeeded but nothing matched the
        marker (or the static list is empty); the caller must fail with
        ``NoModelsAvailableError``.
        """
        try:
            available = await self.discover()
        except Exception as exc:
            logger.warning("Could not fetch model list, using default models: %s", exc)
            return self._fallback_candidates()

        if not available:
            logger.warning("Model list was empty, using default models")
            return self._fallback_candidates()

        logger.info("Available models: %s", ", ".join(available))
        return [
            ModelCandidate(name, DiscoverySource.discovered)
            for name in available
            if self._marker in name
        ]
