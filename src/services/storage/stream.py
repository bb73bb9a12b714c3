"""
Summary store backed by Stream Video call records.

The summary lives in the call's ``custom`` data under the ``summary`` key.
The Stream SDK is synchronous, so each call runs in a worker thread.
"""

import asyncio
import logging

from getstream import Stream

from src.core.config import get_settings
from src.core.exceptions import ConfigurationError, StoreReadError, StoreWriteError
from src.services.storage.base import BaseSummaryStore

logger = logging.getLogger(__name__)

SUMMARY_FIELD = "summary"


class StreamCallStore(BaseSummaryStore):
    """Reads and writes ``call.custom["summary"]`` on Stream Video calls.

    Args:
        api_key: Stream API key (falls back to settings).
        api_secret: Stream API secret (falls back to settings).
        call_type: Stream call type, ``"default"`` for regular meetings.
        client: Optional pre-built ``Stream`` client (used in tests).
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        call_type: str | None = None,
        client: Stream | None = None,
    ) -> None:
        settings = get_settings()
        self._call_type = call_type or settings.stream_call_type
        if client is None:
            api_key = api_key or settings.stream_api_key
            api_secret = api_secret or settings.stream_api_secret
            if not api_key or not api_secret:
                raise ConfigurationError("Stream API key and secret are required")
            client = Stream(api_key=api_key, api_secret=api_secret)
        self._client = client

    def _read_custom(self, call_id: str) -> dict:
        call = self._client.video.call(self._call_type, call_id)
        response = call.get()
        return dict(response.data.call.custom or {})

    def _write_summary(self, call_id: str, text: str) -> None:
        custom = self._read_custom(call_id)
        custom[SUMMARY_FIELD] = text
        call = self._client.video.call(self._call_type, call_id)
        call.update(custom=custom)

    async def get_existing(self, call_id: str) -> str | None:
        try:
            custom = await asyncio.to_thread(self._read_custom, call_id)
        except Exception as exc:
            raise StoreReadError(call_id, str(exc)) from exc
        return custom.get(SUMMARY_FIELD) or None

    async def set_summary(self, call_id: str, text: str) -> None:
        try:
            await asyncio.to_thread(self._write_summary, call_id, text)
        except Exception as exc:
            raise StoreWriteError(call_id, str(exc)) from exc
        logger.info("Summary saved to call: %s", call_id)
