"""
Recording download with MIME-type resolution.

The content type comes from the response header when the server declares
one; otherwise it is inferred from the URL's file extension, defaulting to
``video/mp4`` (the format call recordings are published in).
"""

import logging
from urllib.parse import urlparse

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.core.exceptions import FetchFailedError, MediaTooLargeError
from src.core.models import MediaPayload

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "video/mp4"

# Checked in order; mp4/webm recordings are both sent as video/mp4.
_EXTENSION_TYPES: tuple[tuple[str, str], ...] = (
    (".mp4", "video/mp4"),
    (".webm", "video/mp4"),
    (".mp3", "audio/mpeg"),
    (".wav", "audio/wav"),
)


def infer_content_type(location: str) -> str:
    """Guess a MIME type from the URL, falling back to ``video/mp4``.

    The URL path is checked first so query strings on signed URLs do not
    interfere; a substring scan of the whole URL is the second chance.
    """
    path = urlparse(location).path.lower()
    for ext, content_type in _EXTENSION_TYPES:
        if path.endswith(ext):
            return content_type
    lowered = location.lower()
    for ext, content_type in _EXTENSION_TYPES:
        if ext in lowered:
            return content_type
    return DEFAULT_CONTENT_TYPE


class MediaFetcher:
    """Downloads a recording and reports its size and content type.

    Args:
        client: Optional shared ``httpx.AsyncClient`` (tests inject one with
            a ``MockTransport``). A short-lived client is created per fetch
            otherwise.
        soft_limit_mb: Payloads above this size log a warning but are still
            returned.
        hard_limit_mb: Payloads above this size raise ``MediaTooLargeError``;
            0 disables the check.
        timeout: Network timeout in seconds for a fresh client.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        soft_limit_mb: float = 20.0,
        hard_limit_mb: float = 0.0,
        timeout: float = 120.0,
    ) -> None:
        self._client = client
        self._soft_limit_mb = soft_limit_mb
        self._hard_limit_mb = hard_limit_mb
        self._timeout = timeout

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _download(self, location: str) -> httpx.Response:
        """GET the recording, retrying once on transport-level failures."""
        if self._client is not None:
            return await self._client.get(location, follow_redirects=True)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(location, follow_redirects=True)

    async def fetch(self, location: str) -> MediaPayload:
        """Download ``location`` and return its bytes with resolved metadata.

        Raises:
            FetchFailedError: On a non-success status or network failure.
            MediaTooLargeError: If the hard size limit is enabled and exceeded.
        """
        logger.info("Downloading recording from %s", location[:100])
        try:
            response = await self._download(location)
        except httpx.HTTPError as exc:
            raise FetchFailedError(location, reason=str(exc)) from exc

        if not response.is_success:
            raise FetchFailedError(
                location,
                remote_status=response.status_code,
                reason=response.reason_phrase,
            )

        data = response.content
        declared = response.headers.get("content-type", "").split(";")[0].strip()
        content_type = declared or infer_content_type(location)
        payload = MediaPayload(data=data, content_type=content_type, size_bytes=len(data))

        if payload.size_mb > self._soft_limit_mb:
            logger.warning(
                "File size (%.2fMB) exceeds recommended limit of %.0fMB",
                payload.size_mb,
                self._soft_limit_mb,
            )
        if self._hard_limit_mb > 0 and payload.size_mb > self._hard_limit_mb:
            raise MediaTooLargeError(payload.size_mb, self._hard_limit_mb)

        logger.info(
            "Fetched recording: content type %s, size %.2fMB",
            payload.content_type,
            payload.size_mb,
        )
        return payload
