"""
Provider failure classification.

Maps a provider exception to an ``AttemptOutcome`` using the reported
status code when there is one, and message markers otherwise. Only
"model unavailable" and "rate limited" are worth working around; a
credential failure is fatal everywhere.
"""

from src.core.models import AttemptOutcome

_CREDENTIAL_MARKERS = (
    "api_key",
    "api key",
    "unauthorized",
    "unauthenticated",
    "forbidden",
    "permission",
    "invalid credential",
    "401",
    "403",
)
_NOT_FOUND_MARKERS = ("404", "not found", "not_found")
_RATE_LIMIT_MARKERS = ("429", "rate limit", "quota", "resource_exhausted", "resource exhausted")

_STATUS_OUTCOMES = {
    401: AttemptOutcome.invalid_credentials,
    403: AttemptOutcome.invalid_credentials,
    404: AttemptOutcome.model_unavailable,
    429: AttemptOutcome.rate_limited,
}


def _matches(message: str, markers: tuple[str, ...]) -> bool:
    return any(marker in message for marker in markers)


def classify_error(exc: BaseException) -> AttemptOutcome:
    """Classify a failed provider call.

    Args:
        exc: The exception raised by the provider; an optional
            ``status_code`` attribute takes precedence over the message.

    Returns:
        One of the failure members of ``AttemptOutcome``.
    """
    status = getattr(exc, "status_code", None)
    if status in _STATUS_OUTCOMES:
        return _STATUS_OUTCOMES[status]

    message = str(exc).lower()
    if _matches(message, _CREDENTIAL_MARKERS):
        return AttemptOutcome.invalid_credentials
    if _matches(message, _NOT_FOUND_MARKERS):
        return AttemptOutcome.model_unavailable
    if _matches(message, _RATE_LIMIT_MARKERS):
        return AttemptOutcome.rate_limited
    return AttemptOutcome.other_failure


def describe_failure(message: str) -> str:
    """Turn an unclassified provider message into a user-facing explanation."""
    lowered = message.lower()
    if "format" in lowered or "mimetype" in lowered or "mime type" in lowered:
        return (
            "Unsupported recording format. Please ensure the recording is in a "
            f"supported audio/video format (MP3, MP4, WAV, etc.). Error: {message}"
        )
    if "too large" in lowered or "size" in lowered:
        return (
            "Recording file is too large. Please use a shorter recording. "
            f"Error: {message}"
        )
    return f"Failed to generate summary: {message}"
