"""
Meeting Recap exception hierarchy.

All application-specific exceptions inherit from RecapError,
enabling centralized error handling in the API middleware layer.
Store errors are part of the hierarchy but are always caught by
the summarization service and never reach a client.
"""

from datetime import UTC, datetime


class RecapError(Exception):
    """Base exception for all Meeting Recap errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "RECAP_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class UnauthorizedError(RecapError):
    """Raised when the caller is not authenticated."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail=detail, code="UNAUTHORIZED", status_code=401)


class BadRequestError(RecapError):
    """Raised for malformed JSON bodies or missing required fields."""

    def __init__(self, detail: str = "Invalid request body. Expected JSON.") -> None:
        super().__init__(detail=detail, code="BAD_REQUEST", status_code=400)


class ConfigurationError(RecapError):
    """Raised when a required setting (e.g. the provider key) is missing."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="CONFIGURATION_ERROR", status_code=500)


class FetchFailedError(RecapError):
    """Raised when the recording URL is unreachable or returns a non-success status."""

    def __init__(self, location: str, remote_status: int | None = None, reason: str = "") -> None:
        self.location = location
        self.remote_status = remote_status
        if remote_status is not None:
            detail = f"Failed to fetch recording: HTTP {remote_status}"
            if reason:
                detail = f"{detail} {reason}"
        else:
            detail = f"Failed to fetch recording: {reason or 'network error'}"
        super().__init__(detail=detail, code="FETCH_FAILED", status_code=500)


class MediaTooLargeError(RecapError):
    """Raised when a payload exceeds the configured hard size limit."""

    def __init__(self, size_mb: float, limit_mb: float) -> None:
        self.size_mb = size_mb
        self.limit_mb = limit_mb
        super().__init__(
            detail=(
                f"Recording file is too large ({size_mb:.2f}MB, limit {limit_mb:.0f}MB). "
                "Please use a shorter recording."
            ),
            code="MEDIA_TOO_LARGE",
            status_code=500,
        )


class InvalidCredentialsError(RecapError):
    """Raised when the model provider rejects the API key. Never retried."""

    def __init__(self, provider_message: str = "") -> None:
        self.provider_message = provider_message
        detail = "Invalid API key or insufficient permissions. Please check GEMINI_API_KEY."
        if provider_message:
            detail = f"{detail} Error: {provider_message}"
        super().__init__(detail=detail, code="INVALID_CREDENTIALS", status_code=500)


class NoModelsAvailableError(RecapError):
    """Raised when the catalog is empty or every candidate failed."""

    def __init__(self, tried: list[str] | None = None, last_error: str = "") -> None:
        self.tried = list(tried or [])
        self.last_error = last_error
        if self.tried:
            detail = f"No available Gemini model found. Tried: {', '.join(self.tried)}."
        else:
            detail = (
                "No Gemini models found. Please check your API key and ensure "
                "you have access to Gemini models."
            )
        if last_error:
            detail = f"{detail} Error: {last_error}"
        super().__init__(detail=detail, code="NO_MODELS_AVAILABLE", status_code=500)


class RateLimitedError(RecapError):
    """Raised when the rate-limit retry budget is exhausted."""

    def __init__(self, model: str = "") -> None:
        self.model = model
        super().__init__(
            detail="Rate limit exceeded. Please wait a few minutes and try again.",
            code="RATE_LIMITED",
            status_code=500,
        )


class EmptyGenerationError(RecapError):
    """Raised when the provider answers successfully but with no text."""

    def __init__(self, model: str = "") -> None:
        self.model = model
        super().__init__(
            detail="No summary generated from Gemini API",
            code="EMPTY_GENERATION",
            status_code=500,
        )


class GenerationFailedError(RecapError):
    """Raised for any other provider failure; wraps the underlying message."""

    def __init__(self, detail: str = "Failed to generate summary", model: str = "") -> None:
        self.model = model
        super().__init__(detail=detail, code="GENERATION_FAILED", status_code=500)


class StoreReadError(RecapError):
    """Raised when the summary store cannot be read (non-fatal)."""

    def __init__(self, call_id: str, detail: str = "") -> None:
        self.call_id = call_id
        super().__init__(
            detail=f"Failed to read summary for call '{call_id}': {detail}",
            code="STORE_READ_FAILED",
            status_code=500,
        )


class StoreWriteError(RecapError):
    """Raised when the summary store cannot be written (non-fatal)."""

    def __init__(self, call_id: str, detail: str = "") -> None:
        self.call_id = call_id
        super().__init__(
            detail=f"Failed to save summary for call '{call_id}': {detail}",
            code="STORE_WRITE_FAILED",
            status_code=500,
        )
