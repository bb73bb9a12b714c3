"""
Global error handling for the FastAPI application.

Catches RecapError subclasses, request validation errors (including
malformed JSON), and unhandled exceptions, converting them into a
consistent ``{error, code, details?}`` JSON envelope. ``details`` carries
the traceback of server errors outside production only.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import get_settings
from src.core.exceptions import BadRequestError, RecapError

logger = logging.getLogger(__name__)


def _error_body(error: str, code: str, exc: BaseException | None = None) -> dict:
    body: dict = {"error": error, "code": code}
    if exc is not None and not get_settings().is_production:
        body["details"] = "".join(traceback.format_exception(exc))
    return body


def _validation_message(exc: RequestValidationError) -> str:
    """Pick the user-facing 400 message for a request validation failure."""
    for err in exc.errors():
        loc = err.get("loc", ())
        if err.get("type") == "json_invalid":
            break
        if "recordingUrl" in loc:
            return "Recording URL is required"
    return BadRequestError().detail


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``RecapError`` - maps domain errors to structured JSON responses.
    2. ``RequestValidationError`` - malformed or incomplete bodies (400).
    3. ``Exception`` - catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(RecapError)
    async def recap_error_handler(request: Request, exc: RecapError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        if exc.status_code >= 500:
            logger.error("Error in %s %s: %s", request.method, request.url.path, exc.detail)
            content = _error_body(exc.detail, exc.code, exc)
        else:
            content = _error_body(exc.detail, exc.code)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed JSON and missing fields as 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content=_error_body(_validation_message(exc), "BAD_REQUEST"),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler for anything that escaped the domain hierarchy."""
        logger.exception("Unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_body(str(exc) or "Failed to summarize meeting", "INTERNAL_ERROR", exc),
        )
