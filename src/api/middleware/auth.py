"""
Bearer-token guard for the summarize API.

When ``settings.api_key`` is set, requests under ``/api/v1/`` must send
``Authorization: Bearer <api_key>``. Health and docs routes stay open.
"""

import secrets

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.core.config import get_settings
from src.core.exceptions import UnauthorizedError

_PROTECTED_PREFIX = "/api/v1/"
_OPEN_PATHS = ("/api/v1/health",)
_OPEN_PREFIXES = ("/health", "/docs", "/openapi.json", "/redoc")


def _is_open(path: str) -> bool:
    if not path.startswith(_PROTECTED_PREFIX):
        return True
    return path in _OPEN_PATHS or path.startswith(_OPEN_PREFIXES)


def _bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


class ApiKeyAuthMiddleware(BaseHTTPMiddleware):
    """Reject unauthenticated /api/v1/ calls with a 401 error envelope."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        expected = get_settings().api_key
        if not expected or _is_open(request.url.path):
            return await call_next(request)

        token = _bearer_token(request)
        if token is None or not secrets.compare_digest(token.encode(), expected.encode()):
            exc = UnauthorizedError()
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.detail, "code": exc.code},
            )
        return await call_next(request)
