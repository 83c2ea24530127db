"""Middleware that only admits requests coming from the configured browser origin."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from src.exceptions import AccessDeniedException
from src.middleware.request_id import format_context, request_context

logger = logging.getLogger(__name__)

# Routes reachable without an allowed Origin/Referer
EXCLUDED_ROUTES = [
    "/health",
    "/api/docs",
    "/api/openapi.json",
    "/api/redoc",
]


def _origin_of(url: str) -> str:
    """Reduce a URL (e.g. a Referer) to ``scheme://host[:port]``."""
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}"


def is_allowed(origin: str | None, referer: str | None, allowed_origin: str) -> bool:
    """Decide whether a request's Origin/Referer pair matches *allowed_origin*.

    Origin is mandatory and must equal the allowed origin; a Referer, when
    sent, must point at it too. An empty *allowed_origin* admits nothing.
    """
    if not allowed_origin or not origin:
        return False
    if origin.strip().rstrip("/") != allowed_origin:
        return False
    if referer and _origin_of(referer) != allowed_origin:
        return False
    return True


class OriginCheckMiddleware(BaseHTTPMiddleware):
    """Reject requests whose Origin or Referer does not match the allow-listed origin.

    Runs inside CORSMiddleware, so preflight requests are answered before they
    reach this check.
    """

    def __init__(self, app: ASGIApp, allowed_origin: str) -> None:
        super().__init__(app)
        self.allowed_origin = allowed_origin.strip().rstrip("/")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if any(request.url.path.startswith(route) for route in EXCLUDED_ROUTES):
            return await call_next(request)

        origin = request.headers.get("origin")
        referer = request.headers.get("referer")
        if not is_allowed(origin, referer, self.allowed_origin):
            denied = AccessDeniedException()
            logger.warning("Origin check failed %s", format_context(request_context(request)))
            return JSONResponse(status_code=denied.status_code, content={"error": denied.message})

        return await call_next(request)
