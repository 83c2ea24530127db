"""Middleware that assigns a request ID and logs every inbound request."""

import logging
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger(__name__)


def request_context(request: Request) -> dict[str, str]:
    """Request attributes attached to every log line about this request."""
    return {
        "request_id": getattr(request.state, "request_id", "unknown"),
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query,
        "origin": request.headers.get("origin", ""),
        "referer": request.headers.get("referer", ""),
    }


def format_context(context: dict[str, str]) -> str:
    return " ".join(f"{key}={value!r}" for key, value in context.items())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate or propagate a request ID for every HTTP request.

    If the incoming request carries an ``X-Request-ID`` header, that value is
    reused.  Otherwise a new UUID-4 is generated.  The ID is stored on
    ``request.state.request_id`` and echoed back via the ``X-Request-ID``
    response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        logger.info("Request received %s", format_context(request_context(request)))

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
