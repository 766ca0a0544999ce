"""Security headers and request logging middleware."""

from __future__ import annotations

import time

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject security headers on every response and log slow requests."""

    slow_request_ms: float = 1000.0

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        started = time.monotonic()
        response: Response = await call_next(request)
        elapsed_ms = (time.monotonic() - started) * 1000
        if elapsed_ms > self.slow_request_ms:
            logger.warning(
                f"[API] Slow request {request.method} {request.url.path} took {elapsed_ms:.0f}ms"
            )

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # API only serves JSON and the event stream
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; connect-src 'self' ws: wss:"
        )
        return response
