"""HTTP Middleware — security headers and per-client rate limiting.

Invariants:
    - Every response (including errors and 429s) carries the security headers
    - Rate limiting keys on the client IP; health probes are never limited
    - A limited request never reaches a route handler

Design Decisions:
    - BaseHTTPMiddleware over raw ASGI: both concerns only touch request/response headers
    - Header set mirrors Helmet defaults that make sense for a JSON API
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from roster.core.errors import RateLimitExceededError
from roster.infrastructure.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

RATE_LIMIT_EXEMPT_PREFIXES = ("/health",)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds SECURITY_HEADERS to every response without overriding route-set values."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests over the limiter budget with 429 and Retry-After."""

    def __init__(self, app: ASGIApp, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(RATE_LIMIT_EXEMPT_PREFIXES):
            return await call_next(request)

        key = client_key(request)
        if not self.limiter.check(key):
            error = RateLimitExceededError(self.limiter.retry_after(key))
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "client": key,
                    "path": request.url.path,
                    "error_code": error.code,
                },
            )
            return JSONResponse(
                status_code=error.http_status,
                content=error.to_response(),
                headers={"Retry-After": str(error.retry_after_seconds)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.remaining(key))
        return response
