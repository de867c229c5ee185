"""
API Middleware

- RequestLoggingMiddleware: per-request ID in the log context, access log
  and request latency histogram
- RateLimitMiddleware: per-client sliding window for dashboard traffic
- SecurityHeadersMiddleware: response hardening; dashboard data is never cached
"""

import asyncio
import time
import uuid
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Iterable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import Histogram
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

logger = structlog.get_logger(__name__)

REQUEST_DURATION = Histogram(
    "mfg_dashboard_http_request_duration_seconds",
    "Dashboard API request latency",
    ["method", "route", "status"],
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}


def _route_template(request: Request) -> str:
    """Matched route path such as /api/v1/dashboard/stats; raw path when unmatched"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log and latency histogram, with the request ID bound for every log event"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        REQUEST_DURATION.labels(
            method=request.method,
            route=_route_template(request),
            status=str(response.status_code),
        ).observe(elapsed)

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "Request served",
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 2),
            client=request.client.host if request.client else None,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed * 1000:.2f}ms"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter keyed by client address.

    Probe and scrape paths are never limited. State is per process, so a
    multi-worker deployment allows max_requests per worker.
    """

    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: int = 60,
        exempt_prefixes: Iterable[str] = ("/api/v1/health", "/metrics"),
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.exempt_prefixes = tuple(exempt_prefixes)
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()

    async def _admit(self, client_id: str) -> int:
        """Record a hit and return the remaining budget, or -1 when over the limit"""
        now = time.monotonic()
        async with self._lock:
            hits = self._hits[client_id]
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return -1
            hits.append(now)
            return self.max_requests - len(hits)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path.startswith(self.exempt_prefixes):
            return await call_next(request)

        client_id = request.client.host if request.client else "unknown"
        remaining = await self._admit(client_id)

        if remaining < 0:
            logger.warning("Rate limit exceeded", client=client_id, limit=self.max_requests)
            return JSONResponse(
                {"detail": "Rate limit exceeded"},
                status_code=429,
                headers={
                    "Retry-After": str(self.window_seconds),
                    "X-RateLimit-Limit": str(self.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add SECURITY_HEADERS to every response"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response
