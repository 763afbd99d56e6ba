"""Rate limiting middleware for the MEPCalc API."""

import time
from collections import defaultdict
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

WINDOW_SECONDS = 60


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window rate limiter, per client address.

    Export routes have their own, stricter budget on top of the general one.
    """

    # Prune stale client keys every 5 minutes
    _CLEANUP_INTERVAL = 300

    def __init__(self, app, requests_per_minute: int = 60, export_requests_per_minute: int = 20):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.export_requests_per_minute = export_requests_per_minute
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._last_cleanup = time.time()

    def _get_client_id(self, request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        if request.client:
            return request.client.host
        return "unknown"

    def _is_export_route(self, path: str) -> bool:
        return path.startswith("/api/export")

    def _cleanup_stale_keys(self) -> None:
        """Drop clients with no request inside the current window."""
        now = time.time()
        if now - self._last_cleanup < self._CLEANUP_INTERVAL:
            return
        self._last_cleanup = now
        window_start = now - WINDOW_SECONDS
        stale_keys = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for key in stale_keys:
            del self._requests[key]

    def _check_rate(self, client_id: str, limit: int) -> bool:
        """Record a request and return False if the client is over its limit."""
        now = time.time()
        window_start = now - WINDOW_SECONDS

        self._requests[client_id] = [
            t for t in self._requests[client_id] if t > window_start
        ]

        if len(self._requests[client_id]) >= limit:
            return False

        self._requests[client_id].append(now)
        return True

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/api/health":
            return await call_next(request)

        self._cleanup_stale_keys()

        client_id = self._get_client_id(request)

        if self._is_export_route(request.url.path):
            if not self._check_rate(f"{client_id}:export", self.export_requests_per_minute):
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Export rate limit exceeded. Please wait before trying again."},
                )

        if not self._check_rate(client_id, self.requests_per_minute):
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Please wait before trying again."},
            )

        return await call_next(request)
