"""
API-key rate limiting middleware using a fixed-window counter.

Usage:
    from medrecords.api.middleware.rate_limit import InMemoryRateLimitStore, RateLimitMiddleware

    store = InMemoryRateLimitStore()
    app.add_middleware(RateLimitMiddleware, store=store, max_requests=100, window_seconds=60)

Only paths under the API prefix are checked. Each request must carry an
``X-API-Key`` header; requests without one are rejected with 401 before any
limiter state is read or written.

The counter lives behind the ``RateLimitStore`` interface. The in-memory
store serialises every read-modify-write with an ``asyncio.Lock``, so it is
exact within one process and knows nothing about other processes.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from medrecords.api.errors import internal_error_response

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


@dataclass
class RateLimitInfo:
    count: int
    reset_time: float  # epoch seconds


class RateLimitStore(ABC):
    """Storage for per-key fixed-window counters."""

    @abstractmethod
    async def hit(self, key: str, now: float, window_seconds: float) -> RateLimitInfo:
        """Count one request for *key* and return a snapshot of its window.

        Starts a new window (count 1) when the key is unknown or its window
        has expired, otherwise increments the live window.
        """

    @abstractmethod
    async def sweep(self, now: float) -> int:
        """Drop expired windows. Returns how many were removed."""

    @abstractmethod
    async def get(self, key: str) -> Optional[RateLimitInfo]:
        ...


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store (single-process only)."""

    def __init__(self):
        self._entries: dict[str, RateLimitInfo] = {}
        self._lock = asyncio.Lock()

    async def hit(self, key: str, now: float, window_seconds: float) -> RateLimitInfo:
        async with self._lock:
            info = self._entries.get(key)
            if info is None or now > info.reset_time:
                info = RateLimitInfo(count=1, reset_time=now + window_seconds)
                self._entries[key] = info
            else:
                info.count += 1
            return RateLimitInfo(count=info.count, reset_time=info.reset_time)

    async def sweep(self, now: float) -> int:
        async with self._lock:
            expired = [k for k, info in self._entries.items() if now > info.reset_time]
            for key in expired:
                del self._entries[key]
            return len(expired)

    async def get(self, key: str) -> Optional[RateLimitInfo]:
        async with self._lock:
            info = self._entries.get(key)
            if info is None:
                return None
            return RateLimitInfo(count=info.count, reset_time=info.reset_time)

    def __len__(self) -> int:
        return len(self._entries)


def format_reset_time(reset_time: float) -> str:
    """Epoch seconds -> ISO-8601 UTC with millisecond precision, e.g. ``2024-01-01T00:01:00.000Z``."""
    dt = datetime.fromtimestamp(reset_time, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


async def run_sweeper(
    store: RateLimitStore,
    interval_seconds: float,
    clock: Callable[[], float] = time.time,
) -> None:
    """Periodically drop expired windows until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await store.sweep(clock())
            if removed:
                logger.debug("Rate limit sweep removed %d expired entries", removed)
        except Exception:
            logger.exception("Rate limit sweep failed")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window limiter keyed by the ``X-API-Key`` header."""

    def __init__(
        self,
        app,
        store: RateLimitStore,
        max_requests: int = 100,
        window_seconds: int = 60,
        path_prefix: str = "/api",
        api_keys: Optional[list[str]] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(app)
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix.rstrip("/")
        self.api_keys = set(api_keys or [])
        self.clock = clock

    def _applies_to(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    def _headers(self, remaining: int, reset_time: float) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(remaining, 0)),
            "X-RateLimit-Reset": format_reset_time(reset_time),
        }

    async def dispatch(self, request: Request, call_next):
        if not self._applies_to(request.url.path):
            return await call_next(request)

        api_key = request.headers.get(API_KEY_HEADER)
        if not api_key:
            return JSONResponse(
                status_code=401,
                content={
                    "success": False,
                    "error": "API key required",
                    "message": "Please provide an API key in the X-API-Key header",
                },
            )
        if self.api_keys and api_key not in self.api_keys:
            return JSONResponse(
                status_code=401,
                content={
                    "success": False,
                    "error": "Invalid API key",
                    "message": "The provided API key is not recognised",
                },
            )

        info = await self.store.hit(api_key, self.clock(), self.window_seconds)

        if info.count > self.max_requests:
            reset = format_reset_time(info.reset_time)
            logger.warning("Rate limit exceeded for API key ending ...%s", api_key[-4:])
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "error": "Rate limit exceeded",
                    "message": (
                        f"Too many requests. Limit is {self.max_requests} requests "
                        f"per {self.window_seconds} seconds"
                    ),
                    "resetTime": reset,
                },
                headers=self._headers(0, info.reset_time),
            )

        headers = self._headers(self.max_requests - info.count, info.reset_time)
        try:
            response = await call_next(request)
        except Exception:
            return internal_error_response(request, headers=headers)
        response.headers.update(headers)
        return response
