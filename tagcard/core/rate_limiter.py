"""In-process sliding-window rate limiting keyed by scope and client IP."""
from __future__ import annotations

import math
import threading
import time
from collections import deque
from typing import Deque, Dict

from fastapi import HTTPException, Request
from loguru import logger


class _RateLimiter:
    def __init__(self, clock=time.monotonic) -> None:
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()
            if len(hits) >= limit:
                retry_after = max(1, math.ceil(hits[0] + window_seconds - now))
                logger.info("Rate limit hit for {} (retry in {}s)", key, retry_after)
                raise HTTPException(
                    429,
                    "Too many requests. Try again shortly.",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_limiter = _RateLimiter()


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    """Raise 429 once ``limit`` requests from this IP land within ``window_seconds``."""
    _limiter.check(f"{scope}:{_client_ip(request)}", limit, window_seconds)


def reset_limits() -> None:
    _limiter.reset()
