"""Simple in-memory fixed-window rate limiting keyed by client IP."""

import time
from typing import Callable, Dict, Optional, Tuple

from starlette.requests import Request


def parse_limit(value: Optional[object]) -> Optional[int]:
    if value is None:
        return None
    try:
        limit = int(value)
        return limit if limit > 0 else None
    except (TypeError, ValueError):
        return None


class FixedWindowLimiter:
    def __init__(self, limit_per_minute: int, time_fn: Callable[[], float] = time.monotonic, window_seconds: float = 60.0):
        self.limit = limit_per_minute
        self.time_fn = time_fn
        self.window_seconds = window_seconds
        self.windows: Dict[str, Tuple[float, int]] = {}
        self._next_sweep = self.time_fn() + window_seconds

    def allow(self, key: str) -> bool:
        now = self.time_fn()
        if now >= self._next_sweep:
            self._sweep(now)
        window_start, count = self.windows.get(key, (now, 0))
        if now - window_start >= self.window_seconds:
            window_start, count = now, 0
        if count >= self.limit:
            self.windows[key] = (window_start, count)
            return False
        self.windows[key] = (window_start, count + 1)
        return True

    def _sweep(self, now: float) -> None:
        """Drop keys whose window has ended."""
        expired = [k for k, (start, _) in self.windows.items() if now - start >= self.window_seconds]
        for k in expired:
            del self.windows[k]
        self._next_sweep = now + self.window_seconds

    def reset(self) -> None:
        self.windows.clear()
        self._next_sweep = self.time_fn() + self.window_seconds


def get_client_ip(request: Request) -> str:
    """First x-forwarded-for hop, then x-real-ip, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"
