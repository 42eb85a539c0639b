"""
Rate limiting -- caps requests per client IP on the engine endpoints.

In-memory sliding window, one limiter per app instance (app.state.rate_limiter),
so separate apps (and test clients) never share counters.

Configuration via environment:
  RATE_LIMIT_PER_MINUTE=60  (default: 60 requests per minute per IP)
"""

import logging
import os
import time

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

DEFAULT_RATE_LIMIT = 60
WINDOW_SECONDS = 60.0


def rate_limit_from_env() -> int:
    """Load the per-minute limit from the environment."""
    try:
        return int(os.environ.get("RATE_LIMIT_PER_MINUTE", DEFAULT_RATE_LIMIT))
    except ValueError:
        logger.warning("[RateLimit] Invalid RATE_LIMIT_PER_MINUTE, using default")
        return DEFAULT_RATE_LIMIT


class SlidingWindowLimiter:
    """Per-client request counter over a trailing time window."""

    def __init__(self, limit: int = DEFAULT_RATE_LIMIT, window_seconds: float = WINDOW_SECONDS):
        self.limit = limit
        self.window_seconds = window_seconds
        self._hits: dict[str, list[float]] = {}

    def allow(self, client_id: str, now: float | None = None) -> bool:
        """Record a hit for client_id; False if it would exceed the limit."""
        now = time.time() if now is None else now
        cutoff = now - self.window_seconds
        self._prune(cutoff)
        hits = self._hits.setdefault(client_id, [])
        if len(hits) >= self.limit:
            return False
        hits.append(now)
        return True

    def _prune(self, cutoff: float) -> None:
        """Drop expired hits, and clients left with none."""
        for client_id in list(self._hits):
            hits = [ts for ts in self._hits[client_id] if ts > cutoff]
            if hits:
                self._hits[client_id] = hits
            else:
                del self._hits[client_id]

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        self._hits.clear()


async def check_rate_limit(request: Request) -> None:
    """
    Route dependency: raise HTTP 429 once the client exceeds the limit.

    Apps without a limiter on their state are not limited.
    """
    limiter: SlidingWindowLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return

    client_ip = request.client.host if request.client else "unknown"
    if not limiter.allow(client_ip):
        logger.warning(f"[RateLimit] Client {client_ip} exceeded {limiter.limit}/min")
        raise HTTPException(
            status_code=429,
            detail=f"Rate limit exceeded ({limiter.limit} requests per minute)",
            headers={"Retry-After": str(int(limiter.window_seconds))},
        )
