# =============================================================================
# core/services/rate_limiter.py - Submission Rate Limiting
# =============================================================================
# Limits how many registrations one client may submit per window.
#
# Two stores implement the same check-and-increment contract:
# - InMemoryRateLimitStore: per-process dict guarded by a lock. Counters are
#   lost on restart and stale entries are never evicted.
# - RedisRateLimitStore: fixed window shared by every API instance, kept
#   by a server-side script so check and increment are one atomic step.
#
# Usage:
#   store = build_rate_limit_store(settings)
#   if not store.check_and_increment(client_id):
#       raise RateLimitedError(client_id)
# =============================================================================

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 3
DEFAULT_WINDOW_SECONDS = 3600


class RateLimitStore(Protocol):
    """Anything that can admit or reject one more request for a key."""

    def check_and_increment(self, key: str) -> bool:
        """Return True and count the request if the key is under its limit."""
        ...


@dataclass
class RateLimitEntry:
    """Counter for one client within its current window."""

    count: int
    reset_at: float


class InMemoryRateLimitStore:
    """
    Process-local fixed-window counter.

    The first request of a key (or the first after its window expired) opens a
    new window of `window_seconds` with count 1. Further requests are admitted
    while count < max_requests; rejected requests do not increment.

    Example:
        store = InMemoryRateLimitStore(max_requests=3, window_seconds=3600)
        store.check_and_increment("203.0.113.7")  # True
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def check_and_increment(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is None or now > entry.reset_at:
                self._entries[key] = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
                return True

            if entry.count >= self.max_requests:
                return False

            entry.count += 1
            return True

    def get_entry(self, key: str) -> RateLimitEntry | None:
        """Current counter for a key (for diagnostics and tests)."""
        with self._lock:
            return self._entries.get(key)

    def reset(self) -> None:
        """Forget every counter."""
        with self._lock:
            self._entries.clear()


# Runs atomically on the server: read, compare, then count. A rejected
# request leaves the counter alone, and the TTL is set in the same step
# that creates the key, so a key can never outlive its window.
_ADMIT_SCRIPT = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current >= tonumber(ARGV[1]) then
    return 0
end
if current == 0 then
    redis.call('SET', KEYS[1], 1, 'EX', ARGV[2])
else
    redis.call('INCR', KEYS[1])
end
return 1
"""


class RedisRateLimitStore:
    """
    Fixed-window counter kept in Redis and shared by every API instance.

    The first admitted request creates the key with a TTL of the window;
    when the key expires the count restarts.
    """

    def __init__(
        self,
        client: Any,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        prefix: str = "supplier-registration:rate-limit:",
    ):
        self._client = client
        self._admit = client.register_script(_ADMIT_SCRIPT)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.prefix = prefix

    def check_and_increment(self, key: str) -> bool:
        redis_key = f"{self.prefix}{key}"
        allowed = self._admit(keys=[redis_key], args=[self.max_requests, int(self.window_seconds)])
        return int(allowed) == 1


def build_rate_limit_store(settings: Settings) -> RateLimitStore:
    """Create the store selected by RATE_LIMIT_BACKEND."""
    if settings.RATE_LIMIT_BACKEND == "redis":
        import redis

        logger.info("Using Redis rate-limit store")
        return RedisRateLimitStore(
            redis.from_url(settings.REDIS_URL),
            max_requests=settings.RATE_LIMIT_MAX_SUBMISSIONS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )

    logger.info("Using in-memory rate-limit store")
    return InMemoryRateLimitStore(
        max_requests=settings.RATE_LIMIT_MAX_SUBMISSIONS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
