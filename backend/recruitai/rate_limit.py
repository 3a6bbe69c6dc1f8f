import asyncio
import logging
from dataclasses import dataclass

from recruitai.system_metrics import increment_metric

logger = logging.getLogger("recruitai.rate_limit")


@dataclass
class _Bucket:
    window_start: float
    count: int = 1


class FixedWindowRateLimiter:
    """
    Per-client request counter over fixed windows.

    A client gets max_requests per window_sec; the window restarts on the
    first request after it expires. Buckets idle for two windows are
    dropped by prune(), which the app runs on its cleanup cadence.
    """

    def __init__(self, window_sec: float, max_requests: int):
        self.window_sec = float(window_sec)
        self.max_requests = int(max_requests)
        self._lock = asyncio.Lock()
        self._buckets: dict[str, _Bucket] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    async def check(self, identity: str, now_ts: float) -> tuple[bool, int]:
        """Count one request. Returns (blocked, retry_after_sec)."""
        async with self._lock:
            bucket = self._buckets.get(identity)
            if bucket is None:
                self._buckets[identity] = _Bucket(window_start=now_ts)
                return False, 0

            elapsed = now_ts - bucket.window_start
            if elapsed >= self.window_sec:
                bucket.window_start = now_ts
                bucket.count = 1
                return False, 0

            if bucket.count >= self.max_requests:
                increment_metric("rate_limited_requests")
                return True, max(1, int(self.window_sec - elapsed))

            bucket.count += 1
            return False, 0

    async def prune(self, now_ts: float) -> int:
        async with self._lock:
            horizon = self.window_sec * 2
            stale = [key for key, bucket in self._buckets.items() if now_ts - bucket.window_start > horizon]
            for key in stale:
                del self._buckets[key]
        if stale:
            logger.debug("pruned idle rate-limit buckets | count=%s", len(stale))
        return len(stale)
