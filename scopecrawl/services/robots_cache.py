import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from scopecrawl.services.robots_policy import RobotsPolicy


@dataclass(frozen=True)
class RobotsCacheEntry:
    """A cached robots.txt policy for one origin. `policy=None` records a failed fetch."""

    policy: Optional[RobotsPolicy]
    fetched_at: float

    def is_stale(self, now: float, ttl_seconds: int) -> bool:
        if ttl_seconds <= 0:
            return True
        return (now - self.fetched_at) > ttl_seconds


class RobotsCache:
    """
    Cache of parsed robots.txt policies keyed by origin (`scheme://host[:port]`).

    Shared by every crawl in the process. Concurrent writers for the same
    origin simply overwrite each other (last writer wins); the lock only
    keeps the LRU bookkeeping consistent.
    """

    def __init__(self, *, max_size: int = 2048, ttl_seconds: int = 3600, clock: Callable[[], float] = time.time):
        """Create a robots.txt cache.

        - `max_size` bounds the number of origins cached (LRU eviction).
        - `ttl_seconds` bounds staleness; entries older than TTL are treated as missing.
        """
        self._max_size = int(max_size) if max_size is not None else 2048
        if self._max_size <= 0:
            self._max_size = 1

        self._ttl_seconds = int(ttl_seconds) if ttl_seconds is not None else 3600
        if self._ttl_seconds <= 0:
            # Non-positive TTL means "don't cache".
            self._ttl_seconds = 0

        self._clock = clock
        self._lock = threading.Lock()
        self._cache: "OrderedDict[str, RobotsCacheEntry]" = OrderedDict()

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def _evict_if_needed(self) -> None:
        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def lookup(self, origin: str) -> Optional[RobotsCacheEntry]:
        """Return the fresh entry for `origin`, or None on a miss or a stale entry."""
        with self._lock:
            entry = self._cache.get(origin)
            if entry is None:
                return None
            if entry.is_stale(self._clock(), self._ttl_seconds):
                self._cache.pop(origin, None)
                return None
            self._cache.move_to_end(origin)
            return entry

    def get(self, origin: str) -> Optional[RobotsPolicy]:
        """Get the cached policy for an origin, or None if not cached."""
        entry = self.lookup(origin)
        return entry.policy if entry is not None else None

    def set(self, origin: str, policy: Optional[RobotsPolicy]) -> None:
        """Cache a policy for an origin. None indicates the fetch failed."""
        with self._lock:
            self._cache[origin] = RobotsCacheEntry(policy=policy, fetched_at=self._clock())
            self._cache.move_to_end(origin)
            self._evict_if_needed()

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
