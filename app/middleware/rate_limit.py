"""
Sliding-window rate limiting, injected at the HTTP boundary through deps.

State lives in a bounded, expiring store so that unique keys (IPs, users)
cannot grow memory without limit.
"""
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Optional
import threading
import time

from app.core.config import settings


class RateLimiterStorage(ABC):
    """Storage interface for rate limiter state."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemoryStorage(RateLimiterStorage):
    """
    Thread-safe in-memory storage with per-key TTL.

    Holds at most ``max_keys`` entries; the least recently written key is
    evicted first. Data is per process, so multiple workers each keep
    their own counters.
    """

    def __init__(self, max_keys: int = 10000):
        self._data: "OrderedDict[str, tuple]" = OrderedDict()
        self._lock = threading.RLock()
        self._max_keys = max_keys

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None

            value, expiry = item
            if expiry is not None and time.time() > expiry:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        with self._lock:
            expiry = time.time() + ttl if ttl is not None else None
            self._data[key] = (value, expiry)
            self._data.move_to_end(key)
            while len(self._data) > self._max_keys:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class SlidingWindowRateLimiter:
    """Allows ``limit`` hits per key within any trailing ``window`` seconds."""

    def __init__(self, storage: RateLimiterStorage, limit: int, window: int):
        self.storage = storage
        self.limit = limit
        self.window = window
        self._lock = threading.Lock()

    def check(self, key: str, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        with self._lock:
            hits = [t for t in (self.storage.get(key) or []) if t > now - self.window]
            if len(hits) >= self.limit:
                self.storage.set(key, hits, ttl=self.window)
                return False

            hits.append(now)
            self.storage.set(key, hits, ttl=self.window)
            return True

    def reset(self) -> None:
        self.storage.clear()


test_taking_limiter = SlidingWindowRateLimiter(
    storage=InMemoryStorage(max_keys=settings.RATE_LIMIT_MAX_KEYS),
    limit=settings.RATE_LIMIT_TEST_TAKING,
    window=settings.RATE_LIMIT_TEST_TAKING_WINDOW,
)

general_limiter = SlidingWindowRateLimiter(
    storage=InMemoryStorage(max_keys=settings.RATE_LIMIT_MAX_KEYS),
    limit=settings.RATE_LIMIT_GENERAL,
    window=settings.RATE_LIMIT_GENERAL_WINDOW,
)

LIMITERS = {
    "test_taking": test_taking_limiter,
    "general": general_limiter,
}
