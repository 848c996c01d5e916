"""Simple in-memory TTL cache. No Redis needed.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the catalog may be rendered twice (once per worker). The cache still
eliminates repeated rendering within the same worker, and a restart
clears it.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._store: dict[str, tuple[float, Any]] = {}

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key in self._store:
                expires_at, value = self._store[key]
                if self._clock() < expires_at:
                    return value
                del self._store[key]
            return None

    def set(self, key: str, value: Any, ttl_seconds: float = 60) -> None:
        with self._lock:
            self._store[key] = (self._clock() + ttl_seconds, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry, return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, (expires_at, _) in self._store.items() if now >= expires_at]
            for key in expired:
                del self._store[key]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


cache = TTLCache()
