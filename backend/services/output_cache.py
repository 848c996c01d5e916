"""Output caching for rendered HTTP responses.

A cached entry is the exact response a route produced: status, body
bytes and headers. Hits are replayed verbatim without calling the route's
render function again. Concurrent misses for the same key may each render;
the last one to finish owns the entry.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import urlencode

from fastapi import Request, Response

from services.cache import TTLCache

logger = logging.getLogger(__name__)

CACHEABLE_METHODS = {"GET", "HEAD"}

# Recomputed by Response on replay, or owned by the cache policy.
_UNSTORED_HEADERS = {"content-length", "content-type", "cache-control", "age"}


@dataclass(frozen=True)
class CachedResponse:
    status_code: int
    body: bytes
    media_type: str | None
    created_at: float
    headers: dict[str, str] = field(default_factory=dict)


class OutputCache:
    """Stores rendered responses keyed by method, scheme, host, path and query string."""

    def __init__(
        self,
        expire_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
        store: TTLCache | None = None,
    ):
        if expire_seconds <= 0:
            raise ValueError(f"expire_seconds must be positive, got {expire_seconds}")
        self.expire_seconds = expire_seconds
        # An injected store brings its own clock; entry age and expiry must agree.
        self._store = store if store is not None else TTLCache(clock=clock)
        self._clock = self._store.clock

    @staticmethod
    def key_for(request: Request) -> str:
        query = urlencode(sorted(request.query_params.multi_items()))
        url = request.url
        return f"{request.method}:{url.scheme}://{url.netloc.lower()}{url.path.lower()}?{query}"

    @staticmethod
    def is_cacheable(request: Request) -> bool:
        if request.method not in CACHEABLE_METHODS:
            return False
        return "authorization" not in request.headers

    def serve(self, request: Request, render: Callable[[], Response]) -> Response:
        """Return the cached response for ``request`` or render and store a new one."""
        if not self.is_cacheable(request):
            return render()

        key = self.key_for(request)
        entry: CachedResponse | None = self._store.get(key)
        if entry is not None:
            logger.debug("Output cache hit: %s", key)
            return self._replay(entry)

        logger.debug("Output cache miss: %s", key)
        response = render()
        if self._storable(response):
            purged = self._store.purge_expired()
            if purged:
                logger.debug("Output cache purged %d expired entries", purged)
            entry = CachedResponse(
                status_code=response.status_code,
                body=bytes(response.body),
                media_type=response.media_type,
                created_at=self._clock(),
                headers={
                    name: value
                    for name, value in response.headers.items()
                    if name not in _UNSTORED_HEADERS
                },
            )
            self._store.set(key, entry, ttl_seconds=self.expire_seconds)
            logger.debug("Output cache stored %s for %ss", key, self.expire_seconds)
        response.headers["Cache-Control"] = self._cache_control()
        return response

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def _storable(self, response: Response) -> bool:
        return response.status_code == 200 and "set-cookie" not in response.headers

    def _cache_control(self) -> str:
        return f"public, max-age={self.expire_seconds}"

    def _replay(self, entry: CachedResponse) -> Response:
        age = max(0, int(self._clock() - entry.created_at))
        response = Response(
            content=entry.body,
            status_code=entry.status_code,
            headers=entry.headers,
            media_type=entry.media_type,
        )
        response.headers["Cache-Control"] = self._cache_control()
        response.headers["Age"] = str(age)
        return response
