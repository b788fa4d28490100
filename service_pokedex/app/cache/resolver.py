"""
Cache-aside resolution of upstream URLs.
"""

from typing import Optional, Protocol

from shared.config import CACHE_TTL_SECONDS
from shared.errors import CacheUnavailable
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .store import CacheStore


BYPASS = "bypass"
FAIL = "fail"


class Fetcher(Protocol):
    async def fetch(self, url: str) -> bytes:
        ...


class CachedResolver:
    """Serve from the store when present, else fetch and populate.

    Concurrent misses on one URL may each fetch; the store keeps the last
    write. Fetch failures propagate unchanged and are never stored.

    ``failure_policy`` decides what a ``CacheUnavailable`` from the store
    does: ``"bypass"`` logs it and serves straight from the fetcher,
    ``"fail"`` raises it to the caller.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        store: CacheStore,
        *,
        ttl: int = CACHE_TTL_SECONDS,
        failure_policy: str = BYPASS,
        metrics: Optional[MetricsCollector] = None,
    ):
        if failure_policy not in (BYPASS, FAIL):
            raise ValueError(f"Unknown cache failure policy: {failure_policy}")
        self.fetcher = fetcher
        self.store = store
        self.ttl = ttl
        self.failure_policy = failure_policy
        self.metrics = metrics
        self.logger = get_logger("pokedex.resolver")

    async def resolve(self, url: str) -> bytes:
        cached = await self._lookup(url)
        if cached is not None:
            self._count("hit")
            return cached

        self._count("miss")
        data = await self.fetcher.fetch(url)
        await self._store(url, data)
        return data

    async def _lookup(self, url: str) -> Optional[bytes]:
        try:
            return await self.store.get(url)
        except CacheUnavailable as exc:
            self._on_unavailable(url, exc)
            return None

    async def _store(self, url: str, data: bytes):
        try:
            await self.store.set(url, data, self.ttl)
        except CacheUnavailable as exc:
            self._on_unavailable(url, exc)

    def _on_unavailable(self, url: str, exc: CacheUnavailable):
        if self.failure_policy == FAIL:
            raise exc
        self._count("bypass")
        self.logger.warning("Cache unavailable, bypassing", url=url, error=exc.message, details=exc.details)

    def _count(self, result: str):
        if self.metrics:
            self.metrics.increment_counter("cache_lookups_total", result=result)
