"""
TTL cache stores keyed by absolute upstream URL.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

from shared.config import CACHE_TTL_SECONDS
from shared.logging import get_logger


class CacheStore(Protocol):
    """Key/value store whose entries expire after a fixed TTL."""

    async def get(self, key: str) -> Optional[bytes]:
        ...

    async def set(self, key: str, value: bytes, ttl: int = CACHE_TTL_SECONDS) -> None:
        ...


@dataclass(frozen=True)
class CacheEntry:
    """Cached upstream payload."""
    key: str
    value: bytes
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


class MemoryCacheStore:
    """In-process TTL store.

    Expiry is checked lazily on read. ``purge_expired`` reclaims memory for
    entries nobody has read since they expired.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self.logger = get_logger("pokedex.cache.memory")

    async def get(self, key: str) -> Optional[bytes]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_live(self._clock()):
                return None
            return entry.value

    async def set(self, key: str, value: bytes, ttl: int = CACHE_TTL_SECONDS) -> None:
        async with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)

    async def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        async with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if not entry.is_live(now)]
            for key in expired:
                del self._entries[key]

        if expired:
            self.logger.debug("Purged expired cache entries", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass
