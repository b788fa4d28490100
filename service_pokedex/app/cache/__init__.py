"""
Caching package for the Pokédex service.

- store: the ``CacheStore`` protocol and the in-process ``MemoryCacheStore``
- redis_store: ``RedisCacheStore`` for the persistent backend
- resolver: ``CachedResolver``, the cache-aside read path

Every entry lives for the fixed ``CACHE_TTL_SECONDS``; nothing is ever
invalidated early.
"""

from .store import CacheEntry, CacheStore, MemoryCacheStore
from .redis_store import RedisCacheStore
from .resolver import CachedResolver

__all__ = [
    "CacheEntry",
    "CacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "CachedResolver",
]
