"""
In-memory read-through caches for geocoding and search results.

Entries expire after a fixed TTL and the least recently used entry is
evicted once a cache is full. Only fully successful results are stored;
callers put a value after the whole step succeeded, never before.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Generic, Hashable, Optional, Tuple, TypeVar

from domain.models import GeoResult, ParsedQuery, SearchResult
from settings import settings

logger = logging.getLogger(__name__)

V = TypeVar("V")

SearchKey = Tuple[Optional[str], Optional[str], Optional[str], Optional[str], Optional[str], int]


class TTLCache(Generic[V]):
    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: "OrderedDict[Hashable, Tuple[V, float]]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self.ttl_seconds > 0 and (self._clock() - stored_at) > self.ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def put(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class GeoCache:
    """Resolved places keyed by the exact location text the user typed."""

    def __init__(self, ttl_seconds: Optional[float] = None, max_entries: Optional[int] = None, **kwargs: Any):
        self._cache: TTLCache[GeoResult] = TTLCache(
            ttl_seconds if ttl_seconds is not None else settings.GEO_CACHE_TTL_SECONDS,
            max_entries if max_entries is not None else settings.GEO_CACHE_MAX_ENTRIES,
            **kwargs,
        )

    def get_geo_result(self, location: str) -> Optional[GeoResult]:
        cached = self._cache.get(location)
        logger.debug("[GEOCODE] cache %s %r", "hit" if cached else "miss", location)
        return cached

    def put_geo_result(self, location: str, result: GeoResult) -> None:
        self._cache.put(location, result)

    def clear(self) -> None:
        self._cache.clear()


class SearchCache:
    """
    Complete search results keyed by the canonical filter fields.

    Two different texts that parse to the same filters share an entry;
    `raw` is not part of the key.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, max_entries: Optional[int] = None, **kwargs: Any):
        self._cache: TTLCache[SearchResult] = TTLCache(
            ttl_seconds if ttl_seconds is not None else settings.SEARCH_CACHE_TTL_SECONDS,
            max_entries if max_entries is not None else settings.SEARCH_CACHE_MAX_ENTRIES,
            **kwargs,
        )

    @staticmethod
    def key_for(parsed: ParsedQuery) -> SearchKey:
        return (
            parsed.type,
            parsed.operator,
            parsed.region,
            parsed.country,
            parsed.near,
            parsed.radius,
        )

    def get_search_result(self, parsed: ParsedQuery) -> Optional[SearchResult]:
        cached = self._cache.get(self.key_for(parsed))
        logger.debug("[SEARCH] cache %s %s", "hit" if cached else "miss", self.key_for(parsed))
        return cached

    def put_search_result(self, parsed: ParsedQuery, result: SearchResult) -> None:
        self._cache.put(self.key_for(parsed), result)

    def clear(self) -> None:
        self._cache.clear()


_default_geo_cache: Optional[GeoCache] = None
_default_search_cache: Optional[SearchCache] = None


def get_default_geo_cache() -> GeoCache:
    global _default_geo_cache
    if _default_geo_cache is None:
        _default_geo_cache = GeoCache()
    return _default_geo_cache


def get_default_search_cache() -> SearchCache:
    global _default_search_cache
    if _default_search_cache is None:
        _default_search_cache = SearchCache()
    return _default_search_cache
