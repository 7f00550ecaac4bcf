"""In-memory request cache with per-entry TTL and bounded size."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import settings

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    stored_at: float
    ttl: float


class RequestCache(Generic[T]):
    """
    Key/value store for fetched API payloads.

    Expiry is checked lazily on get(). When a set() pushes the entry count over
    capacity, the earliest-inserted key is evicted. Overwriting a key keeps its
    original insertion position.
    """

    def __init__(
        self,
        capacity: int = settings.CACHE_CAPACITY,
        default_ttl: float = settings.CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = capacity
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at < entry.ttl:
            return entry.value
        del self._entries[key]
        return None

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=ttl)
        if len(self._entries) > self.capacity:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
