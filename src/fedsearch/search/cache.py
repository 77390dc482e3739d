from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .base import AggregatedResponse

CacheKey = Tuple[str, str, bool]


def cache_key(query: str, category: str, safe: bool) -> CacheKey:
    return (" ".join(query.split()).lower(), category, bool(safe))


@dataclass
class CacheEntry:
    key: CacheKey
    payload: AggregatedResponse
    stored_at: float


class ResultCache:
    """Short-TTL map from (query, category, safe) to an aggregated response.

    Stale entries are never returned and never evicted; the next successful
    aggregation for the same key overwrites them.
    """

    def __init__(self, ttl_seconds: float = 600.0, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def get(self, key: CacheKey) -> Optional[AggregatedResponse]:
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.stored_at > self._ttl:
            return None
        return entry.payload

    def put(self, key: CacheKey, payload: AggregatedResponse) -> None:
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)
