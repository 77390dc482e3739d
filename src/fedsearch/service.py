from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

import httpx

from .instances.health import HealthTracker
from .instances.registry import Instance, load_registry
from .search.base import CATEGORIES, AggregatedResponse
from .search.cache import ResultCache, cache_key
from .search.dispatcher import QueryDispatcher
from .search.errors import InvalidCategory, QueryRequired
from .search.http import build_client
from .settings import Settings

logger = logging.getLogger(__name__)


class SearchService:
    """Owns the shared state behind every search request.

    One instance lives for the lifetime of the process (or of a test) and is
    handed to the request handlers: the HTTP client, the health tracker, the
    result cache and the dispatcher all hang off it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        registry: Optional[Sequence[Instance]] = None,
        client: Optional[httpx.AsyncClient] = None,
        tracker: Optional[HealthTracker] = None,
        cache: Optional[ResultCache] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.registry = list(registry) if registry is not None else load_registry(self.settings.instances_path)
        if client is None:
            client = build_client(self.settings.user_agent, self.settings.request_timeout)
        if tracker is None:
            tracker = HealthTracker(
                failure_threshold=self.settings.failure_threshold,
                cooldown_seconds=self.settings.cooldown_seconds,
            )
        if cache is None:
            cache = ResultCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self._client = client
        self.tracker = tracker
        self.cache = cache
        self.dispatcher = QueryDispatcher(self._client, self.registry, self.tracker, self.settings, rng=rng)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SearchService":  # type: ignore[override]
        return self

    async def __aexit__(self, exc_type, exc, tb) -> Optional[bool]:  # type: ignore[override]
        await self.aclose()
        return None

    async def search(self, query: Optional[str], category: str = "general", safe: bool = False) -> AggregatedResponse:
        if not query or not query.strip():
            raise QueryRequired("Query is required")
        if category not in CATEGORIES:
            raise InvalidCategory(f"Invalid category: {category}")

        query = query.strip()
        key = cache_key(query, category, safe)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %r", key)
            # entries are shared across spellings of the same key
            return replace(cached, query=query)

        response = await self.dispatcher.search(query, category, safe)
        self.cache.put(key, response)
        return response

    def health(self) -> Dict[str, Any]:
        healthy = sum(1 for inst in self.registry if self.tracker.is_eligible(inst))
        return {"status": "ok", "instances": len(self.registry), "healthy": healthy}
