from __future__ import annotations

import random
from typing import Callable, Dict, List

import httpx

from fedsearch.instances.health import HealthTracker
from fedsearch.instances.registry import Instance
from fedsearch.search.cache import ResultCache
from fedsearch.service import SearchService
from fedsearch.settings import Settings


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Recorder:
    """Counts outbound requests per host."""

    def __init__(self):
        self.calls: List[httpx.Request] = []

    def hosts(self) -> List[str]:
        return [r.url.host for r in self.calls]


def json_results(*items: Dict) -> httpx.Response:
    return httpx.Response(200, json={"query": "q", "results": list(items)})


def make_service(
    handler: Callable,
    instances: List[str],
    *,
    recorder: Recorder | None = None,
    clock: FakeClock | None = None,
    **overrides,
) -> SearchService:
    async def _handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.calls.append(request)
        result = handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    settings = Settings(**{"batch_timeout": 2.0, "images_batch_timeout": 2.0, **overrides})
    clock = clock or FakeClock()
    client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    return SearchService(
        settings,
        registry=[Instance(u) for u in instances],
        client=client,
        tracker=HealthTracker(settings.failure_threshold, settings.cooldown_seconds, clock=clock),
        cache=ResultCache(settings.cache_ttl_seconds, clock=clock),
        rng=random.Random(7),
    )
