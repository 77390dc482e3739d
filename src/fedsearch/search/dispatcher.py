from __future__ import annotations

import logging
import random
import time
from typing import Iterator, List, Optional, Sequence

import httpx

from ..instances.health import HealthTracker
from ..instances.registry import Instance
from ..settings import Settings
from .base import AggregatedResponse, Aggregations, InstanceOutcome, SearchResult
from .categories import filter_category, result_type
from .errors import (
    EmptyResultSet,
    InstanceError,
    InstanceUnreachable,
    MalformedResponse,
    NoResultsFound,
)
from .normalize import to_search_result
from .race import race_batch
from .scrape import fetch_scrape
from .structured import fetch_structured

logger = logging.getLogger(__name__)


def batches(items: Sequence[Instance], size: int) -> Iterator[List[Instance]]:
    size = max(1, size)
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


class QueryDispatcher:
    """Races batches of eligible instances until one returns usable results.

    Per instance the JSON API is tried first and the HTML page second. The
    first instance in a batch whose category-filtered result set is non-empty
    wins; its siblings are cancelled and later batches are skipped. When all
    batches fail, categories listed in ``fallback_categories`` get one more
    race that fetches general results and filters them locally.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        registry: Sequence[Instance],
        tracker: HealthTracker,
        settings: Settings,
        rng: Optional[random.Random] = None,
    ):
        self._client = client
        self._registry = list(registry)
        self._tracker = tracker
        self._settings = settings
        self._rng = rng or random.Random()

    async def search(self, query: str, category: str = "general", safe: bool = False) -> AggregatedResponse:
        started = time.perf_counter()
        eligible = self._tracker.eligible(self._registry)
        self._rng.shuffle(eligible)
        candidates = eligible[: self._settings.max_instances]
        timeout = self._settings.timeout_for(category)
        logger.debug("Searching %r (%s) across %d eligible instance(s)", query, category, len(candidates))

        for n, batch in enumerate(batches(candidates, self._settings.batch_size), start=1):
            logger.debug("Batch %d: %s", n, ", ".join(i.host for i in batch))
            winner = await race_batch(
                batch,
                lambda inst: self.query_instance(inst, query, category, safe=safe),
                timeout=timeout,
                on_failure=self._on_failure,
            )
            if winner is not None:
                return self._aggregate(query, category, winner, started)

        if category in self._settings.fallback_categories:
            fallback = self._tracker.eligible(candidates)[: self._settings.fallback_instances]
            if fallback:
                logger.info("All batches failed for %r; broadening to general results filtered as %s", query, category)
                winner = await race_batch(
                    fallback,
                    lambda inst: self.query_instance(inst, query, category, safe=safe, fetch_category="general"),
                    timeout=timeout,
                    on_failure=self._on_failure,
                )
                if winner is not None:
                    return self._aggregate(query, category, winner, started)

        logger.warning("No results for %r (%s) after exhausting all instances", query, category)
        raise NoResultsFound(query, category)

    async def query_instance(
        self,
        instance: Instance,
        query: str,
        category: str,
        *,
        safe: bool = False,
        fetch_category: Optional[str] = None,
    ) -> InstanceOutcome:
        """Query one instance; failures come back as outcome values, never raised."""
        try:
            results = await self._extract(instance, query, category, fetch_category or category, safe)
        except InstanceError as e:
            return InstanceOutcome(instance, error=e)
        except Exception as e:
            logger.exception("Unexpected error while querying %s", instance)
            return InstanceOutcome(instance, error=MalformedResponse(instance, f"{type(e).__name__}: {e}"))
        return InstanceOutcome(instance, results=results)

    async def _extract(
        self,
        instance: Instance,
        query: str,
        category: str,
        fetch_category: str,
        safe: bool,
    ) -> List[SearchResult]:
        aliases = self._settings.category_aliases.get(fetch_category) or [""]
        try:
            raws = await fetch_structured(self._client, instance, query, aliases=aliases, safe=safe)
            kept = filter_category(raws, category)
            if kept:
                return [to_search_result(r, result_type(r, category)) for r in kept]
            logger.debug("%s: JSON results held no %s items; trying HTML", instance, category)
        except InstanceUnreachable as e:
            if e.status_code is None:
                raise
            logger.debug("%s: JSON path refused (%s); trying HTML", instance, e)
        except (MalformedResponse, EmptyResultSet) as e:
            logger.debug("%s: JSON path unusable (%s); trying HTML", instance, e)

        raws = await fetch_scrape(self._client, instance, query, category=aliases[0], safe=safe)
        kept = filter_category(raws, category)
        if not kept:
            raise EmptyResultSet(instance, f"no {category} items in HTML page")
        return [to_search_result(r, result_type(r, category)) for r in kept]

    def _on_failure(self, outcome: InstanceOutcome) -> None:
        self._tracker.record_failure(outcome.instance)
        kind = outcome.error.kind if outcome.error is not None else "empty"
        logger.debug("Instance %s failed (%s): %s", outcome.instance, kind, outcome.error)

    def _aggregate(
        self,
        query: str,
        category: str,
        winner: InstanceOutcome,
        started: float,
    ) -> AggregatedResponse:
        self._tracker.record_success(winner.instance)
        engines: List[str] = []
        for r in winner.results:
            if r.metadata.engine and r.metadata.engine not in engines:
                engines.append(r.metadata.engine)
        logger.info("%s answered %r (%s) with %d result(s)", winner.instance, query, category, len(winner.results))
        return AggregatedResponse(
            query=query,
            category=category,
            results=winner.results,
            aggregations=Aggregations(
                count=len(winner.results),
                elapsed_seconds=round(time.perf_counter() - started, 3),
                engines=engines,
                instance=winner.instance.base_url,
            ),
        )
