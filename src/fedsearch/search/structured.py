"""Structured adapter: the backend's native JSON results schema.

Field resolution (first non-empty wins):

- url: ``url``, resolved against the instance base URL; items without one are dropped
- snippet: ``content``, then ``snippet``, else ""
- thumbnail: ``img_src``, then ``thumbnail``, then ``thumbnail_src``
- engine: ``engine``, then the first of ``engines``
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..instances.registry import Instance
from .base import RawExtraction
from .errors import EmptyResultSet, InstanceUnreachable, MalformedResponse
from .http import JSON_ACCEPT, get_search_page, search_params
from .normalize import resolve_url


def _template_name(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value:
        return None
    return value.rsplit("/", 1)[-1].removesuffix(".html").lower()


def _score(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _engine(item: Dict[str, Any]) -> Optional[str]:
    engine = item.get("engine")
    if isinstance(engine, str) and engine:
        return engine
    engines = item.get("engines")
    if isinstance(engines, list) and engines and isinstance(engines[0], str):
        return engines[0]
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def item_to_raw(base_url: str, item: Dict[str, Any]) -> Optional[RawExtraction]:
    url = resolve_url(base_url, item.get("url"))
    if not url:
        return None
    thumb = item.get("img_src") or item.get("thumbnail") or item.get("thumbnail_src")
    category = item.get("category")
    return RawExtraction(
        title=_text(item.get("title")),
        url=url,
        snippet=_text(item.get("content")) or _text(item.get("snippet")),
        thumbnail=resolve_url(base_url, thumb),
        category=category.lower() if isinstance(category, str) and category else None,
        template=_template_name(item.get("template")),
        iframe_src=resolve_url(base_url, item.get("iframe_src")),
        engine=_engine(item),
        score=_score(item.get("score")),
    )


def parse_results(instance: Instance, resp: httpx.Response) -> List[RawExtraction]:
    """Accept only a JSON object with a non-empty ``results`` array."""
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponse(instance, "body is not JSON") from e
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise MalformedResponse(instance, "no results array")

    items: List[RawExtraction] = []
    for item in data["results"]:
        if not isinstance(item, dict):
            continue
        raw = item_to_raw(instance.base_url, item)
        if raw is not None:
            items.append(raw)
    if not items:
        raise EmptyResultSet(instance, "empty results array")
    return items


async def fetch_structured(
    client: httpx.AsyncClient,
    instance: Instance,
    query: str,
    *,
    aliases: Sequence[str] = ("",),
    safe: bool = False,
) -> List[RawExtraction]:
    """Try each backend category name in order; return the first non-empty result set.

    Transport failures and timeouts propagate at once. Status, decode and
    empty-array failures move on to the next alias, and the last one is raised
    when every alias is exhausted.
    """
    last_error: Optional[Exception] = None
    for alias in aliases or ("",):
        params = search_params(query, category=alias, safe=safe, json=True)
        try:
            resp = await get_search_page(client, instance, params, JSON_ACCEPT)
            return parse_results(instance, resp)
        except InstanceUnreachable as e:
            if e.status_code is None:
                raise
            last_error = e
        except (MalformedResponse, EmptyResultSet) as e:
            last_error = e
    assert last_error is not None
    raise last_error
