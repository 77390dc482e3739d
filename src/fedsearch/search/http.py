from __future__ import annotations

from typing import Dict, Optional

import httpx

from ..instances.registry import Instance
from .errors import InstanceTimeout, InstanceUnreachable

JSON_ACCEPT = "application/json, text/javascript, */*; q=0.01"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"


def build_client(user_agent: str, request_timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": user_agent},
        timeout=request_timeout,
        follow_redirects=True,
        transport=transport,
    )


def search_params(query: str, *, category: str = "", safe: bool = False, json: bool = False) -> Dict[str, str]:
    """Query string for GET {base}/search. An empty category sends no categories param."""
    params = {"q": query}
    if json:
        params["format"] = "json"
    if category:
        params["categories"] = category
    params["safesearch"] = "1" if safe else "0"
    return params


async def get_search_page(
    client: httpx.AsyncClient,
    instance: Instance,
    params: Dict[str, str],
    accept: str,
) -> httpx.Response:
    """GET the instance's /search endpoint, mapping transport and status failures.

    Timeouts raise InstanceTimeout; connection-level errors raise
    InstanceUnreachable without a status code; non-2xx answers raise
    InstanceUnreachable carrying the status code.
    """
    try:
        resp = await client.get(f"{instance.base_url}/search", params=params, headers={"Accept": accept})
    except httpx.TimeoutException as e:
        raise InstanceTimeout(instance, str(e) or "request timed out") from e
    except httpx.HTTPError as e:
        raise InstanceUnreachable(instance, str(e) or type(e).__name__) from e
    if not resp.is_success:
        raise InstanceUnreachable(instance, f"HTTP {resp.status_code}", status_code=resp.status_code)
    return resp
