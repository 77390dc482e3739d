from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlparse

from .base import RawExtraction, ResultMetadata, SearchResult

FAVICON_URL = "https://www.google.com/s2/favicons?domain={domain}&sz=32"
NO_TITLE = "No Title"

_UNRESOLVABLE = ("#", "javascript:", "mailto:", "tel:", "data:")


def resolve_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolve href against the instance base URL.

    Returns None unless the result is an absolute http(s) URL with a host.
    """
    if not href or not isinstance(href, str):
        return None
    href = href.strip()
    if not href or href.lower().startswith(_UNRESOLVABLE):
        return None
    try:
        url = urljoin(base_url.rstrip("/") + "/", href)
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    return url


def domain_of(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def favicon_for(domain: str) -> str:
    return FAVICON_URL.format(domain=domain)


def to_search_result(raw: RawExtraction, result_type: str) -> SearchResult:
    domain = domain_of(raw.url)
    return SearchResult(
        type=result_type,
        title=raw.title.strip() or NO_TITLE,
        url=raw.url,
        snippet=raw.snippet.strip(),
        thumbnail=raw.thumbnail,
        favicon=favicon_for(domain),
        metadata=ResultMetadata(domain=domain, engine=raw.engine, score=raw.score),
    )
