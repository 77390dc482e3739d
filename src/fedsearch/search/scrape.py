"""HTML-scrape adapter for instances that refuse the JSON format.

Extraction is best available structural match, not correct extraction: the
markup belongs to third parties and changes without notice.

Precedence:
  1) CARD_SELECTORS are applied in order; within one selector, cards come in
     document order.
  2) Inside a card, the first of LINK_SELECTORS yielding a resolvable href is
     the link; the first non-empty SNIPPET_SELECTORS match is the snippet; the
     first image source (src, then data-src, then nested thumbnail images)
     that resolves is the thumbnail.
  3) Cards without a resolvable link are skipped; a URL already seen in this
     pass is skipped.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup, Tag

from ..instances.registry import Instance
from .base import RawExtraction
from .errors import EmptyResultSet
from .http import HTML_ACCEPT, get_search_page, search_params
from .normalize import resolve_url

CARD_SELECTORS: Sequence[str] = (
    "article.result",
    ".result",
    ".result-default",
    ".result-images",
    ".result-videos",
    ".result_container",
    ".image-result",
    ".video-result",
)

LINK_SELECTORS: Sequence[str] = (
    "a.result__a",
    "h3 a",
    "h4 a",
    ".result-header a",
    ".title a",
    "a.image-link",
    "a.url_header",
    "a[href]",
)

TITLE_SELECTORS: Sequence[str] = (".title", ".result-title")

SNIPPET_SELECTORS: Sequence[str] = (
    "p.result__snippet",
    ".content",
    ".snippet",
    ".result-content",
    ".description",
)

NESTED_IMAGE_SELECTOR = ".image img, .thumbnail img, .result-image img"

IMAGE_CARD_CLASSES = {"result-images", "image-result", "category-images"}
VIDEO_CARD_CLASSES = {"result-videos", "video-result", "category-videos"}


def _first_text(card: Tag, selectors: Sequence[str]) -> str:
    for sel in selectors:
        for el in card.select(sel):
            text = el.get_text(" ", strip=True)
            if text:
                return text
    return ""


def _link(card: Tag, base_url: str) -> tuple[Optional[Tag], Optional[str]]:
    for sel in LINK_SELECTORS:
        for a in card.select(sel):
            url = resolve_url(base_url, a.get("href"))
            if url:
                return a, url
    return None, None


def _thumbnail(card: Tag, base_url: str) -> Optional[str]:
    candidates: List[Optional[str]] = []
    img = card.find("img")
    if isinstance(img, Tag):
        candidates.extend([img.get("src"), img.get("data-src")])
    candidates.extend(el.get("src") for el in card.select(NESTED_IMAGE_SELECTOR))
    for c in candidates:
        url = resolve_url(base_url, c)
        if url:
            return url
    return None


def _card_category(card: Tag) -> Optional[str]:
    classes = set(card.get("class") or [])
    if classes & IMAGE_CARD_CLASSES or card.select_one(".result-images, .image-result"):
        return "images"
    if classes & VIDEO_CARD_CLASSES or card.select_one(".result-videos, .video-result"):
        return "videos"
    return None


def _iframe_src(card: Tag, base_url: str) -> Optional[str]:
    frame = card.find("iframe")
    if not isinstance(frame, Tag):
        return None
    return resolve_url(base_url, frame.get("src") or frame.get("data-src"))


def parse_html(instance: Instance, html: str) -> List[RawExtraction]:
    soup = BeautifulSoup(html or "", "html.parser")
    base_url = instance.base_url
    seen: set[str] = set()
    items: List[RawExtraction] = []

    for selector in CARD_SELECTORS:
        for card in soup.select(selector):
            link, url = _link(card, base_url)
            if not url or url in seen:
                continue
            seen.add(url)
            title = link.get_text(" ", strip=True) if link is not None else ""
            engine = _first_text(card, (".engines span", ".engine"))
            items.append(
                RawExtraction(
                    title=title or _first_text(card, TITLE_SELECTORS),
                    url=url,
                    snippet=_first_text(card, SNIPPET_SELECTORS),
                    thumbnail=_thumbnail(card, base_url),
                    category=_card_category(card),
                    iframe_src=_iframe_src(card, base_url),
                    engine=engine or None,
                )
            )

    if not items:
        raise EmptyResultSet(instance, "no result cards in HTML")
    return items


async def fetch_scrape(
    client: httpx.AsyncClient,
    instance: Instance,
    query: str,
    *,
    category: str = "",
    safe: bool = False,
) -> List[RawExtraction]:
    params = search_params(query, category=category, safe=safe)
    resp = await get_search_page(client, instance, params, HTML_ACCEPT)
    return parse_html(instance, resp.text)
