"""Category filter.

Items are kept or dropped, never coerced:

- images: any image marker (thumbnail, image category/template, image engine)
- videos: any video marker (video category/template, embed URL, video host)
- general: everything except items that are image/video marked and carry no snippet
"""

from __future__ import annotations

from typing import Iterable, List

from .base import RawExtraction
from .normalize import domain_of

VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com", "dailymotion.com")
IMAGE_NAMES = {"image", "images"}
VIDEO_NAMES = {"video", "videos"}


def is_video_host(url: str) -> bool:
    host = domain_of(url)
    return any(host == h or host.endswith("." + h) for h in VIDEO_HOSTS)


def _labelled(raw: RawExtraction, names: set[str]) -> bool:
    return (raw.category or "") in names or (raw.template or "") in names


def has_image_marker(raw: RawExtraction) -> bool:
    if raw.thumbnail or _labelled(raw, IMAGE_NAMES):
        return True
    return "images" in (raw.engine or "").lower()


def has_video_marker(raw: RawExtraction) -> bool:
    return _labelled(raw, VIDEO_NAMES) or bool(raw.iframe_src) or is_video_host(raw.url)


def matches_category(raw: RawExtraction, category: str) -> bool:
    if category == "images":
        return has_image_marker(raw)
    if category == "videos":
        return has_video_marker(raw)
    if raw.snippet.strip():
        return True
    return not (has_image_marker(raw) or has_video_marker(raw))


def filter_category(raws: Iterable[RawExtraction], category: str) -> List[RawExtraction]:
    return [r for r in raws if matches_category(r, category)]


def result_type(raw: RawExtraction, category: str) -> str:
    """Public ``type`` of a kept item.

    Specialized requests report the requested category. General requests keep
    an explicit image label, or any video marker, for items that survived
    because they have a snippet.
    """
    if category != "general":
        return category
    if _labelled(raw, IMAGE_NAMES):
        return "images"
    if has_video_marker(raw):
        return "videos"
    return "general"
