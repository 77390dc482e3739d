from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import yaml


@dataclass(frozen=True)
class Instance:
    """One third-party backend, identified by its base URL."""

    base_url: str

    @property
    def host(self) -> str:
        return urlparse(self.base_url).hostname or self.base_url

    def __str__(self) -> str:
        return self.base_url


DEFAULT_INSTANCES = [
    "https://searx.be",
    "https://searxng.site",
    "https://priv.au",
    "https://searx.work",
    "https://search.inetol.net",
    "https://opnxng.com",
    "https://searx.tiekoetter.com",
    "https://search.rhscz.eu",
    "https://searx.xyz",
    "https://searx.space",
    "https://searx.info",
    "https://searx.mx",
    "https://searx.divided-by-zero.eu",
    "https://searx.stuehmer.dk",
    "https://search.bus-hit.me",
    "https://searx.fyi",
    "https://searx.sethforprivacy.com",
    "https://searx.tuxcloud.net",
    "https://searx.gnous.eu",
    "https://searx.ctis.me",
    "https://searx.dresden.network",
    "https://searx.perennialte.ch",
    "https://searx.rofl.wtf",
    "https://searx.daetalytica.io",
    "https://searx.oakley.xyz",
    "https://searx.org",
    "https://search.ononoki.org",
    "https://searx.prvcy.eu",
    "https://searx.mha.fi",
    "https://searx.namei.net.au",
    "https://searx.ninja",
    "https://searx.ru",
    "https://searx.haxtrax.com",
    "https://searx.lre.io",
    "https://searx.neocities.org",
    "https://search.disroot.org",
    "https://searx.garudalinux.org",
    "https://searx.web-on-fire.eu",
    "https://searx.nakost.it",
    "https://searx.slipfox.xyz",
    "https://searx.ch",
    "https://searx.me",
]


def dedupe_instances(urls: Iterable[str]) -> List[Instance]:
    """Normalize base URLs and drop duplicates, keeping first occurrence."""
    seen: set[str] = set()
    out: List[Instance] = []
    for raw in urls:
        url = (raw or "").strip().rstrip("/")
        try:
            parsed = urlparse(url)
        except ValueError:
            continue
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            continue
        if url in seen:
            continue
        seen.add(url)
        out.append(Instance(url))
    return out


def load_registry(path: Optional[str | Path] = None) -> List[Instance]:
    """Load the instance registry.

    Precedence:
      1) YAML file `instances:` list (explicit path, else instances.yaml,
         instances.yml or config/instances.yaml in the working directory)
      2) FEDSEARCH_INSTANCES environment variable (comma separated)
      3) DEFAULT_INSTANCES
    """

    data = {}
    if path:
        p = Path(path)
        if p.is_file():
            with p.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
    else:
        for candidate in ("instances.yaml", "instances.yml", "config/instances.yaml"):
            pc = Path(candidate)
            if pc.is_file():
                with pc.open("r", encoding="utf-8") as fh:
                    data = yaml.safe_load(fh) or {}
                break

    urls = (data or {}).get("instances") or []
    if not urls:
        env = os.environ.get("FEDSEARCH_INSTANCES", "")
        urls = [u for u in env.split(",") if u.strip()]
    if not urls:
        urls = DEFAULT_INSTANCES
    return dedupe_instances(urls)
