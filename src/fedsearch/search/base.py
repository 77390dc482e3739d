from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional, get_args

from ..instances.registry import Instance
from .errors import InstanceError

Category = Literal["general", "images", "videos"]
CATEGORIES: tuple[str, ...] = get_args(Category)


@dataclass
class RawExtraction:
    """One discovered item, as produced by either adapter before classification."""

    title: str
    url: str
    snippet: str = ""
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    template: Optional[str] = None
    iframe_src: Optional[str] = None
    engine: Optional[str] = None
    score: Optional[float] = None


@dataclass
class ResultMetadata:
    domain: str
    engine: Optional[str] = None
    score: Optional[float] = None


@dataclass
class SearchResult:
    type: str
    title: str
    url: str
    snippet: str
    thumbnail: Optional[str]
    favicon: str
    metadata: ResultMetadata


@dataclass
class Aggregations:
    count: int
    elapsed_seconds: float
    engines: List[str] = field(default_factory=list)
    instance: Optional[str] = None


@dataclass
class AggregatedResponse:
    query: str
    category: str
    results: List[SearchResult]
    aggregations: Aggregations

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InstanceOutcome:
    """Tagged result of querying one instance: success with results, or a failure value."""

    instance: Instance
    results: List[SearchResult] = field(default_factory=list)
    error: Optional[InstanceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.results)
