from .base import CATEGORIES, AggregatedResponse, Category, RawExtraction, SearchResult
from .cache import ResultCache, cache_key
from .dispatcher import QueryDispatcher
from .errors import (
    EmptyResultSet,
    InstanceError,
    InstanceTimeout,
    InstanceUnreachable,
    InvalidCategory,
    MalformedResponse,
    NoResultsFound,
    QueryRequired,
    SearchError,
)

__all__ = [
    "CATEGORIES",
    "AggregatedResponse",
    "Category",
    "RawExtraction",
    "SearchResult",
    "ResultCache",
    "cache_key",
    "QueryDispatcher",
    "SearchError",
    "InstanceError",
    "InstanceTimeout",
    "InstanceUnreachable",
    "MalformedResponse",
    "EmptyResultSet",
    "NoResultsFound",
    "QueryRequired",
    "InvalidCategory",
]
