from __future__ import annotations

from typing import Optional


class SearchError(Exception):
    """Base class for search failures."""


class InstanceError(SearchError):
    """A single instance could not produce usable results. Always recovered locally."""

    kind = "instance_error"

    def __init__(self, instance: object, message: str = ""):
        self.instance = instance
        super().__init__(f"{instance}: {message or self.kind}")


class InstanceTimeout(InstanceError):
    kind = "timeout"


class InstanceUnreachable(InstanceError):
    kind = "unreachable"

    def __init__(self, instance: object, message: str = "", status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(instance, message)


class MalformedResponse(InstanceError):
    kind = "malformed"


class EmptyResultSet(InstanceError):
    kind = "empty"


class NoResultsFound(SearchError):
    """Every batch and the broadened fallback were exhausted."""

    def __init__(self, query: str, category: str):
        self.query = query
        self.category = category
        super().__init__(f"No results found for {query!r} ({category})")


class QueryRequired(SearchError):
    pass


class InvalidCategory(SearchError):
    pass
