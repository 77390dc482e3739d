from fedsearch.search.base import AggregatedResponse, Aggregations
from fedsearch.search.cache import ResultCache, cache_key


def _resp(query: str) -> AggregatedResponse:
    return AggregatedResponse(query=query, category="general", results=[], aggregations=Aggregations(count=0, elapsed_seconds=0.1))


def test_get_within_ttl_and_stale_after(clock):
    cache = ResultCache(ttl_seconds=600, clock=clock)
    key = cache_key("cats", "general", False)
    assert cache.get(key) is None

    payload = _resp("cats")
    cache.put(key, payload)
    clock.advance(600)
    assert cache.get(key) is payload

    clock.advance(1)
    assert cache.get(key) is None
    # stale entries stay until overwritten
    assert len(cache) == 1


def test_put_overwrites(clock):
    cache = ResultCache(ttl_seconds=10, clock=clock)
    key = cache_key("cats", "images", True)
    cache.put(key, _resp("first"))
    clock.advance(20)
    cache.put(key, _resp("second"))
    assert cache.get(key).query == "second"


def test_key_normalizes_query_text():
    assert cache_key("  Cats   and dogs ", "general", False) == ("cats and dogs", "general", False)
    assert cache_key("cats", "general", False) != cache_key("cats", "general", True)
    assert cache_key("cats", "general", False) != cache_key("cats", "videos", False)
