import httpx
import pytest

from fedsearch.instances.registry import Instance
from fedsearch.search.errors import EmptyResultSet, InstanceTimeout, InstanceUnreachable, MalformedResponse
from fedsearch.search.structured import fetch_structured, parse_results

INST = Instance("https://searx.example")


def _resp(**kwargs) -> httpx.Response:
    return httpx.Response(request=httpx.Request("GET", "https://searx.example/search"), **kwargs)


def test_parse_results_resolves_fields():
    resp = _resp(
        status_code=200,
        json={
            "results": [
                {
                    "title": "Cat",
                    "url": "https://en.wikipedia.org/wiki/Cat",
                    "content": "The cat is a domestic species.",
                    "img_src": "/image_proxy?url=abc",
                    "engine": "wikipedia",
                    "score": "2.5",
                    "template": "images.html",
                    "category": "General",
                },
                {"title": "no url"},
                {"title": "Snippet only", "url": "https://b.example", "snippet": "fallback text", "engines": ["bing"]},
            ]
        },
    )
    items = parse_results(INST, resp)
    assert len(items) == 2
    cat = items[0]
    assert cat.snippet == "The cat is a domestic species."
    assert cat.thumbnail == "https://searx.example/image_proxy?url=abc"
    assert cat.score == 2.5
    assert cat.template == "images"
    assert cat.category == "general"
    assert items[1].snippet == "fallback text"
    assert items[1].engine == "bing"


def test_parse_results_rejects_non_json_and_missing_array():
    with pytest.raises(MalformedResponse):
        parse_results(INST, _resp(status_code=200, text="<html>nope</html>"))
    with pytest.raises(MalformedResponse):
        parse_results(INST, _resp(status_code=200, json={"answers": []}))
    with pytest.raises(EmptyResultSet):
        parse_results(INST, _resp(status_code=200, json={"results": []}))


@pytest.mark.asyncio
async def test_fetch_structured_tries_aliases_in_order():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        if request.url.params.get("categories") == "videos":
            return httpx.Response(200, json={"results": []})
        return httpx.Response(200, json={"results": [{"title": "v", "url": "https://vimeo.com/1"}]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        items = await fetch_structured(client, INST, "cats", aliases=["videos", "video"], safe=True)

    assert [i.url for i in items] == ["https://vimeo.com/1"]
    assert [p["categories"] for p in seen] == ["videos", "video"]
    assert all(p["format"] == "json" and p["safesearch"] == "1" and p["q"] == "cats" for p in seen)


@pytest.mark.asyncio
async def test_fetch_structured_raises_last_status_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text="Too Many Requests")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(InstanceUnreachable) as info:
            await fetch_structured(client, INST, "cats")
    assert info.value.status_code == 429


@pytest.mark.asyncio
async def test_fetch_structured_maps_transport_errors():
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    def refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(timeout)) as client:
        with pytest.raises(InstanceTimeout):
            await fetch_structured(client, INST, "cats", aliases=["images", "it"])
    async with httpx.AsyncClient(transport=httpx.MockTransport(refused)) as client:
        with pytest.raises(InstanceUnreachable) as info:
            await fetch_structured(client, INST, "cats")
    assert info.value.status_code is None


def test_parse_results_drops_unparseable_urls():
    resp = _resp(
        status_code=200,
        json={
            "results": [
                {"title": "Good", "url": "https://good.example/a", "content": "fine"},
                {"title": "Bad", "url": "http://[oops/page", "img_src": "http://[oops/img.png"},
                {"title": "Bad thumb", "url": "https://good.example/b", "img_src": "http://[broken"},
            ]
        },
    )
    items = parse_results(INST, resp)
    assert [i.url for i in items] == ["https://good.example/a", "https://good.example/b"]
    assert items[1].thumbnail is None
