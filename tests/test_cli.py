import json

from fedsearch import cli
from fedsearch.search.base import AggregatedResponse, Aggregations
from fedsearch.search.errors import NoResultsFound, QueryRequired


class StubService:
    def __init__(self, settings, fail: bool = False):
        self.settings = settings
        self.fail = fail

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def search(self, query, category, safe):
        if self.fail:
            raise NoResultsFound(query, category)
        return AggregatedResponse(
            query=query,
            category=category,
            results=[],
            aggregations=Aggregations(count=0, elapsed_seconds=0.0, instance="https://a.example"),
        )


def test_search_command_prints_json(monkeypatch, capsys):
    monkeypatch.setattr(cli, "SearchService", StubService)
    code = cli.main(["search", "cats", "--category", "images", "--safe"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["query"] == "cats"
    assert out["category"] == "images"
    assert out["aggregations"]["instance"] == "https://a.example"


def test_search_command_exit_code_on_exhaustion(monkeypatch, capsys):
    monkeypatch.setattr(cli, "SearchService", lambda settings: StubService(settings, fail=True))
    assert cli.main(["search", "cats"]) == 1
    assert "No results found" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 2


def test_blank_query_exits_with_usage_error(monkeypatch, capsys):
    class BlankQueryService(StubService):
        async def search(self, query, category, safe):
            raise QueryRequired("Query is required")

    monkeypatch.setattr(cli, "SearchService", BlankQueryService)
    assert cli.main(["search", ""]) == 2
    assert "Query is required" in capsys.readouterr().err
