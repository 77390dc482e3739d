from pathlib import Path

from fedsearch.instances.registry import DEFAULT_INSTANCES, Instance, dedupe_instances, load_registry


def test_dedupe_normalizes_and_keeps_first():
    out = dedupe_instances(["https://a.example/", " https://a.example", "ftp://nope", "", "http://b.example"])
    assert out == [Instance("https://a.example"), Instance("http://b.example")]


def test_default_registry_has_no_duplicates():
    reg = dedupe_instances(DEFAULT_INSTANCES)
    assert len(reg) == len({i.base_url for i in reg})


def test_load_from_yaml(tmp_path: Path):
    p = tmp_path / "instances.yaml"
    p.write_text("instances:\n  - https://x.example/\n  - https://y.example\n  - https://x.example\n", encoding="utf-8")
    reg = load_registry(p)
    assert [i.base_url for i in reg] == ["https://x.example", "https://y.example"]


def test_env_fallback(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FEDSEARCH_INSTANCES", "https://e1.example, https://e2.example")
    reg = load_registry()
    assert [i.host for i in reg] == ["e1.example", "e2.example"]


def test_builtin_default(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FEDSEARCH_INSTANCES", raising=False)
    reg = load_registry(tmp_path / "missing.yaml")
    assert reg and reg[0].base_url == DEFAULT_INSTANCES[0]
