import json

import pytest

from product_crawler.engines.base import CrawlReport
from product_crawler.exceptions import EngineLaunchError
from product_crawler.ui import cli


class _FakeEngine:
    report = CrawlReport(discovered={"newme.asia": ["https://newme.asia/product/1"]}, visited_count=7)
    error = None
    seen = []

    def __init__(self, config, adapters=None, source=None):
        self.config = config
        _FakeEngine.seen.append(sorted(adapters))

    async def crawl(self):
        if self.error:
            raise self.error
        return self.report


@pytest.fixture
def fake_engine(monkeypatch):
    _FakeEngine.error = None
    _FakeEngine.seen = []
    monkeypatch.setattr(cli, "ProductCrawlEngine", _FakeEngine)
    return _FakeEngine


def test_successful_run_prints_and_writes_results(fake_engine, tmp_path, capsys):
    out = tmp_path / "product-urls.json"
    code = cli.run_cli(["--domains", "newme.asia", "--output", str(out)])

    assert code == 0
    assert fake_engine.seen == [["newme.asia"]]
    expected = {"newme.asia": ["https://newme.asia/product/1"]}
    assert json.loads(capsys.readouterr().out) == expected
    assert json.loads(out.read_text(encoding="utf-8")) == expected


def test_fatal_failure_exits_nonzero_without_output(fake_engine, tmp_path):
    fake_engine.error = EngineLaunchError("playwright", RuntimeError("no browser"))
    out = tmp_path / "product-urls.json"

    assert cli.run_cli(["--output", str(out)]) == 1
    assert not out.exists()


def test_invalid_domain_selection_is_fatal(fake_engine, tmp_path):
    out = tmp_path / "product-urls.json"
    assert cli.run_cli(["--domains", "unknown.shop", "--output", str(out)]) == 1
    assert fake_engine.seen == []


def test_cli_overrides_apply_to_config(monkeypatch):
    monkeypatch.delenv("CRAWLER_DOMAINS", raising=False)
    args = cli.build_arg_parser().parse_args(
        ["--batch-size", "2", "--max-scroll-ms", "0", "--headful",
         "--engine", "product_crawler.engines.simple_engine:HttpLinkSource"]
    )
    cfg = cli._load_config(args)
    assert cfg.batch_size == 2
    assert cfg.max_scroll_ms is None
    assert cfg.headless is False
    assert cfg.engine.endswith(":HttpLinkSource")
