from typing import Dict, List

import pytest

from product_crawler.adapters.base import DomainAdapter
from product_crawler.config import DomainPolicy
from product_crawler.engines.base import LinkSource


class FakeSource(LinkSource):
    """In-memory link source: url -> links, or an exception to raise."""

    name = "fake"

    def __init__(self, pages: Dict[str, object] | None = None, default=None):
        self.pages = dict(pages or {})
        self.default = default
        self.calls: List[str] = []
        self.started = 0
        self.closed = 0

    async def start(self) -> None:
        self.started += 1

    async def links_for(self, url: str) -> List[str]:
        self.calls.append(url)
        result = self.pages.get(url, self.default)
        if callable(result):
            result = result(url)
        if isinstance(result, Exception):
            raise result
        return list(result or [])

    async def close(self) -> None:
        self.closed += 1


@pytest.fixture
def make_policy():
    def _make(**overrides) -> DomainPolicy:
        data = dict(
            domain_key="example.com",
            base_url="https://example.com",
            product_url_patterns=frozenset({"/products/"}),
            allowed_hosts=frozenset({"example.com"}),
            max_depth_units=3,
            crawl_delay_ms=0,
            retry_attempts=0,
        )
        data.update(overrides)
        return DomainPolicy(**data)

    return _make


@pytest.fixture
def make_adapter(make_policy):
    def _make(**overrides) -> DomainAdapter:
        return DomainAdapter(make_policy(**overrides))

    return _make


@pytest.fixture
def fake_source_cls():
    return FakeSource
