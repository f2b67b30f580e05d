import asyncio
import itertools
import logging

from product_crawler.engines import traversal as traversal_module
from product_crawler.engines.traversal import DomainTraversal


def test_scenario_products_dedupe_and_external_dropped(make_adapter, fake_source_cls):
    source = fake_source_cls({
        "https://example.com": [
            "https://example.com/products/1",
            "https://example.com/products/1/",
            "https://external.com/x",
        ],
    })
    frontier = asyncio.run(DomainTraversal(make_adapter(), source).run())

    assert frontier.product_urls == {"https://example.com/products/1"}
    assert not frontier.queue
    assert "https://external.com/x" not in frontier.visited
    assert source.calls == ["https://example.com"]


def test_crawlable_links_are_followed_and_products_are_not(make_adapter, fake_source_cls):
    source = fake_source_cls({
        "https://example.com": ["https://example.com/collections/a", "https://example.com/products/1"],
        "https://example.com/collections/a": [
            "https://example.com/products/2",
            "https://www.example.com/collections/b/",
        ],
        "https://www.example.com/collections/b": ["https://example.com/products/3"],
    })
    frontier = asyncio.run(DomainTraversal(make_adapter(), source).run())

    assert frontier.product_urls == {
        "https://example.com/products/1",
        "https://example.com/products/2",
        "https://example.com/products/3",
    }
    assert not any("/products/" in url for url in source.calls)


def test_batches_are_bounded_by_batch_size(make_adapter, fake_source_cls):
    in_flight = 0
    peak = 0

    class SlowSource(fake_source_cls):
        async def links_for(self, url):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return await super().links_for(url)

    seed_links = [f"https://example.com/c/{i}" for i in range(12)]
    source = SlowSource({"https://example.com": seed_links}, default=[])
    traversal = DomainTraversal(make_adapter(), source, batch_size=5)
    asyncio.run(traversal.run())

    assert peak == 5
    assert len(source.calls) == 13
    assert traversal.batches == 4


def test_infinite_site_terminates_at_visited_cap(make_adapter, fake_source_cls):
    counter = itertools.count()

    def fresh_links(url):
        return [f"https://example.com/c/{next(counter)}" for _ in range(50)]

    source = fake_source_cls(default=fresh_links)
    traversal = DomainTraversal(make_adapter(max_depth_units=1), source)
    frontier = asyncio.run(traversal.run())

    assert len(frontier.visited) >= 100
    assert frontier.queue
    assert traversal.batches == 2
    assert len(source.calls) == 6


def test_failing_url_is_retried_then_recovers(make_adapter, fake_source_cls):
    failures = iter([TimeoutError("nav timeout")])

    def flaky(url):
        return next(failures, ["https://example.com/products/9"])

    source = fake_source_cls({"https://example.com": flaky})
    frontier = asyncio.run(DomainTraversal(make_adapter(retry_attempts=2), source).run())

    assert source.calls == ["https://example.com", "https://example.com"]
    assert frontier.product_urls == {"https://example.com/products/9"}


def test_exhausted_retries_log_and_continue(make_adapter, fake_source_cls, caplog):
    caplog.set_level(logging.ERROR)
    source = fake_source_cls({
        "https://example.com": ["https://example.com/c/bad", "https://example.com/c/good"],
        "https://example.com/c/bad": RuntimeError("Target closed"),
        "https://example.com/c/good": ["https://example.com/products/1"],
    })
    frontier = asyncio.run(DomainTraversal(make_adapter(retry_attempts=1), source).run())

    assert source.calls.count("https://example.com/c/bad") == 2
    assert frontier.product_urls == {"https://example.com/products/1"}
    assert "Target closed" in caplog.text


def test_crawl_delay_between_batches_and_retries(make_adapter, fake_source_cls, monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(traversal_module.asyncio, "sleep", fake_sleep)
    source = fake_source_cls({
        "https://example.com": ["https://example.com/c/1"],
        "https://example.com/c/1": RuntimeError("boom"),
    })
    adapter = make_adapter(crawl_delay_ms=1500, retry_attempts=2)
    asyncio.run(DomainTraversal(adapter, source).run())

    # One pause before the second batch, then linear backoff for two retries.
    assert delays == [1.5, 1.5, 3.0]
