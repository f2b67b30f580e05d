from __future__ import annotations

import asyncio
import logging
from typing import List

from .base import LinkSource
from .frontier import Frontier, OfferOutcome
from ..adapters.base import DomainAdapter

logger = logging.getLogger(__name__)


class DomainTraversal:
    """
    Batch loop for one domain.
    - Frontier owns visited/queue/product bookkeeping and the stop condition.
    - LinkSource owns rendering.
    - At most `batch_size` pages are in flight; the next batch starts once the
      whole current batch has joined.
    """
    def __init__(
        self,
        adapter: DomainAdapter,
        source: LinkSource,
        *,
        batch_size: int = 5,
        visited_per_depth_unit: int = 100,
        max_products: int = 1000,
    ) -> None:
        self.adapter = adapter
        self.source = source
        self.batch_size = batch_size
        self.frontier = Frontier.seed(
            adapter,
            visited_per_depth_unit=visited_per_depth_unit,
            max_products=max_products,
        )
        self.batches = 0

    @property
    def _delay(self) -> float:
        return self.adapter.policy.crawl_delay_ms / 1000

    async def run(self) -> Frontier:
        frontier = self.frontier
        logger.info("Starting crawl for domain: %s", self.adapter.name)

        while frontier.should_continue():
            if self.batches and self._delay:
                await asyncio.sleep(self._delay)
            batch = frontier.take_batch(self.batch_size)
            self.batches += 1
            await asyncio.gather(*(self._visit(url) for url in batch))

        logger.info(
            "Finished %s: %s products, %s visited, %s queued, %s batches",
            self.adapter.name,
            len(frontier.product_urls),
            len(frontier.visited),
            len(frontier.queue),
            self.batches,
        )
        return frontier

    async def _visit(self, url: str) -> None:
        links = await self._links_with_retry(url)
        found = 0
        for link in links:
            if self.frontier.offer(link) is OfferOutcome.PRODUCT:
                found += 1
        if found:
            logger.debug("%s new product URLs from %s", found, url)

    async def _links_with_retry(self, url: str) -> List[str]:
        attempts = self.adapter.policy.retry_attempts + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self.source.links_for(url)
            except Exception as exc:  # per-URL failures never abort the batch
                if attempt == attempts:
                    logger.error(
                        "Error crawling %s after %s attempt(s): %s", url, attempts, exc, exc_info=True
                    )
                    return []
                logger.warning("Attempt %s/%s failed for %s: %r", attempt, attempts, url, exc)
                if self._delay:
                    await asyncio.sleep(self._delay * attempt)
        return []
