from __future__ import annotations

import enum
from collections import deque
from typing import Deque, List, Set

from ..adapters.base import DomainAdapter
from ..utils.parsing import normalize_url


class OfferOutcome(enum.Enum):
    PRODUCT = "product"
    QUEUED = "queued"
    DUPLICATE = "duplicate"
    OVER_BUDGET = "over_budget"
    OUT_OF_DOMAIN = "out_of_domain"


class Frontier:
    """
    Per-domain crawl state: every URL seen, the FIFO of URLs still to render,
    and the product URLs found so far.

    Anything in `queue` or `product_urls` is also in `visited`, and `visited`
    never shrinks, so no URL is rendered or reported twice. Links outside the
    domain's allowed hosts are dropped without being recorded.
    """

    def __init__(
        self,
        adapter: DomainAdapter,
        *,
        visited_per_depth_unit: int = 100,
        max_products: int = 1000,
    ) -> None:
        self.adapter = adapter
        self.visited: Set[str] = set()
        self.queue: Deque[str] = deque()
        self.product_urls: Set[str] = set()
        # Depth is approximated by volume; there is no per-URL hop count.
        self.max_visited = adapter.policy.max_depth_units * visited_per_depth_unit
        self.max_products = max_products

    @classmethod
    def seed(cls, adapter: DomainAdapter, **limits: int) -> "Frontier":
        frontier = cls(adapter, **limits)
        start = normalize_url(adapter.policy.base_url)
        frontier.visited.add(start)
        frontier.queue.append(start)
        return frontier

    def should_continue(self) -> bool:
        return (
            bool(self.queue)
            and len(self.visited) < self.max_visited
            and len(self.product_urls) < self.max_products
        )

    def take_batch(self, n: int) -> List[str]:
        batch: List[str] = []
        while self.queue and len(batch) < n:
            batch.append(self.queue.popleft())
        return batch

    def offer(self, url: str) -> OfferOutcome:
        link = normalize_url(url)
        if not self.adapter.matches(link):
            return OfferOutcome.OUT_OF_DOMAIN
        if link in self.visited:
            return OfferOutcome.DUPLICATE

        self.visited.add(link)
        # Product pages are recorded, never crawled further.
        if self.adapter.is_product_url(link):
            self.product_urls.add(link)
            return OfferOutcome.PRODUCT
        if len(self.visited) <= self.max_visited:
            self.queue.append(link)
            return OfferOutcome.QUEUED
        return OfferOutcome.OVER_BUDGET
