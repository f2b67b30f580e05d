from __future__ import annotations

import asyncio
import logging
from typing import List, Mapping, Optional, Tuple

from .base import CrawlEngine, CrawlReport, LinkSource
from .traversal import DomainTraversal
from ..adapters.base import DomainAdapter
from ..adapters.registry import build_adapters
from ..config import CrawlConfig
from ..exceptions import EngineLaunchError
from ..utils.loader import load_symbol

logger = logging.getLogger(__name__)

_DomainOutcome = Tuple[str, Optional[List[str]], int]


class ProductCrawlEngine(CrawlEngine):
    """
    Runs one DomainTraversal per enabled domain, all sharing one LinkSource.

    The source is started before any domain and closed exactly once after
    every domain has finished, even if one of them blew up. A source that
    cannot start aborts the whole run with EngineLaunchError.
    """
    def __init__(
        self,
        config: CrawlConfig,
        adapters: Optional[Mapping[str, DomainAdapter]] = None,
        source: Optional[LinkSource] = None,
    ) -> None:
        self.config = config
        self.adapters = adapters if adapters is not None else build_adapters(config.enabled_policies())
        self.source = source

    def _make_source(self) -> LinkSource:
        source_cls = load_symbol(self.config.engine)
        return source_cls(self.config)

    async def crawl(self) -> CrawlReport:
        source = self.source or self._make_source()
        logger.info("Starting crawler for domains: %s", ", ".join(self.adapters))
        try:
            await source.start()
        except EngineLaunchError:
            raise
        except Exception as exc:
            raise EngineLaunchError(getattr(source, "name", type(source).__name__), exc) from exc

        try:
            outcomes = await asyncio.gather(
                *(self._crawl_domain(adapter, source) for adapter in self.adapters.values())
            )
        finally:
            await source.close()

        report = CrawlReport()
        for domain, products, visited in outcomes:
            if products is None:
                report.failed_domains.append(domain)
                products = []
            # Already distinct; sorted for stable output.
            report.discovered[domain] = sorted(set(products))
            report.visited_count += visited
        return report

    async def _crawl_domain(self, adapter: DomainAdapter, source: LinkSource) -> _DomainOutcome:
        cfg = self.config
        try:
            traversal = DomainTraversal(
                adapter,
                source,
                batch_size=cfg.batch_size,
                visited_per_depth_unit=cfg.visited_per_depth_unit,
                max_products=cfg.max_products,
            )
            frontier = await traversal.run()
        except Exception:
            logger.exception("Crawl failed for domain: %s", adapter.name)
            return adapter.name, None, 0
        return adapter.name, list(frontier.product_urls), len(frontier.visited)
