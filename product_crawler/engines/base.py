from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List
from abc import ABC, abstractmethod


@dataclass
class CrawlReport:
    discovered: Dict[str, List[str]] = field(default_factory=dict)  # domain -> product URLs
    visited_count: int = 0
    failed_domains: List[str] = field(default_factory=list)

    @property
    def product_count(self) -> int:
        return sum(len(urls) for urls in self.discovered.values())


class CrawlEngine(ABC):
    """
    Abstract engine interface. Implementations own the crawl lifecycle.
    """
    @abstractmethod
    async def crawl(self) -> CrawlReport:  # pragma: no cover - interface
        ...


class LinkSource(ABC):
    """
    Turns a page URL into the absolute http(s) links found on it.
    One instance is shared by every domain loop; `start` and `close` are each
    called exactly once by the orchestrator.
    """
    name = "source"

    async def start(self) -> None:
        """Acquire shared resources (browser, HTTP session)."""

    @abstractmethod
    async def links_for(self, url: str) -> List[str]:  # pragma: no cover - interface
        """Load `url` and return its links. Raise on failure; the caller retries."""
        ...

    async def close(self) -> None:
        """Release whatever `start` acquired."""
