from __future__ import annotations

import logging
from typing import List, Optional

from aiohttp import ClientSession

from .base import LinkSource
from ..config import CrawlConfig
from ..exceptions import PageLoadError
from ..utils.http import create_session, fetch_text
from ..utils.parsing import extract_links

logger = logging.getLogger(__name__)


class HttpLinkSource(LinkSource):
    """
    A lightweight source for server-rendered shops: plain HTTP + BeautifulSoup.
    No JavaScript runs, so infinite-scroll content is never revealed; use
    PlaywrightLinkSource for sites that build listings client-side.
    """
    name = "http"

    def __init__(self, config: CrawlConfig, *, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        if self._session is None:
            self._session = create_session()

    async def links_for(self, url: str) -> List[str]:
        if self._session is None:
            raise RuntimeError("HttpLinkSource.start() must be awaited first")
        cfg = self.config
        logger.info("Fetching: %s", url)
        # Retries are owned by the traversal loop, so a single attempt here.
        html = await fetch_text(
            self._session,
            url,
            timeout=cfg.request_timeout,
            user_agent=cfg.user_agent,
            retries=0,
        )
        if html is None:
            raise PageLoadError(url, "fetch failed")
        links = extract_links(html, base_url=url)
        logger.debug("Found %s links on %s", len(links), url)
        return links

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None
