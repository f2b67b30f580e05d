from __future__ import annotations

import logging
from typing import Any, List, Optional

from playwright.async_api import async_playwright

from .base import LinkSource
from .content_loader import settle_page
from ..config import CrawlConfig
from ..exceptions import EngineLaunchError
from ..utils.parsing import HTTP_SCHEMES

logger = logging.getLogger(__name__)

ANCHOR_HREFS_JS = "() => Array.from(document.querySelectorAll('a'), (a) => a.href)"


class PlaywrightLinkSource(LinkSource):
    """
    Renders pages in headless Chromium so JavaScript-built listings and
    infinite-scroll grids are visible before links are read.

    One browser is shared; each URL gets its own page in a fresh browser
    context, closed whatever happens.
    """
    name = "playwright"

    def __init__(self, config: CrawlConfig, *, browser: Optional[Any] = None) -> None:
        self.config = config
        self._browser = browser
        self._playwright: Optional[Any] = None

    async def start(self) -> None:
        if self._browser is not None:
            return
        cfg = self.config
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=cfg.headless,
                args=list(cfg.browser_args),
            )
        except Exception as exc:
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
            raise EngineLaunchError(self.name, exc) from exc
        logger.info("Launched Chromium (headless=%s)", cfg.headless)

    async def links_for(self, url: str) -> List[str]:
        if self._browser is None:
            raise RuntimeError("PlaywrightLinkSource.start() must be awaited first")
        cfg = self.config

        page = await self._browser.new_page()
        try:
            logger.info("Navigating to: %s", url)
            await page.goto(url, wait_until=cfg.wait_until, timeout=cfg.navigation_timeout_ms)
            await settle_page(
                page,
                step_px=cfg.scroll_step_px,
                interval_ms=cfg.scroll_interval_ms,
                settle_ms=cfg.scroll_settle_ms,
                max_scroll_ms=cfg.max_scroll_ms,
            )
            hrefs = await page.evaluate(ANCHOR_HREFS_JS)
        finally:
            await page.close()

        links = [href for href in hrefs if href and href.startswith(HTTP_SCHEMES)]
        logger.debug("Found %s links on %s", len(links), url)
        return links

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
