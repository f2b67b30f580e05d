from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

SCROLL_HEIGHT_JS = "() => document.body.scrollHeight"
SCROLL_BY_JS = "(distance) => window.scrollBy(0, distance)"


async def settle_page(
    page: Any,
    *,
    step_px: int = 100,
    interval_ms: int = 500,
    settle_ms: int = 500,
    max_scroll_ms: Optional[int] = 60_000,
) -> bool:
    """
    Scroll `page` until infinitely-loaded content stops appearing.

    Every `interval_ms` the page is scrolled by `step_px`. Once the distance
    scrolled reaches the content height, wait `settle_ms` and measure again:
    an unchanged height means the page is settled, a taller page restarts the
    count. Returns True when settled, False when `max_scroll_ms` elapsed
    (None or 0 disables the bound) or the page errored. Errors are logged
    and never raised, so callers can always extract whatever has rendered.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + max_scroll_ms / 1000 if max_scroll_ms else None
    scrolled = 0
    url = getattr(page, "url", "<page>")

    try:
        while True:
            if deadline is not None and loop.time() >= deadline:
                logger.warning("Scrolling %s did not settle within %sms", url, max_scroll_ms)
                return False

            height = await page.evaluate(SCROLL_HEIGHT_JS)
            await page.evaluate(SCROLL_BY_JS, step_px)
            scrolled += step_px

            if scrolled >= height:
                await asyncio.sleep(settle_ms / 1000)
                new_height = await page.evaluate(SCROLL_HEIGHT_JS)
                if new_height == height:
                    logger.debug("Page %s settled at height %s", url, height)
                    return True
                scrolled = 0

            await asyncio.sleep(interval_ms / 1000)
    except Exception as exc:  # broad catch: a page that cannot scroll still yields its links
        logger.error("Error during infinite scroll on %s: %s", url, exc)
        return False
