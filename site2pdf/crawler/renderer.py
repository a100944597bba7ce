# site2pdf/crawler/renderer.py
"""
Render primitive: one URL to single-page-document PDF bytes.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from site2pdf.config import Site2PdfConfig
from site2pdf.crawler.browser import BrowserSession
from site2pdf.crawler.fetcher import SleepFn, navigate_with_retry
from site2pdf.errors import SelectorNotFound, Site2PdfError

__all__ = ("PageRenderer",)

logger = logging.getLogger("Site2PDF")


class PageRenderer:
    """Prints pages through the shared session; failures yield empty bytes."""

    def __init__(
        self,
        session: BrowserSession,
        config: Site2PdfConfig,
        limiter: Optional[asyncio.Semaphore] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.session = session
        self.config = config
        self._limiter = limiter or asyncio.Semaphore(1)
        self._sleep = sleep

    async def render(self, url: str) -> bytes:
        logger.info("Generating PDF for %s", url)
        async with self._limiter:
            try:
                data = await self._render(url)
            except (Site2PdfError, PlaywrightError) as exc:
                logger.error("Error generating PDF for %s: %s", url, exc)
                return b""
            finally:
                await self._sleep(self.config.pause_delay)
        logger.info("Generated PDF for %s with %d bytes", url, len(data))
        return data

    async def _render(self, url: str) -> bytes:
        await navigate_with_retry(self.session, url, self.config, self._sleep)
        try:
            found = await self.session.wait_for_region(
                self.config.content_selector, self.config.selector_timeout
            )
        except SelectorNotFound:
            found = False
        if not found:
            logger.warning(
                "Content selector %s missing on %s, printing whole page",
                self.config.content_selector, url,
            )
        await self.session.scroll_to_bottom()
        await self._sleep(self.config.settle_delay)
        return await self.session.render_pdf()
