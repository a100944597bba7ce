# site2pdf/crawler/fetcher.py
"""
Fetcher module: one page visit with retry/backoff, selector fallback and link extraction.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Pattern

from playwright.async_api import Error as PlaywrightError

from site2pdf.config import Site2PdfConfig
from site2pdf.crawler.browser import BrowserSession
from site2pdf.crawler.models import NavigationResponse
from site2pdf.errors import NavigationError, NavigationFailed, SelectorNotFound, Site2PdfError
from site2pdf.utils import canonicalize_url, remove_duplicates

__all__ = ("SelectorStrategy", "Fetcher", "build_strategies", "navigate_with_retry")

SleepFn = Callable[[float], Awaitable[None]]

logger = logging.getLogger("Site2PDF")


@dataclass(frozen=True, slots=True)
class SelectorStrategy:
    """One step of the selector fallback chain."""

    name: str
    wait_selector: str
    link_selector: str
    attempts: int = 1
    timeout: float = 5.0
    retry_delay: float = 0.0


def build_strategies(config: Site2PdfConfig) -> List[SelectorStrategy]:
    """Content region first, then navigation, then any anchor in the fallback region."""
    return [
        SelectorStrategy(
            name="content",
            wait_selector=config.content_selector,
            link_selector=config.content_links(),
            attempts=config.selector_attempts,
            timeout=config.selector_timeout,
            retry_delay=config.selector_retry_delay,
        ),
        SelectorStrategy(
            name="navigation",
            wait_selector=config.nav_selector,
            link_selector=config.nav_selector,
            timeout=config.selector_timeout,
        ),
        SelectorStrategy(
            name="generic",
            wait_selector=config.fallback_selector,
            link_selector=f"{config.fallback_selector} a[href]",
            timeout=config.fallback_timeout,
        ),
    ]


async def navigate_with_retry(
    session: BrowserSession,
    url: str,
    config: Site2PdfConfig,
    sleep: SleepFn = asyncio.sleep,
) -> NavigationResponse:
    """
    Navigate to *url* with up to ``navigation_attempts`` tries.

    Waits ``backoff_base * 2 ** (attempt - 1)`` seconds between failed attempts
    and raises :class:`NavigationFailed` with the last observed status/headers
    once the budget is spent.
    """
    attempts = config.navigation_attempts
    last_error = "Unknown error"
    status: Optional[int] = None
    headers: dict = {}
    for attempt in range(1, attempts + 1):
        try:
            return await session.navigate(url, config.navigation_timeout)
        except NavigationError as exc:
            last_error = str(exc) or type(exc).__name__
            if exc.status is not None:
                status, headers = exc.status, exc.headers
            if attempt == attempts:
                break
            backoff = config.backoff_base * 2 ** (attempt - 1)
            logger.warning(
                "Navigation retry url=%s attempt=%d/%d backoff=%.1fs error=%s",
                url, attempt, attempts, backoff, last_error,
            )
            await sleep(backoff)
    raise NavigationFailed(url, attempts, last_error, status, headers)


class Fetcher:
    """Visits a page through a shared session and returns its child links."""

    def __init__(
        self,
        session: BrowserSession,
        config: Site2PdfConfig,
        limiter: Optional[asyncio.Semaphore] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.session = session
        self.config = config
        self.strategies = build_strategies(config)
        self._limiter = limiter or asyncio.Semaphore(1)
        self._sleep = sleep

    async def fetch(self, url: str, pattern: Pattern[str], *, strict: bool = False) -> List[str]:
        """
        Return canonical child links of *url* that match *pattern*.

        With ``strict=False`` an exhausted navigation or a page error during link
        extraction is logged and yields an empty list; with ``strict=True`` both
        surface as :class:`NavigationFailed`.
        """
        url = canonicalize_url(url)
        async with self._limiter:
            try:
                await navigate_with_retry(self.session, url, self.config, self._sleep)
            except NavigationFailed as exc:
                if strict:
                    raise
                logger.warning("Fetch failed, treating as leaf: %s", exc)
                return []
            try:
                raw_links = await self._collect_links(url)
            except (Site2PdfError, PlaywrightError) as exc:
                if strict:
                    raise NavigationFailed(url, 1, str(exc) or type(exc).__name__) from exc
                logger.warning("Link extraction failed url=%s, treating as leaf: %s", url, exc)
                return []
            finally:
                await self._sleep(self.config.pause_delay)

        links = [
            link
            for link in remove_duplicates([canonicalize_url(href) for href in raw_links])
            if link and link != url and pattern.search(link)
        ]
        logger.info("Found links url=%s raw=%d matched=%d", url, len(raw_links), len(links))
        logger.debug("Links from %s: %s", url, links)
        return links

    async def _collect_links(self, url: str) -> List[str]:
        settled = False
        for strategy in self.strategies:
            try:
                await self._locate(strategy, url)
            except SelectorNotFound as exc:
                logger.info("Selector fallback url=%s strategy=%s: %s", url, strategy.name, exc)
                continue
            if not settled:
                await self.session.scroll_to_bottom()
                await self._sleep(self.config.settle_delay)
                settled = True
            hrefs = await self.session.extract_anchors(strategy.link_selector)
            if hrefs:
                logger.debug("Using strategy=%s for %s (%d anchors)", strategy.name, url, len(hrefs))
                return hrefs
            logger.info("No anchors url=%s strategy=%s, trying next", url, strategy.name)

        dom = await self.session.describe_dom()
        logger.warning("No link region found url=%s, zero links. %s", url, dom)
        return []

    async def _locate(self, strategy: SelectorStrategy, url: str) -> None:
        for attempt in range(1, strategy.attempts + 1):
            if await self.session.wait_for_region(strategy.wait_selector, strategy.timeout):
                return
            if attempt < strategy.attempts:
                logger.info(
                    "Selector retry url=%s selector=%s attempt=%d/%d",
                    url, strategy.wait_selector, attempt, strategy.attempts,
                )
                await self._sleep(strategy.retry_delay)
        raise SelectorNotFound(strategy.wait_selector)
