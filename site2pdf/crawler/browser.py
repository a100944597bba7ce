# site2pdf/crawler/browser.py
"""
Browser session capability and its headless Chromium implementation.

The crawler core only talks to :class:`BrowserSession`; the Playwright
session below is the production backend.  A session owns exactly one page,
so callers must never drive it from two coroutines at once.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from site2pdf.config import Site2PdfConfig
from site2pdf.crawler.models import NavigationResponse
from site2pdf.errors import NavigationError, RenderFailed, SelectorNotFound
from site2pdf.logger import logger

__all__ = ("BrowserSession", "PlaywrightSession", "DESCRIBE_DOM_JS")

DESCRIBE_DOM_JS = """
() => {
    const classes = Array.from(document.querySelectorAll('div'))
        .map(div => div.className)
        .filter(cls => typeof cls === 'string' && cls);
    const bodyLinks = Array.from(document.querySelectorAll('body a[href]'))
        .map(a => a.getAttribute('href'));
    return `Main div classes: ${JSON.stringify(classes.slice(0, 20))}\\n`
        + `Body links found: ${bodyLinks.length} ${JSON.stringify(bodyLinks.slice(0, 5))}`;
}
"""


@runtime_checkable
class BrowserSession(Protocol):
    """Capabilities the crawler needs from a browser-like session."""

    async def navigate(self, url: str, timeout: float) -> NavigationResponse:
        """Load *url*, waiting for the network to settle. Raises NavigationError."""
        ...

    async def wait_for_region(self, selector: str, timeout: float) -> bool:
        """Return True once *selector* is present in the DOM, False on timeout."""
        ...

    async def scroll_to_bottom(self) -> None:
        ...

    async def extract_anchors(self, selector: str) -> List[str]:
        """Absolute ``href`` values of every element matched by *selector*."""
        ...

    async def describe_dom(self) -> str:
        ...

    async def render_pdf(self) -> bytes:
        """Print the current page to PDF bytes."""
        ...


class PlaywrightSession:
    """Single-page headless Chromium session driven through Playwright."""

    def __init__(self, config: Site2PdfConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> PlaywrightSession:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.config.headless,
            executable_path=self.config.browser_executable,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
            timeout=60_000,
        )
        self._context = await self._browser.new_context(user_agent=self.config.user_agent)
        self._page = await self._context.new_page()
        logger.debug("Browser session started (headless=%s)", self.config.headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._page = self._context = self._browser = self._playwright = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session not started")
        return self._page

    async def navigate(self, url: str, timeout: float) -> NavigationResponse:
        try:
            response = await self.page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
        except PlaywrightError as exc:
            raise NavigationError(str(exc)) from exc
        if response is None:
            return NavigationResponse(url=url)
        return NavigationResponse(url=response.url, status=response.status, headers=dict(response.headers))

    async def wait_for_region(self, selector: str, timeout: float) -> bool:
        try:
            await self.page.wait_for_selector(selector, timeout=timeout * 1000, state="attached")
        except PlaywrightTimeout:
            return False
        except PlaywrightError as exc:
            # malformed selector or a page torn down by a client-side redirect
            raise SelectorNotFound(selector) from exc
        return True

    async def scroll_to_bottom(self) -> None:
        try:
            await self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        except PlaywrightError as exc:
            raise NavigationError(f"scroll failed on {self.page.url}: {exc}") from exc

    async def extract_anchors(self, selector: str) -> List[str]:
        try:
            hrefs = await self.page.locator(selector).evaluate_all(
                "els => els.map(el => el.href).filter(href => typeof href === 'string' && href)"
            )
        except PlaywrightError as exc:
            raise NavigationError(f"link extraction failed on {self.page.url}: {exc}") from exc
        return list(hrefs)

    async def describe_dom(self) -> str:
        try:
            return await self.page.evaluate(DESCRIBE_DOM_JS)
        except PlaywrightError as exc:
            return f"DOM unavailable: {exc}"

    async def render_pdf(self) -> bytes:
        try:
            return await self.page.pdf(
                format=self.config.page_format,
                print_background=self.config.print_background,
            )
        except PlaywrightError as exc:
            raise RenderFailed(self.page.url, str(exc)) from exc
