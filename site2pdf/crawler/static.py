# site2pdf/crawler/static.py
"""
Static (no JavaScript) browser session built on aiohttp and BeautifulSoup.

Implements the discovery half of :class:`~site2pdf.crawler.browser.BrowserSession`
for sites whose link lists are present in the served HTML.  It cannot print
pages, so it is only used for section discovery.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence
from urllib.parse import urljoin

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup
from bs4.element import Tag

from site2pdf.config import Site2PdfConfig
from site2pdf.crawler.models import NavigationResponse
from site2pdf.errors import NavigationError, RenderFailed


class StaticSession:
    """Fetches pages over plain HTTP and answers DOM queries from the parsed HTML."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: Site2PdfConfig) -> None:
        self.config = config
        self.session: Optional[ClientSession] = None
        self._soup: Optional[BeautifulSoup] = None
        self._url: str = ""

    async def __aenter__(self) -> StaticSession:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.navigation_timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def navigate(self, url: str, timeout: float) -> NavigationResponse:
        if not self.session:
            raise RuntimeError("Session not initialized")
        self._soup = None
        try:
            async with self.session.get(url, timeout=ClientTimeout(total=timeout)) as resp:
                headers = dict(resp.headers)
                if resp.status in self._RETRY_STATUS:
                    raise NavigationError(f"retryable status {resp.status}", resp.status, headers)
                text = await resp.text(errors="replace")
                final_url = str(resp.url)
                status = resp.status
        except (ClientError, asyncio.TimeoutError) as exc:
            raise NavigationError(str(exc) or type(exc).__name__) from exc

        self._url = final_url
        self._soup = BeautifulSoup(text, "html.parser")
        return NavigationResponse(url=final_url, status=status, headers=headers)

    async def wait_for_region(self, selector: str, timeout: float) -> bool:
        # Served HTML never changes after load, so there is nothing to poll.
        return self._soup is not None and self._soup.select_one(selector) is not None

    async def scroll_to_bottom(self) -> None:
        return None

    async def extract_anchors(self, selector: str) -> List[str]:
        if self._soup is None:
            return []
        hrefs: List[str] = []
        for tag in self._soup.select(selector):
            if not isinstance(tag, Tag):
                continue
            href = tag.get("href")
            if not isinstance(href, str) or not href.strip():
                continue
            raw = href.strip()
            if raw.startswith(("mailto:", "javascript:")):
                continue
            hrefs.append(urljoin(self._url, raw))
        return hrefs

    async def describe_dom(self) -> str:
        if self._soup is None:
            return "DOM unavailable: nothing loaded"
        classes = [" ".join(div.get("class", [])) for div in self._soup.find_all("div") if div.get("class")]
        links = [a.get("href") for a in self._soup.select("body a[href]")]
        return f"Main div classes: {classes[:20]}\nBody links found: {len(links)} {links[:5]}"

    async def render_pdf(self) -> bytes:
        raise RenderFailed(self._url, "static session cannot print pages")
