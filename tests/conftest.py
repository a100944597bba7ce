# File: tests/conftest.py
from __future__ import annotations

from io import BytesIO
from typing import Callable, Dict, List, Optional

import pytest
from pypdf import PdfWriter

from site2pdf.config import Site2PdfConfig
from site2pdf.crawler.models import NavigationResponse, SectionNode
from site2pdf.errors import NavigationError

CONTENT = "div.content"
NAV = "nav a.leaf"


def make_pdf(pages: int = 1) -> bytes:
    """Return a valid PDF with *pages* blank pages."""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def node(url: str, *children: SectionNode) -> SectionNode:
    return SectionNode(url, list(children))


class FakeSession:
    """
    In-memory BrowserSession.

    ``site`` maps a URL to the selectors present on it and the anchors each
    selector yields; ``failures`` maps a URL to the number of navigations that
    fail before it loads.
    """

    def __init__(
        self,
        site: Dict[str, Dict[str, List[str]]],
        failures: Optional[Dict[str, int]] = None,
        pdf_pages: Optional[Dict[str, int]] = None,
    ) -> None:
        self.site = site
        self.failures = dict(failures or {})
        self.pdf_pages = pdf_pages or {}
        self.current: Optional[str] = None
        self.navigations: List[str] = []
        self.waits: List[str] = []
        self.scrolls = 0

    async def __aenter__(self) -> FakeSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def navigate(self, url: str, timeout: float) -> NavigationResponse:
        self.navigations.append(url)
        self.current = None
        if self.failures.get(url, 0) > 0:
            self.failures[url] -= 1
            raise NavigationError("net::ERR_CONNECTION_RESET", 503, {"retry-after": "1"})
        if url not in self.site:
            raise NavigationError("net::ERR_NAME_NOT_RESOLVED")
        self.current = url
        return NavigationResponse(url=url, status=200)

    def _regions(self) -> Dict[str, List[str]]:
        return self.site.get(self.current, {}) if self.current else {}

    async def wait_for_region(self, selector: str, timeout: float) -> bool:
        self.waits.append(selector)
        return selector in self._regions()

    async def scroll_to_bottom(self) -> None:
        self.scrolls += 1

    async def extract_anchors(self, selector: str) -> List[str]:
        regions = self._regions()
        for key, links in regions.items():
            if selector == key or selector.startswith(key + " "):
                return list(links)
        return []

    async def describe_dom(self) -> str:
        return f"regions={list(self._regions())}"

    async def render_pdf(self) -> bytes:
        if self.current is None:
            return b""
        pages = self.pdf_pages.get(self.current, 1)
        return make_pdf(pages) if pages else b""


class BrokenPageSession(FakeSession):
    """
    FakeSession whose page operations raise on selected URLs.

    ``broken`` maps a URL to the method names that raise ``error()`` once the
    page is loaded, e.g. a browser context destroyed by a client-side redirect.
    """

    def __init__(self, site, broken: Dict[str, set], error: Callable[[], Exception], **kwargs) -> None:
        super().__init__(site, **kwargs)
        self.broken = broken
        self.error = error

    def _check(self, method: str) -> None:
        if self.current and method in self.broken.get(self.current, ()):
            raise self.error()

    async def wait_for_region(self, selector: str, timeout: float) -> bool:
        self._check("wait_for_region")
        return await super().wait_for_region(selector, timeout)

    async def scroll_to_bottom(self) -> None:
        self._check("scroll_to_bottom")
        await super().scroll_to_bottom()

    async def extract_anchors(self, selector: str) -> List[str]:
        self._check("extract_anchors")
        return await super().extract_anchors(selector)

    async def render_pdf(self) -> bytes:
        self._check("render_pdf")
        return await super().render_pdf()


@pytest.fixture()
def fast_config(tmp_path) -> Site2PdfConfig:
    """Configuration with every delay set to zero and test selectors."""
    return Site2PdfConfig(
        content_selector=CONTENT,
        nav_selector=NAV,
        content_link_selector="{content} a",
        navigation_attempts=5,
        backoff_base=1.0,
        navigation_timeout=1.0,
        selector_attempts=2,
        selector_timeout=0.1,
        selector_retry_delay=0,
        fallback_timeout=0.1,
        settle_delay=0,
        pause_delay=0,
        out_dir=tmp_path / "out",
    )


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def fake_sleep(sleeps: List[float]) -> Callable[[float], object]:
    """Records requested delays instead of sleeping."""

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture()
def pdf_bytes() -> Callable[[int], bytes]:
    return make_pdf
