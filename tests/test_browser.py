# File: tests/test_browser.py
"""PlaywrightSession error mapping, driven through a stub page instead of Chromium."""
from __future__ import annotations

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from site2pdf.crawler.browser import BrowserSession, PlaywrightSession
from site2pdf.errors import NavigationError, RenderFailed, SelectorNotFound

DESTROYED = "Execution context was destroyed, most likely because of a navigation"


class StubLocator:
    def __init__(self, error):
        self.error = error

    async def evaluate_all(self, script):
        raise self.error


class StubPage:
    url = "https://x.com/docs/a"

    def __init__(self, error):
        self.error = error

    async def goto(self, url, wait_until, timeout):
        raise self.error

    async def wait_for_selector(self, selector, timeout, state):
        raise self.error

    async def evaluate(self, script):
        raise self.error

    def locator(self, selector):
        return StubLocator(self.error)

    async def pdf(self, format, print_background):
        raise self.error


def session_with(error, fast_config) -> PlaywrightSession:
    session = PlaywrightSession(fast_config)
    session._page = StubPage(error)
    return session


def test_playwright_session_satisfies_protocol(fast_config):
    assert isinstance(PlaywrightSession(fast_config), BrowserSession)


@pytest.mark.asyncio()
async def test_wait_timeout_is_not_found(fast_config):
    session = session_with(PlaywrightTimeout("Timeout 100ms exceeded"), fast_config)
    assert await session.wait_for_region("div.content", 0.1) is False


@pytest.mark.asyncio()
async def test_unusable_selector_raises_selector_not_found(fast_config):
    session = session_with(PlaywrightError("Unexpected token \"]\" while parsing selector"), fast_config)
    with pytest.raises(SelectorNotFound):
        await session.wait_for_region("div[", 0.1)


@pytest.mark.asyncio()
async def test_destroyed_context_maps_to_navigation_error(fast_config):
    session = session_with(PlaywrightError(DESTROYED), fast_config)
    with pytest.raises(NavigationError):
        await session.scroll_to_bottom()
    with pytest.raises(NavigationError):
        await session.extract_anchors("a")
    with pytest.raises(NavigationError):
        await session.navigate("https://x.com/docs/a", 1.0)


@pytest.mark.asyncio()
async def test_print_failure_maps_to_render_failed(fast_config):
    session = session_with(PlaywrightError(DESTROYED), fast_config)
    with pytest.raises(RenderFailed) as excinfo:
        await session.render_pdf()
    assert excinfo.value.url == StubPage.url


@pytest.mark.asyncio()
async def test_describe_dom_never_raises(fast_config):
    session = session_with(PlaywrightError(DESTROYED), fast_config)
    assert (await session.describe_dom()).startswith("DOM unavailable")
