# site2pdf/errors.py
"""
Exception taxonomy for site2pdf.

Only :class:`PatternInvalid` and a :class:`NavigationFailed` on the root URL
terminate a run; everything else is logged and degraded locally.
"""
from __future__ import annotations

import json
from typing import Mapping, Optional


class Site2PdfError(Exception):
    """Base class for all site2pdf errors."""


class PatternInvalid(Site2PdfError):
    """The inclusion pattern supplied by the caller does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid url pattern {pattern!r}: {reason}")


class NavigationError(Site2PdfError):
    """A single navigation attempt failed inside a browser session."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.status = status
        self.headers = dict(headers or {})
        super().__init__(message)


class NavigationFailed(Site2PdfError):
    """Navigation retries were exhausted for ``url``."""

    def __init__(
        self,
        url: str,
        attempts: int,
        last_error: str,
        status: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        self.status = status
        self.headers = dict(headers or {})
        status_txt = status if status is not None else "No response"
        headers_txt = json.dumps(self.headers) if self.headers else "No headers"
        super().__init__(
            f"Failed to load {url} after {attempts} attempts: {last_error} "
            f"(Status: {status_txt}, Headers: {headers_txt})"
        )


class SelectorNotFound(Site2PdfError):
    """No element matched ``selector`` before its timeout."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Selector not found: {selector}")


class RenderFailed(Site2PdfError):
    """A page could not be turned into a single-page document."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to render {url}: {reason}")


class EmptyArtifact(Site2PdfError):
    """Every page of a section failed to render."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"No pages generated for section {url}")


__all__ = [
    "Site2PdfError",
    "PatternInvalid",
    "NavigationError",
    "NavigationFailed",
    "SelectorNotFound",
    "RenderFailed",
    "EmptyArtifact",
]
