# site2pdf/crawler/models.py
"""
Data models for the site2pdf crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass(slots=True)
class SectionNode:
    """One discovered page: canonical URL plus the child pages found on it."""

    url: str
    children: List[SectionNode] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_urls(self) -> Iterator[str]:
        """Pre-order walk over every URL in the subtree (duplicate references included)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node.url
            stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "children": [child.to_dict() for child in self.children]}


@dataclass(slots=True)
class NavigationResponse:
    """What the last navigation observed: final URL, status and headers."""

    url: str
    status: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class Artifact:
    """Merged multi-page PDF for one section tree."""

    slug: str
    root_url: str
    urls: List[str]
    content: bytes
    page_count: int
