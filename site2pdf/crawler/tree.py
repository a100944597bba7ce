# site2pdf/crawler/tree.py
"""
Recursive section tree builder.

Every discovered page is expanded regardless of depth; the visited set passed
through each call is the only thing bounding the recursion.
"""
from __future__ import annotations

import logging
from typing import Optional, Pattern, Set

from site2pdf.crawler.fetcher import Fetcher
from site2pdf.crawler.models import SectionNode
from site2pdf.utils import canonicalize_url

__all__ = ("SectionTreeBuilder",)

logger = logging.getLogger("Site2PDF")


class SectionTreeBuilder:
    """Builds a :class:`SectionNode` tree by driving a :class:`Fetcher`."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    async def build(
        self,
        root: str,
        pattern: Pattern[str],
        visited: Optional[Set[str]] = None,
    ) -> SectionNode:
        """
        Build the tree rooted at *root*.

        A :class:`~site2pdf.errors.NavigationFailed` on the root propagates;
        failures below the root turn the node into a leaf.
        """
        if visited is None:
            visited = set()
        tree = await self._expand(root, pattern, visited, is_root=True)
        logger.info("Section tree built for %s: %d nodes", tree.url, sum(1 for _ in tree.iter_urls()))
        return tree

    async def _expand(
        self,
        url: str,
        pattern: Pattern[str],
        visited: Set[str],
        *,
        is_root: bool = False,
    ) -> SectionNode:
        canonical = canonicalize_url(url)
        if canonical in visited:
            logger.debug("Skipping already visited URL in tree: %s", canonical)
            return SectionNode(canonical)
        visited.add(canonical)

        child_urls = await self.fetcher.fetch(canonical, pattern, strict=is_root)
        node = SectionNode(canonical)
        for child_url in child_urls:
            if not pattern.search(child_url):
                continue
            node.children.append(await self._expand(child_url, pattern, visited))

        logger.info("Built tree node url=%s children=%d", canonical, len(node.children))
        return node
