# File: site2pdf/crawler/__init__.py
"""site2pdf.crawler: обход сайта через сессию браузера и построение дерева разделов."""

from .fetcher import Fetcher, SelectorStrategy, build_strategies, navigate_with_retry
from .models import Artifact, NavigationResponse, SectionNode
from .tree import SectionTreeBuilder

__all__ = [
    "Artifact",
    "Fetcher",
    "NavigationResponse",
    "SectionNode",
    "SectionTreeBuilder",
    "SelectorStrategy",
    "build_strategies",
    "navigate_with_retry",
]
