# File: site2pdf/splitter.py
"""site2pdf.splitter: разбиение дерева разделов на независимые деревья артефактов.

Разделом считается корень дерева или любой узел хотя бы с одним потомком.  Каждый
раздел становится отдельным артефактом, содержащим только собственных
непосредственных потомков-листьев; вложенные разделы выносятся в соседние
артефакты.
"""

from __future__ import annotations

from typing import List, Set

from site2pdf.crawler.models import SectionNode
from site2pdf.logger import logger

__all__ = ["section_urls", "split_sections"]


def section_urls(tree: SectionNode) -> Set[str]:
    """URL всех разделов дерева: корень плюс каждый узел с потомками."""
    sections = {tree.url}
    stack = [tree]
    while stack:
        node = stack.pop()
        if node.children:
            sections.add(node.url)
            stack.extend(node.children)
    return sections


def split_sections(tree: SectionNode) -> List[SectionNode]:
    """Разбивает дерево на список деревьев разделов в порядке обхода в глубину.

    Ссылка без потомков на URL, который раскрыт как раздел в другом месте,
    не считается листом.  Лист, на который ссылаются несколько родителей,
    достаётся первому разделу в порядке обхода.
    """
    sections = section_urls(tree)
    claimed: Set[str] = set()
    result: List[SectionNode] = []

    def _visit(node: SectionNode) -> None:
        claimed.add(node.url)
        section = SectionNode(node.url)
        result.append(section)
        nested: List[SectionNode] = []
        for child in node.children:
            if child.children:
                nested.append(child)
            elif child.url in sections or child.url in claimed:
                continue
            else:
                claimed.add(child.url)
                section.children.append(SectionNode(child.url))
        for child in nested:
            _visit(child)

    _visit(tree)
    logger.info(
        "Split %s into %d section trees (%d leaf pages)",
        tree.url, len(result), sum(len(s.children) for s in result),
    )
    return result
