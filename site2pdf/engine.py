# File: site2pdf/engine.py
"""site2pdf.engine: оркестрация запуска: обход, разбиение, сборка и сохранение артефактов."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncContextManager, Callable, List, Optional, Pattern

from site2pdf.assembler import Assembler, persist_artifact
from site2pdf.config import Site2PdfConfig
from site2pdf.crawler.browser import BrowserSession, PlaywrightSession
from site2pdf.crawler.fetcher import Fetcher, SleepFn
from site2pdf.crawler.models import SectionNode
from site2pdf.crawler.renderer import PageRenderer
from site2pdf.crawler.static import StaticSession
from site2pdf.crawler.tree import SectionTreeBuilder
from site2pdf.errors import EmptyArtifact
from site2pdf.logger import logger
from site2pdf.splitter import split_sections
from site2pdf.utils import canonicalize_url, compile_pattern, generate_slug

__all__ = [
    "ArtifactRecord",
    "RunReport",
    "Engine",
    "discover",
    "run_build",
    "run_discovery",
    "section_commands",
    "flatten_tree",
]

SessionFactory = Callable[[Site2PdfConfig], AsyncContextManager[BrowserSession]]


@dataclass(slots=True)
class ArtifactRecord:
    """Сохранённый артефакт: куда записан и какие страницы содержит."""

    slug: str
    root_url: str
    path: Path
    urls: List[str]
    page_count: int


@dataclass(slots=True)
class RunReport:
    """Итог запуска: дерево, разделы, артефакты и сбои."""

    main_url: str
    pattern: str
    split: bool
    tree: SectionNode
    sections: List[SectionNode] = field(default_factory=list)
    artifacts: List[ArtifactRecord] = field(default_factory=list)
    skipped_sections: List[str] = field(default_factory=list)
    failed_urls: List[str] = field(default_factory=list)


def flatten_tree(tree: SectionNode) -> SectionNode:
    """Один артефакт на всё дерево: корень и все остальные URL как листья."""
    others = sorted({url for url in tree.iter_urls() if url != tree.url})
    return SectionNode(tree.url, [SectionNode(url) for url in others])


def section_commands(tree: SectionNode, prog: str = "site2pdf") -> List[str]:
    """Команды сборки для каждого раздела верхнего уровня."""
    return [f'{prog} build "{child.url}/" "{child.url}/.*"' for child in tree.children]


async def discover(
    session: BrowserSession,
    config: Site2PdfConfig,
    main_url: str,
    pattern: Pattern[str],
    *,
    limiter: Optional[asyncio.Semaphore] = None,
    sleep: SleepFn = asyncio.sleep,
) -> SectionNode:
    """Строит дерево разделов от main_url через переданную сессию."""
    fetcher = Fetcher(session, config, limiter=limiter, sleep=sleep)
    return await SectionTreeBuilder(fetcher).build(main_url, pattern)


class Engine:
    """Один запуск поверх уже открытой сессии браузера."""

    def __init__(
        self,
        session: BrowserSession,
        config: Site2PdfConfig,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.session = session
        self.config = config
        self._sleep = sleep
        # One navigable page: fetches and renders are admitted one at a time.
        self._limiter = asyncio.Semaphore(1)

    async def discover(self, main_url: str, pattern: Pattern[str]) -> SectionNode:
        return await discover(
            self.session, self.config, main_url, pattern, limiter=self._limiter, sleep=self._sleep
        )

    async def run(self, main_url: str, pattern: Pattern[str], split: bool = False) -> RunReport:
        """Обходит сайт и сохраняет артефакты в ``config.out_dir``."""
        main_url = canonicalize_url(main_url)
        logger.info(
            "Generating PDF for %s and sub-links matching %s (split_sections=%s)",
            main_url, pattern.pattern, split,
        )
        tree = await self.discover(main_url, pattern)
        report = RunReport(main_url=main_url, pattern=pattern.pattern, split=split, tree=tree)

        renderer = PageRenderer(self.session, self.config, limiter=self._limiter, sleep=self._sleep)
        assembler = Assembler(renderer.render)

        if split:
            report.sections = split_sections(tree)
        else:
            report.sections = [flatten_tree(tree)]

        for section in report.sections:
            try:
                artifact = await assembler.assemble(section, slug=generate_slug(section.url))
            except EmptyArtifact as exc:
                logger.warning("Skipping section: %s", exc)
                report.skipped_sections.append(section.url)
                continue
            path = persist_artifact(artifact, self.config.out_dir)
            report.artifacts.append(
                ArtifactRecord(
                    slug=artifact.slug,
                    root_url=artifact.root_url,
                    path=path,
                    urls=artifact.urls,
                    page_count=artifact.page_count,
                )
            )

        report.failed_urls = list(assembler.failed_urls)
        logger.info(
            "Completed: %d artifact(s), %d skipped section(s), %d failed page(s)",
            len(report.artifacts), len(report.skipped_sections), len(report.failed_urls),
        )
        return report


def _default_session(config: Site2PdfConfig) -> AsyncContextManager[BrowserSession]:
    return PlaywrightSession(config)


async def run_build(
    config: Site2PdfConfig,
    main_url: str,
    url_pattern: Optional[str] = None,
    split: bool = False,
    session_factory: SessionFactory = _default_session,
) -> RunReport:
    """
    Полный запуск: компиляция шаблона, обход, разбиение, сборка.

    Шаблон компилируется до открытия браузера, поэтому PatternInvalid
    возникает раньше любой сетевой активности.
    """
    main_url = canonicalize_url(main_url)
    pattern = compile_pattern(url_pattern, main_url)
    async with session_factory(config) as session:
        return await Engine(session, config).run(main_url, pattern, split=split)


async def run_discovery(
    config: Site2PdfConfig,
    main_url: str,
    url_pattern: Optional[str] = None,
    static: bool = False,
    session_factory: Optional[SessionFactory] = None,
) -> SectionNode:
    """Только обход: строит дерево разделов (без рендеринга)."""
    main_url = canonicalize_url(main_url)
    pattern = compile_pattern(url_pattern, main_url)
    if session_factory is None:
        session_factory = StaticSession if static else _default_session
    async with session_factory(config) as session:
        return await discover(session, config, main_url, pattern)

