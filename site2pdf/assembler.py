# File: site2pdf/assembler.py
"""site2pdf.assembler: сборка артефактов из деревьев разделов.

Страницы каждого раздела рендерятся по одной (корень первым, остальные по
алфавиту) и склеиваются в один PDF.  Глобальное множество обработанных URL
гарантирует, что страница попадёт не более чем в один артефакт за запуск.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Awaitable, Callable, Iterable, List, Optional, Set, Tuple, Union

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from site2pdf.crawler.models import Artifact, SectionNode
from site2pdf.errors import EmptyArtifact, RenderFailed
from site2pdf.logger import logger
from site2pdf.utils import generate_slug

__all__ = ["Assembler", "ordered_urls", "merge_documents", "persist_artifact"]

RenderFn = Callable[[str], Awaitable[bytes]]


def ordered_urls(tree: SectionNode) -> List[str]:
    """Корень первым, затем URL потомков в лексикографическом порядке."""
    return [tree.url] + sorted(child.url for child in tree.children)


def merge_documents(parts: Iterable[bytes]) -> bytes:
    """Склеивает несколько PDF-документов в один."""
    writer = PdfWriter()
    for data in parts:
        for page in PdfReader(BytesIO(data)).pages:
            writer.add_page(page)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def persist_artifact(artifact: Artifact, out_dir: Union[str, Path]) -> Path:
    """Сохраняет артефакт как ``<out_dir>/<slug>.pdf`` и возвращает путь."""
    output = Path(out_dir)
    output.mkdir(parents=True, exist_ok=True)
    path = output / f"{artifact.slug}.pdf"
    path.write_bytes(artifact.content)
    logger.info("PDF saved to %s with %d pages", path, artifact.page_count)
    return path


class Assembler:
    """Рендерит и склеивает страницы деревьев разделов одного запуска."""

    def __init__(self, render: RenderFn, processed: Optional[Set[str]] = None) -> None:
        self.render = render
        self.processed: Set[str] = processed if processed is not None else set()
        self.failed_urls: List[str] = []

    async def assemble(self, tree: SectionNode, slug: Optional[str] = None) -> Artifact:
        """Собирает артефакт для *tree*; бросает EmptyArtifact, если нет ни одной страницы."""
        urls = ordered_urls(tree)
        logger.info("Processing URLs for %s: %s", tree.url, urls)

        parts: List[bytes] = []
        page_count = 0
        merged: List[str] = []
        local: Set[str] = set()
        for url in urls:
            if url in local:
                logger.debug("Skipping duplicate URL %s within PDF", url)
                continue
            local.add(url)
            if url in self.processed:
                logger.info("Skipping PDF for %s (already processed)", url)
                continue
            self.processed.add(url)

            try:
                data, pages = await self._render_pages(url)
            except RenderFailed as exc:
                logger.warning("%s", exc)
                self.failed_urls.append(url)
                continue
            parts.append(data)
            page_count += pages
            merged.append(url)
            logger.info("Merged PDF for %s with %d page(s)", url, pages)

        if page_count == 0:
            raise EmptyArtifact(tree.url)

        return Artifact(
            slug=slug or generate_slug(tree.url),
            root_url=tree.url,
            urls=merged,
            content=merge_documents(parts),
            page_count=page_count,
        )

    async def _render_pages(self, url: str) -> Tuple[bytes, int]:
        data = await self.render(url)
        if not data:
            raise RenderFailed(url, "empty document")
        try:
            pages = len(PdfReader(BytesIO(data)).pages)
        except PyPdfError as exc:
            raise RenderFailed(url, f"unreadable PDF: {exc}") from exc
        if not pages:
            raise RenderFailed(url, "document has no pages")
        return data, pages
