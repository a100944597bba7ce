# File: site2pdf/utils.py
"""site2pdf.utils: канонизация URL, компиляция шаблона включения и генерация slug."""

from __future__ import annotations

import re
from typing import Collection, List, Optional, Pattern, Sequence
from urllib.parse import urlsplit, urlunsplit

from site2pdf.errors import PatternInvalid
from site2pdf.logger import logger

__all__: Sequence[str] = (
    "canonicalize_url",
    "compile_pattern",
    "default_pattern",
    "generate_slug",
    "remove_duplicates",
)

_SCHEME_RE = re.compile(r"https?://")
_NON_WORD_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"-+")


def _strip_fallback(url: str) -> str:
    return url.split("#", 1)[0].rstrip("/")


def canonicalize_url(url: str) -> str:
    """Убирает фрагмент и завершающие слеши пути; query, схема и хост сохраняются.

    Никогда не бросает исключений: при непарсируемом вводе режет строку вручную.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        canonical = _strip_fallback(url)
        logger.debug("Canonical fallback URL: %s -> %s", url, canonical)
        return canonical

    if not parts.scheme or not parts.netloc:
        return _strip_fallback(url)

    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def default_pattern(main_url: str) -> str:
    """Шаблон по умолчанию: всё, что начинается с канонического main_url."""
    return f"^{re.escape(canonicalize_url(main_url))}.*"


def compile_pattern(raw: Optional[str], main_url: str) -> Pattern[str]:
    """Компилирует шаблон включения или строит его из main_url.

    Ошибка компиляции превращается в :class:`PatternInvalid`, а не в traceback.
    """
    source = raw if raw else default_pattern(main_url)
    try:
        pattern = re.compile(source)
    except re.error as exc:
        logger.error("Error constructing url pattern %r: %s", source, exc)
        raise PatternInvalid(source, str(exc)) from exc
    logger.info("Constructed url pattern: %s", pattern.pattern)
    return pattern


def generate_slug(url: str) -> str:
    """Имя файла артефакта из URL: без схемы, только [a-z0-9_-]."""
    slug = _SCHEME_RE.sub("", url, count=1)
    slug = _NON_WORD_RE.sub("-", slug)
    slug = _SPACE_RE.sub("-", slug)
    slug = slug.replace(".", "-")
    slug = _DASHES_RE.sub("-", slug)
    return slug.strip("-").lower()


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
