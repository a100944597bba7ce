# site2pdf/logger.py
"""Логгер проекта site2pdf.

Все модули пишут в один именованный логгер ``Site2PDF``: либо через
``logging.getLogger("Site2PDF")``, либо через готовый экземпляр::

    from site2pdf.logger import logger
    logger.info("Section tree built")

CLI перенастраивает его через :func:`init_logging` (уровень, файл, формат).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "Site2PDF"

# 5 MB x 3 rotated files
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _handler(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Настраивает логгер ``Site2PDF``: stdout и, при ``log_file``, файл с ротацией.

    ``replace_handlers=False`` добавляет обработчики к уже существующим.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        lg.handlers.clear()

    lg.addHandler(_handler(logging.StreamHandler(sys.stdout), log_format))
    if log_file is not None:
        file_handler = RotatingFileHandler(
            filename=str(log_file), maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"
        )
        lg.addHandler(_handler(file_handler, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Вызывается CLI при старте: заменяет обработчики и выставляет уровень."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
