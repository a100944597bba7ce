# === FILE: site2pdf/config.py ===
"""
Модуль для загрузки и валидации конфигурации site2pdf.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Site2PdfConfig(BaseModel):
    """Конфигурация одного запуска: селекторы, ретраи, задержки, вывод."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    content_selector: str = Field(
        "div.router-content div.content", description="CSS-селектор основного контента."
    )
    nav_selector: str = Field(
        ".card-body .vue-recycle-scroller__item-view a.leaf-link",
        description="CSS-селектор ссылок навигации.",
    )
    content_link_selector: str = Field(
        "{content} .link-block.topic a, {content} a.inline-link",
        description="Шаблон селектора ссылок внутри контента ({content} подставляется).",
    )
    fallback_selector: str = Field("body", description="Регион для последнего шага цепочки.")

    navigation_attempts: int = Field(5, ge=1, description="Число попыток навигации.")
    backoff_base: float = Field(1.0, ge=0, description="База экспоненциальной задержки (секунд).")
    navigation_timeout: float = Field(30.0, gt=0, description="Таймаут одной навигации (секунд).")

    selector_attempts: int = Field(5, ge=1, description="Попытки ожидания селектора контента.")
    selector_timeout: float = Field(5.0, gt=0, description="Таймаут ожидания селектора (секунд).")
    selector_retry_delay: float = Field(5.0, ge=0, description="Пауза между попытками селектора.")
    fallback_timeout: float = Field(10.0, gt=0, description="Таймаут ожидания общего региона.")

    settle_delay: float = Field(15.0, ge=0, description="Пауза после прокрутки вниз (секунд).")
    pause_delay: float = Field(2.0, ge=0, description="Пауза между обращениями к сайту.")

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    headless: bool = Field(True, description="Запускать браузер без окна.")
    browser_executable: Optional[str] = Field(None, description="Путь к Chromium/Chrome.")

    out_dir: Path = Field(Path("out"), description="Каталог для PDF-артефактов.")
    page_format: str = Field("A4", min_length=1, description="Формат страницы PDF.")
    print_background: bool = Field(True, description="Печатать фон страниц.")

    @field_validator(
        "content_selector", "nav_selector", "content_link_selector", "fallback_selector", mode="before"
    )
    def _strip_selector(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("selector must not be empty")
        return v

    @field_validator("content_link_selector")
    def _check_placeholder(cls, v: str) -> str:
        try:
            v.format(content="x")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"bad content_link_selector template: {exc}") from exc
        return v

    def content_links(self) -> str:
        """Селектор ссылок внутри региона контента."""
        return self.content_link_selector.format(content=self.content_selector)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> Site2PdfConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект Site2PdfConfig.
    Без пути использует configs/default.yaml, а при его отсутствии значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return Site2PdfConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return Site2PdfConfig(**data)


__all__ = ["Site2PdfConfig", "load_config", "ValidationError", "DEFAULT_USER_AGENT"]
