# === FILE: url_spider/config.py ===
"""
Модуль для загрузки и валидации конфигурации url_spider.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    politeness_delay: float = Field(0.1, ge=0, description="Пауза после каждой загруженной страницы (секунд).")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("UrlSpider/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(0, ge=0, description="Число повторных попыток при 5xx/429.")
    retry_backoff: float = Field(
        1.0, ge=0, description="Базовая пауза перед повтором, удваивается на каждой попытке."
    )
    record_offsite_links: bool = Field(
        True, description="Записывать в карту сайта и внешние ссылки страницы."
    )
    dedupe_on_enqueue: bool = Field(
        False, description="Не ставить в очередь URL, который уже посещён или ждёт в очереди."
    )
    suffix_list_urls: List[str] = Field(
        default_factory=list,
        description="Источники Public Suffix List; пусто - встроенный снимок tldextract.",
    )
    extra_suffixes: List[str] = Field(
        default_factory=list, description="Дополнительные суффиксы (например, test)."
    )
    include_private_suffixes: bool = Field(
        False, description="Учитывать приватные домены PSL (github.io и т.п.)."
    )
    suffix_cache_dir: Optional[Path] = Field(None, description="Кэш списка суффиксов.")
    report_dir: Optional[Path] = Field(
        None, description="Каталог для временного JSON-отчёта; по умолчанию системный tmp."
    )

    @field_validator("extra_suffixes", mode="before")
    def _strip_dots(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [s.strip(".").lower() if isinstance(s, str) else s for s in v]
        return v


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


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути берётся configs/default.yaml, а если его нет - значения по умолчанию.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlerConfig()
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

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "load_config"]
