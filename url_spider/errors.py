"""url_spider.errors: иерархия исключений краулера."""

from __future__ import annotations

from typing import Optional

__all__ = (
    "CrawlError",
    "MalformedURL",
    "FetchFailure",
    "PageParseError",
    "UnresolvableHost",
    "PersistenceFailure",
)


class CrawlError(Exception):
    """Базовое исключение для всех ошибок url_spider."""


class MalformedURL(CrawlError, ValueError):
    """Ссылку (или seed) нельзя привести к корректному абсолютному URL."""

    def __init__(self, url: str, message: str = "malformed URL") -> None:
        super().__init__(f"{message}: {url!r}")
        self.url = url
        self.message = message


class FetchFailure(CrawlError):
    """Ошибка транспорта или не-2xx статус для конкретного URL."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


class PageParseError(FetchFailure):
    """Тело страницы получено, но разобрать его не удалось."""


class UnresolvableHost(CrawlError):
    """Для хоста не найден известный публичный суффикс."""

    def __init__(self, host: str) -> None:
        super().__init__(f"no known public suffix for host {host!r}")
        self.host = host


class PersistenceFailure(CrawlError, OSError):
    """Отчёт не удалось сохранить."""
