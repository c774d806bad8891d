# File: url_spider/aggregator.py
"""url_spider.aggregator: накопитель карты сайта и итоговый отчёт обхода."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

__all__ = ("InvalidEntry", "CrawlReport", "SitemapAccumulator")


@dataclass(frozen=True, slots=True)
class InvalidEntry:
    """Неудачная попытка загрузки: URL и признак ошибки."""

    url: str
    reason: str
    status: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "reason": self.reason, "status": self.status}


def _isoformat(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts else None


@dataclass(frozen=True, slots=True)
class CrawlReport:
    """Неизменяемый снимок результатов обхода."""

    seed: str
    visited: Tuple[str, ...] = ()
    skipped: Tuple[str, ...] = ()
    discovered: Tuple[str, ...] = ()
    raw_hrefs: Tuple[str, ...] = ()
    sitemap: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    invalid: Tuple[InvalidEntry, ...] = ()
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "visited": len(self.visited),
            "skipped": len(self.skipped),
            "discovered": len(self.discovered),
            "raw_hrefs": len(self.raw_hrefs),
            "invalid": len(self.invalid),
            "links": sum(len(links) for links in self.sitemap.values()),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Сериализуемое представление: все множества становятся списками уникальных строк."""
        return {
            "seed": self.seed,
            "started_at": _isoformat(self.started_at),
            "finished_at": _isoformat(self.finished_at),
            "visited": list(self.visited),
            "skipped": list(self.skipped),
            "discovered": list(self.discovered),
            "raw_hrefs": list(self.raw_hrefs),
            "sitemap": {page: list(links) for page, links in self.sitemap.items()},
            "invalid": [entry.to_dict() for entry in self.invalid],
            "stats": self.stats,
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


class SitemapAccumulator:
    """Учёт посещённых, пропущенных и ошибочных URL одного обхода.

    Никаких решений об обходе не принимает; множества хранятся как ``dict``
    для сохранения порядка первого появления.
    """

    def __init__(self, seed: str = "") -> None:
        self.seed = seed
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None
        self._visited: Dict[str, None] = {}
        self._skipped: Dict[str, None] = {}
        self._discovered: Dict[str, None] = {}
        self._raw: Dict[str, None] = {}
        self._sitemap: Dict[str, Dict[str, None]] = {}
        self._invalid: list[InvalidEntry] = []

    def start(self, seed: str) -> None:
        self.seed = seed
        self.started_at = datetime.now(timezone.utc)

    def finish(self) -> None:
        self.finished_at = datetime.now(timezone.utc)

    def record_visited(self, url: str) -> None:
        self._visited[url] = None

    def record_page_links(self, page: str, links: Iterable[str]) -> None:
        entry = self._sitemap.setdefault(page, {})
        for link in links:
            entry[link] = None

    def record_skipped(self, url: str) -> None:
        self._skipped[url] = None

    def record_discovered(self, url: str) -> None:
        self._discovered[url] = None

    def record_raw(self, href: str) -> None:
        self._raw[href] = None

    def record_invalid(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self._invalid.append(InvalidEntry(url, reason, status))

    def snapshot(self) -> CrawlReport:
        """Текущее состояние в виде :class:`CrawlReport`; дальнейший учёт его не меняет."""
        return CrawlReport(
            seed=self.seed,
            visited=tuple(self._visited),
            skipped=tuple(self._skipped),
            discovered=tuple(self._discovered),
            raw_hrefs=tuple(self._raw),
            sitemap=MappingProxyType({page: tuple(links) for page, links in self._sitemap.items()}),
            invalid=tuple(self._invalid),
            started_at=self.started_at,
            finished_at=self.finished_at,
        )
