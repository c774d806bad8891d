# === FILE: url_spider/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Callable, List, Optional, Protocol

from aiohttp import ClientSession

from url_spider.aggregator import CrawlReport, SitemapAccumulator
from url_spider.config import CrawlerConfig
from url_spider.crawler.fetcher import Fetcher
from url_spider.crawler.frontier import Frontier
from url_spider.crawler.link_extractor import extract_links, parse_document
from url_spider.crawler.models import CrawlState, PageData
from url_spider.crawler.origin import SuffixResolver, is_same_origin
from url_spider.errors import FetchFailure
from url_spider.logger import logger
from url_spider.utils import normalize_url

__all__ = ("AsyncCrawler", "PageFetcher")


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> PageData: ...


class AsyncCrawler:
    """Последовательный BFS-обход в пределах регистрируемого домена seed-URL.

    Одна загрузка за раз, пауза ``politeness_delay`` после каждой успешной
    страницы. Ошибки отдельных URL попадают в отчёт и обход не прерывают.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[PageFetcher] = None,
        *,
        accumulator: Optional[SitemapAccumulator] = None,
        frontier: Optional[Frontier] = None,
        resolver: Optional[SuffixResolver] = None,
        matcher_factory: Callable[..., Callable[[str], bool]] = is_same_origin,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.accumulator = accumulator or SitemapAccumulator()
        self.frontier = frontier or Frontier(dedupe_on_enqueue=config.dedupe_on_enqueue)
        self.resolver = resolver
        self.matcher_factory = matcher_factory
        self.state = CrawlState.DRAINING
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = Fetcher.create_session(self.config)
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, seed: str) -> CrawlReport:
        """Обходит сайт начиная с *seed* и возвращает итоговый отчёт.

        Некорректный seed даёт :class:`~url_spider.errors.MalformedURL` до
        первой загрузки.
        """
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with AsyncCrawler(...)'")
        root = normalize_url(seed, seed)
        resolver = self.resolver or SuffixResolver.from_config(self.config)
        same_origin = self.matcher_factory(root, resolver)

        logger.info("Старт обхода: %s", root)
        start = time.monotonic()
        self.accumulator.start(root)
        self.frontier.enqueue(root)

        while True:
            self.state = CrawlState.DRAINING
            url = self.frontier.dequeue()
            if url is None:
                break
            if self.frontier.has_visited(url):
                logger.debug("[SKIP] %s", url)
                continue

            self.state = CrawlState.RUNNING
            logger.info("Fetch <- %s", url)
            try:
                page = await self.fetcher.fetch(url)
                document = parse_document(page.content, url)
            except FetchFailure as exc:
                logger.warning("Failed %s: %s", url, exc.reason)
                self.accumulator.record_invalid(url, exc.reason, exc.status)
                continue

            self.frontier.mark_visited(url)
            self.accumulator.record_visited(url)

            for href in document.hrefs():
                self.accumulator.record_raw(href)
            links = extract_links(url, document)

            followed: List[str] = []
            for link in links:
                self.accumulator.record_discovered(link)
                if same_origin(link):
                    logger.debug("Enqueue -> %s", link)
                    self.frontier.enqueue(link)
                    followed.append(link)
                else:
                    self.accumulator.record_skipped(link)
            self.accumulator.record_page_links(
                url, links if self.config.record_offsite_links else followed
            )

            if self.config.politeness_delay:
                await asyncio.sleep(self.config.politeness_delay)

        self.state = CrawlState.DONE
        self.accumulator.finish()
        report = self.accumulator.snapshot()
        duration = time.monotonic() - start
        logger.info(
            "Завершено: %d страниц за %.2f с, пропущено %d, ошибок %d",
            len(report.visited), duration, len(report.skipped), len(report.invalid),
        )
        return report
