# File: url_spider/engine.py
"""
Модуль-обёртка для функции запуска обхода.
"""
from __future__ import annotations

from url_spider.aggregator import CrawlReport
from url_spider.config import CrawlerConfig
from url_spider.crawler.crawler import AsyncCrawler


async def start_crawl(cfg: CrawlerConfig, seed: str) -> CrawlReport:
    """
    Запускает AsyncCrawler в контексте и возвращает CrawlReport.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    seed : str
        Абсолютный URL, с которого начинается обход.

    Returns
    -------
    CrawlReport
        Итоговый отчёт (посещённые, пропущенные, карта сайта, ошибки).
    """
    async with AsyncCrawler(cfg) as crawler:
        return await crawler.crawl(seed)

__all__ = ["start_crawl"]
