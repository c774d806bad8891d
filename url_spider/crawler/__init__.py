"""Crawl engine: frontier, origin matching, link extraction, transport and the crawl loop."""

from url_spider.crawler.crawler import AsyncCrawler
from url_spider.crawler.origin import OriginMatcher, SuffixResolver, is_same_origin

__all__ = ["AsyncCrawler", "OriginMatcher", "SuffixResolver", "is_same_origin"]
