"""
Data models for the url_spider crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True)
class PageData:
    """Holds the normalized URL, HTTP status and decoded body of a fetched page."""

    url: str
    status: int
    content: str
    content_type: str = "text/html"


class CrawlState(str, Enum):
    """States of the crawl loop."""

    DRAINING = "draining"
    RUNNING = "running"
    DONE = "done"
