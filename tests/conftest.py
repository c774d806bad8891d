# File: tests/conftest.py
from __future__ import annotations

from typing import Dict, List, Union

import pytest

from url_spider.config import CrawlerConfig
from url_spider.crawler.models import PageData
from url_spider.crawler.origin import SuffixResolver
from url_spider.errors import FetchFailure
from url_spider.logger import init_logging


def links_page(*hrefs: str) -> str:
    """HTML body with one anchor per href."""
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><body>{anchors}</body></html>"


class FakeFetcher:
    """
    In-memory transport.

    *site* maps URL -> body (str), HTTP status (int) or a list of those that is
    consumed one item per request. Unknown URLs answer 404.
    """

    def __init__(self, site: Dict[str, Union[str, int, List[Union[str, int]]]]) -> None:
        self.site = site
        self.calls: List[str] = []

    async def fetch(self, url: str) -> PageData:
        self.calls.append(url)
        answer = self.site.get(url, 404)
        if isinstance(answer, list):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        if isinstance(answer, int):
            raise FetchFailure(url, f"HTTP {answer}", answer)
        return PageData(url, 200, answer)


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI re-binds log handlers to CliRunner streams; restore them after each test."""
    yield
    init_logging(level="DEBUG")


@pytest.fixture(scope="session")
def resolver() -> SuffixResolver:
    """Offline resolver that also knows the reserved ``test`` TLD."""
    return SuffixResolver(extra_suffixes=["test"])


@pytest.fixture()
def basic_config() -> CrawlerConfig:
    return CrawlerConfig(
        politeness_delay=0,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        extra_suffixes=["test"],
    )
