# url_spider/crawler/fetcher.py
"""
Fetcher module: HTTP GET with timeout and retry/backoff on 5xx/429.
"""
from __future__ import annotations

import asyncio
from typing import Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from url_spider.config import CrawlerConfig
from url_spider.crawler.models import PageData
from url_spider.errors import FetchFailure
from url_spider.logger import logger

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
# servers that omit Content-Type are assumed to send HTML
HTML_TYPES: Sequence[str] = ("text/html", "application/xhtml+xml", "")


class Fetcher:
    """Fetches one URL at a time; every unsuccessful outcome raises :class:`FetchFailure`."""

    def __init__(
        self,
        session: ClientSession,
        config: CrawlerConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status

    @staticmethod
    def create_session(config: CrawlerConfig) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=config.timeout),
            headers={"User-Agent": config.user_agent},
            raise_for_status=False,
        )

    async def fetch(self, url: str) -> PageData:
        """
        GET *url* and return PageData for a 2xx response.

        Bodies are decoded only for HTML content types; anything else yields
        PageData with empty content (a page without links).
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    status = resp.status
                    if status in self._retry_status and attempts < self.config.retry_times:
                        attempts += 1
                        backoff = min(self.config.retry_backoff * 2 ** (attempts - 1), 60)
                        logger.debug(
                            "Retry %d/%d for %s (HTTP %d) after %.1f s",
                            attempts, self.config.retry_times, url, status, backoff,
                        )
                        await asyncio.sleep(backoff)
                        continue
                    if not 200 <= status < 300:
                        raise FetchFailure(url, f"HTTP {status}", status)
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    text = ""
                    if mime in HTML_TYPES:
                        text = await resp.text(errors="replace")
                    return PageData(url, status, text, mime)
            except asyncio.TimeoutError as exc:
                raise FetchFailure(url, "timeout") from exc
            except ClientError as exc:
                raise FetchFailure(url, f"{type(exc).__name__}: {exc}") from exc
