"""
HTML parsing and link extraction for url_spider.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag

from url_spider.errors import MalformedURL, PageParseError
from url_spider.logger import logger
from url_spider.utils import normalize_url, remove_duplicates


class ParsedDocument:
    """Parsed HTML page exposing its anchors' ``href`` values in document order."""

    __slots__ = ("soup",)

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    def hrefs(self) -> List[str]:
        """Return the raw ``href`` of every ``<a>`` that has one."""
        values: List[str] = []
        for tag in self.soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href = tag.get("href")
            if isinstance(href, list):
                href = " ".join(href)
            if isinstance(href, str):
                values.append(href)
        return values


def parse_document(content: str, url: str = "") -> ParsedDocument:
    """Parse *content* with BeautifulSoup; failures raise :class:`PageParseError`."""
    try:
        return ParsedDocument(BeautifulSoup(content, "html.parser"))
    except Exception as exc:
        raise PageParseError(url, f"parse error: {exc}") from exc


def extract_links(page_url: str, document: ParsedDocument) -> List[str]:
    """
    Resolve every href of *document* against *page_url*.

    Malformed hrefs (unsupported scheme, no host, illegal characters) are
    dropped; duplicates are removed keeping the first occurrence.
    """
    links: List[str] = []
    for href in document.hrefs():
        try:
            links.append(normalize_url(page_url, href))
        except MalformedURL as exc:
            logger.debug("Dropped link on %s: %s", page_url, exc)
    return remove_duplicates(links)
