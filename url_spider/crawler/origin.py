"""
Registrable-domain origin matching for url_spider.

Two URLs share an origin when their hosts have the same public suffix and the
same label directly in front of it (``blog.example.co.uk`` and
``www.example.co.uk`` do, ``a.co.uk`` and ``b.co.uk`` do not). Suffixes come
from the Public Suffix List via :mod:`tldextract`.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable, NamedTuple, Optional
from urllib.parse import urlsplit

import tldextract

from url_spider.errors import UnresolvableHost
from url_spider.logger import logger

__all__ = ("DomainParts", "SuffixResolver", "OriginMatcher", "is_same_origin")


class DomainParts(NamedTuple):
    """Host split at the public suffix boundary."""

    suffix: str
    domain: str
    subdomain: str

    @property
    def origin(self) -> tuple[str, str]:
        return self.suffix, self.domain


class SuffixResolver:
    """Thin wrapper over :class:`tldextract.TLDExtract`.

    With an empty *suffix_list_urls* the list bundled with tldextract is used
    and no network request is made.
    """

    def __init__(
        self,
        suffix_list_urls: Iterable[str] = (),
        extra_suffixes: Iterable[str] = (),
        include_private_suffixes: bool = False,
        cache_dir: Optional[str] = None,
    ) -> None:
        self._extract = tldextract.TLDExtract(
            cache_dir=cache_dir,
            suffix_list_urls=tuple(suffix_list_urls),
            fallback_to_snapshot=True,
            include_psl_private_domains=include_private_suffixes,
            extra_suffixes=tuple(extra_suffixes),
        )
        self.resolve = lru_cache(maxsize=4096)(self._resolve)

    @classmethod
    def from_config(cls, config) -> SuffixResolver:
        return cls(
            suffix_list_urls=config.suffix_list_urls,
            extra_suffixes=config.extra_suffixes,
            include_private_suffixes=config.include_private_suffixes,
            cache_dir=str(config.suffix_cache_dir) if config.suffix_cache_dir else None,
        )

    def _resolve(self, host: str) -> DomainParts:
        ext = self._extract(host)
        if not ext.suffix or not ext.domain:
            raise UnresolvableHost(host)
        return DomainParts(ext.suffix, ext.domain, ext.subdomain)


class OriginMatcher:
    """Predicate ``candidate -> bool`` bound to a fixed seed URL."""

    def __init__(self, seed: str, resolver: SuffixResolver) -> None:
        self.seed = seed
        self._resolver = resolver
        self._seed_origin: Optional[tuple[str, str]] = None
        host = urlsplit(seed).hostname or ""
        try:
            self._seed_origin = resolver.resolve(host).origin
        except UnresolvableHost:
            logger.warning("Seed host %r has no known public suffix; every link is off-origin", host)

    def __call__(self, candidate: str) -> bool:
        if self._seed_origin is None:
            return False
        try:
            host = urlsplit(candidate).hostname
        except ValueError:
            return False
        if not host:
            return False
        try:
            parts = self._resolver.resolve(host)
        except UnresolvableHost:
            logger.debug("Unresolvable host %r treated as off-origin", host)
            return False
        return parts.origin == self._seed_origin


def is_same_origin(seed: str, resolver: Optional[SuffixResolver] = None) -> OriginMatcher:
    """Build the origin predicate for *seed*.

    >>> same = is_same_origin("https://example.com")
    >>> same("https://blog.example.com/post?id=1")
    True
    """
    return OriginMatcher(seed, resolver or SuffixResolver())
