# File: url_spider/utils.py
"""url_spider.utils: канонизация URL и мелкие помощники для коллекций ссылок."""

from __future__ import annotations

import re
from typing import Collection, List, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from url_spider.errors import MalformedURL
from url_spider.logger import logger

__all__: Sequence[str] = (
    "ALLOWED_SCHEMES",
    "normalize_url",
    "remove_dot_segments",
    "remove_duplicates",
)

ALLOWED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}

_ILLEGAL_CHARS_RE = re.compile(r"[\x00-\x20\x7f]")
_HOST_RE = re.compile(r"^[a-z0-9_\-]+(\.[a-z0-9_\-]+)*\.?$")
_IPV6_RE = re.compile(r"^[0-9a-f:.]+$")
_PERCENT_RE = re.compile(r"%[0-9a-fA-F]{2}")


def remove_dot_segments(path: str) -> str:
    """Убирает сегменты ``.`` и ``..`` из пути (RFC 3986, 5.2.4)."""
    if "." not in path:
        return path
    output: List[str] = []
    segments = path.split("/")
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == ".":
            if last:
                output.append("")
            continue
        if segment == "..":
            if len(output) > 1:
                output.pop()
            if last:
                output.append("")
            continue
        output.append(segment)
    result = "/".join(output)
    if path.startswith("/") and not result.startswith("/"):
        result = "/" + result
    return result


def _canonical_host(hostname: str, url: str) -> str:
    if hostname.startswith("[") or ":" in hostname:
        if not _IPV6_RE.match(hostname):
            raise MalformedURL(url, "invalid IPv6 host")
        return f"[{hostname}]"
    if not hostname.isascii():
        try:
            hostname = hostname.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise MalformedURL(url, "invalid internationalized host") from exc
    if not _HOST_RE.match(hostname):
        raise MalformedURL(url, "invalid host")
    return hostname


def normalize_url(base: str, reference: str) -> str:
    """Разрешает *reference* относительно *base* и приводит результат к канонической форме.

    Поддерживаются абсолютные, scheme-relative, path-relative ссылки и ссылки
    только с фрагментом. Схема и хост приводятся к нижнему регистру, порт по
    умолчанию отбрасывается, сегменты ``.``/``..`` разрешаются, пустой путь
    становится ``/``, фрагмент удаляется, query сохраняется как есть.

    Raises
    ------
    MalformedURL
        Схема не http(s), нет хоста, некорректный порт или в URL есть пробельные
        и управляющие символы.
    """
    try:
        resolved = urljoin(base, reference.strip())
    except ValueError as exc:
        raise MalformedURL(reference, str(exc)) from exc
    if _ILLEGAL_CHARS_RE.search(resolved):
        raise MalformedURL(resolved, "illegal characters")

    try:
        parts = urlsplit(resolved)
        port = parts.port
    except ValueError as exc:
        raise MalformedURL(resolved, str(exc)) from exc

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise MalformedURL(resolved, "unsupported scheme")
    if not parts.hostname:
        raise MalformedURL(resolved, "empty host")

    netloc = _canonical_host(parts.hostname, resolved)
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if "@" in parts.netloc:
        userinfo = parts.netloc.rpartition("@")[0]
        netloc = f"{userinfo}@{netloc}"

    path = remove_dot_segments(parts.path) or "/"
    path = _PERCENT_RE.sub(lambda m: m.group(0).upper(), path)

    normalized = urlunsplit((scheme, netloc, path, parts.query, ""))
    logger.debug("Normalized URL: %s + %s -> %s", base, reference, normalized)
    return normalized


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
