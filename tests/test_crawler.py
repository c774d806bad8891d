# File: tests/test_crawler.py
# Test-suite for the sequential same-origin crawler
from __future__ import annotations

import pytest

from tests.conftest import FakeFetcher, links_page
from url_spider.aggregator import SitemapAccumulator
from url_spider.crawler.crawler import AsyncCrawler
from url_spider.crawler.models import CrawlState
from url_spider.errors import MalformedURL


async def run_crawl(config, site, resolver, seed="https://x.test/", **kwargs):
    fetcher = FakeFetcher(site)
    crawler = AsyncCrawler(config, fetcher, resolver=resolver, **kwargs)
    report = await crawler.crawl(seed)
    return crawler, fetcher, report


# --------------------------------------------------------------------------- #
#                                   Tests                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_worked_example(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/a", "https://x.test/b", "https://other.test/c"),
        "https://x.test/a": links_page(),
        "https://x.test/b": links_page("/a"),
    }
    crawler, fetcher, report = await run_crawl(basic_config, site, resolver)

    assert set(report.visited) == {"https://x.test/", "https://x.test/a", "https://x.test/b"}
    assert "https://other.test/c" in report.skipped
    assert set(report.sitemap["https://x.test/"]) == {
        "https://x.test/a",
        "https://x.test/b",
        "https://other.test/c",
    }
    assert report.sitemap["https://x.test/b"] == ("https://x.test/a",)
    assert report.sitemap["https://x.test/a"] == ()
    assert report.invalid == ()
    assert crawler.state is CrawlState.DONE
    # /a is queued twice but fetched once
    assert fetcher.calls.count("https://x.test/a") == 1
    assert "https://other.test/c" not in fetcher.calls


@pytest.mark.asyncio()
async def test_breadth_first_order(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/a", "/b"),
        "https://x.test/a": links_page("/a/deep"),
        "https://x.test/b": links_page("/b/deep"),
        "https://x.test/a/deep": links_page(),
        "https://x.test/b/deep": links_page(),
    }
    _, fetcher, report = await run_crawl(basic_config, site, resolver)
    assert report.visited == (
        "https://x.test/",
        "https://x.test/a",
        "https://x.test/b",
        "https://x.test/a/deep",
        "https://x.test/b/deep",
    )
    assert fetcher.calls == list(report.visited)


@pytest.mark.asyncio()
async def test_cycle_terminates(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/a"),
        "https://x.test/a": links_page("/b"),
        "https://x.test/b": links_page("/a", "/", "#top", "/b"),
    }
    _, fetcher, report = await run_crawl(basic_config, site, resolver)
    assert report.visited == ("https://x.test/", "https://x.test/a", "https://x.test/b")
    assert sorted(fetcher.calls) == sorted(report.visited)


@pytest.mark.asyncio()
async def test_subdomains_are_followed(basic_config, resolver):
    site = {
        "https://x.test/": links_page("https://blog.x.test/", "https://x.test.evil.test/"),
        "https://blog.x.test/": links_page("https://www.x.test/about"),
        "https://www.x.test/about": links_page(),
    }
    _, _, report = await run_crawl(basic_config, site, resolver)
    assert report.visited == (
        "https://x.test/",
        "https://blog.x.test/",
        "https://www.x.test/about",
    )
    assert report.skipped == ("https://x.test.evil.test/",)


@pytest.mark.asyncio()
async def test_failed_url_is_retried_when_rediscovered(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/flaky", "/b"),
        "https://x.test/b": links_page("/flaky"),
        "https://x.test/flaky": [503, links_page()],
    }
    _, fetcher, report = await run_crawl(basic_config, site, resolver)

    assert fetcher.calls.count("https://x.test/flaky") == 2
    assert "https://x.test/flaky" in report.visited
    assert [(e.url, e.status) for e in report.invalid] == [("https://x.test/flaky", 503)]


@pytest.mark.asyncio()
async def test_failed_url_never_visited(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/missing", "/b"),
        "https://x.test/b": links_page("/missing"),
    }
    _, fetcher, report = await run_crawl(basic_config, site, resolver)

    assert "https://x.test/missing" not in report.visited
    assert "https://x.test/missing" not in report.sitemap
    assert fetcher.calls.count("https://x.test/missing") == 2
    assert [e.reason for e in report.invalid] == ["HTTP 404", "HTTP 404"]


@pytest.mark.asyncio()
async def test_off_origin_links_never_enqueued(basic_config, resolver):
    site = {
        "https://x.test/": links_page("https://other.test/", "/a", "http://127.0.0.1/"),
        "https://x.test/a": links_page("https://other.test/", "https://other.test/"),
    }
    crawler, fetcher, report = await run_crawl(basic_config, site, resolver)

    assert fetcher.calls == ["https://x.test/", "https://x.test/a"]
    assert report.skipped == ("https://other.test/", "http://127.0.0.1/")
    assert len(crawler.frontier) == 0


@pytest.mark.asyncio()
async def test_raw_and_discovered_sets(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/a", "a", "mailto:me@x.test", "https://other.test/"),
        "https://x.test/a": links_page(),
    }
    _, _, report = await run_crawl(basic_config, site, resolver)
    assert report.raw_hrefs == ("/a", "a", "mailto:me@x.test", "https://other.test/")
    assert report.discovered == ("https://x.test/a", "https://other.test/")


@pytest.mark.asyncio()
async def test_sitemap_without_offsite_links(basic_config, resolver):
    config = basic_config.model_copy(update={"record_offsite_links": False})
    site = {"https://x.test/": links_page("https://other.test/c", "/a"), "https://x.test/a": ""}
    _, _, report = await run_crawl(config, site, resolver)
    assert report.sitemap["https://x.test/"] == ("https://x.test/a",)
    assert report.skipped == ("https://other.test/c",)


@pytest.mark.asyncio()
async def test_dedupe_on_enqueue_keeps_visit_order(basic_config, resolver):
    site = {
        "https://x.test/": links_page("/a", "/b"),
        "https://x.test/a": links_page("/b", "/"),
        "https://x.test/b": links_page("/a"),
    }
    config = basic_config.model_copy(update={"dedupe_on_enqueue": True})
    _, plain_fetcher, plain = await run_crawl(basic_config, site, resolver)
    _, deduped_fetcher, deduped = await run_crawl(config, site, resolver)
    assert deduped.visited == plain.visited
    assert dict(deduped.sitemap) == dict(plain.sitemap)
    assert deduped_fetcher.calls == plain_fetcher.calls


@pytest.mark.asyncio()
async def test_malformed_seed_aborts_before_fetch(basic_config, resolver):
    fetcher = FakeFetcher({})
    crawler = AsyncCrawler(basic_config, fetcher, resolver=resolver)
    with pytest.raises(MalformedURL):
        await crawler.crawl("x.test/no-scheme")
    assert fetcher.calls == []


@pytest.mark.asyncio()
async def test_failed_seed_yields_empty_report(basic_config, resolver):
    _, fetcher, report = await run_crawl(basic_config, {"https://x.test/": 500}, resolver)
    assert report.visited == ()
    assert report.invalid[0].status == 500
    assert fetcher.calls == ["https://x.test/"]


@pytest.mark.asyncio()
async def test_injected_accumulator_receives_results(basic_config, resolver):
    acc = SitemapAccumulator()
    site = {"https://x.test/": links_page("/a"), "https://x.test/a": ""}
    _, _, report = await run_crawl(basic_config, site, resolver, accumulator=acc)
    assert acc.snapshot().visited == report.visited
    assert report.seed == "https://x.test/"
    assert report.started_at <= report.finished_at


@pytest.mark.asyncio()
async def test_politeness_delay_after_each_page(basic_config, resolver, monkeypatch):
    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)

    monkeypatch.setattr("url_spider.crawler.crawler.asyncio.sleep", fake_sleep)
    config = basic_config.model_copy(update={"politeness_delay": 0.25})
    site = {"https://x.test/": links_page("/a", "/gone"), "https://x.test/a": ""}
    await run_crawl(config, site, resolver)
    # two pages fetched successfully; the 404 adds no delay
    assert sleeps == [0.25, 0.25]


@pytest.mark.asyncio()
async def test_crawl_requires_fetcher(basic_config):
    with pytest.raises(RuntimeError):
        await AsyncCrawler(basic_config).crawl("https://x.test/")


@pytest.mark.asyncio()
async def test_unparsable_href_does_not_stop_crawl(basic_config, resolver):
    site = {
        "https://x.test/": links_page("http://[::1", "/a"),
        "https://x.test/a": links_page(),
    }
    crawler, _, report = await run_crawl(basic_config, site, resolver)

    assert report.visited == ("https://x.test/", "https://x.test/a")
    assert "http://[::1" in report.raw_hrefs
    assert report.sitemap["https://x.test/"] == ("https://x.test/a",)
    assert report.invalid == ()
    assert crawler.state is CrawlState.DONE
