"""Tests for prewarm, warm_in_background and cached_or_warm."""

from __future__ import annotations

import asyncio

import pytest

from fakes import FakeFetcher
from html_fixtures import ARTICLE_PAGE, filler, page

from articlex.extraction.extractor import ArticleExtractor
from articlex.extraction.prewarm import cached_or_warm, prewarm, warm_in_background
from articlex.models.schemas import StrategyTag

BASE = "https://www.coindesk.com/markets/2025/01/15/story-"


def _urls(n: int) -> list[str]:
    return [f"{BASE}{i}" for i in range(n)]


@pytest.fixture
def slow_extractor(cache):
    fetcher = FakeFetcher({url: ARTICLE_PAGE for url in _urls(10)}, delay=0.01)
    return ArticleExtractor(fetcher=fetcher, cache=cache, timeout=1.0)


@pytest.mark.asyncio
async def test_prewarm_bounds_concurrency_and_fills_cache(slow_extractor, cache):
    report = await prewarm(slow_extractor, _urls(10), concurrency=3)

    assert sorted(report.succeeded) == sorted(_urls(10))
    assert report.failed == {}
    assert slow_extractor.fetcher.high_water == 3
    for url in _urls(10):
        assert cache.get(url).metadata.strategy is StrategyTag.SELECTORS


@pytest.mark.asyncio
async def test_prewarm_concurrency_floor_is_one(slow_extractor):
    await prewarm(slow_extractor, _urls(3), concurrency=0)
    assert slow_extractor.fetcher.high_water == 1


@pytest.mark.asyncio
async def test_prewarm_records_failures_without_aborting(extractor, fetcher, cache):
    ok, missing, gated = _urls(3)
    fetcher.pages[ok] = ARTICLE_PAGE
    fetcher.pages[gated] = page(f"<article><p>{filler(300)}</p><p>Premium content</p></article>")

    report = await prewarm(extractor, [ok, missing, gated], concurrency=2)

    assert report.succeeded == [ok]
    assert report.failed == {missing: "FetchError", gated: "PaywallError"}
    assert cache.get(ok) is not None
    assert cache.get(missing) is None
    assert report.total == 3


@pytest.mark.asyncio
async def test_prewarm_skips_empty_and_duplicate_urls(extractor, fetcher):
    url = _urls(1)[0]
    fetcher.pages[url] = ARTICLE_PAGE

    report = await prewarm(extractor, [url, "", url + "/?utm_source=x"])

    assert report.succeeded == [url]
    assert report.skipped == ["", url + "/?utm_source=x"]
    assert fetcher.calls == [url]


@pytest.mark.asyncio
async def test_prewarm_already_cached_url_does_not_refetch(extractor, fetcher):
    url = _urls(1)[0]
    fetcher.pages[url] = ARTICLE_PAGE
    await extractor.extract_article_cached(url)

    report = await prewarm(extractor, [url])

    assert report.succeeded == [url]
    assert fetcher.calls == [url]


@pytest.mark.asyncio
async def test_prewarm_empty_batch(extractor):
    report = await prewarm(extractor, [])
    assert report.total == 0


@pytest.mark.asyncio
async def test_warm_in_background_returns_task(slow_extractor, cache):
    task = warm_in_background(slow_extractor, _urls(4), concurrency=2)
    assert isinstance(task, asyncio.Task)

    report = await task

    assert len(report.succeeded) == 4
    assert all(cache.get(url) is not None for url in _urls(4))


@pytest.mark.asyncio
async def test_cached_or_warm_schedules_then_serves(slow_extractor):
    url = _urls(1)[0]

    assert cached_or_warm(slow_extractor, url) is None
    assert slow_extractor.fetcher.calls == []

    for _ in range(100):
        if slow_extractor.get_cached_extraction(url) is not None:
            break
        await asyncio.sleep(0.01)

    entry = cached_or_warm(slow_extractor, url)
    assert entry is not None
    assert entry.normalized_url == url
    assert slow_extractor.fetcher.calls == [url]


@pytest.mark.asyncio
async def test_prewarm_records_cancelled_extraction(cache):
    urls = _urls(4)
    fetcher = FakeFetcher(
        {url: ARTICLE_PAGE for url in urls},
        delay=0.01,
        failures={urls[1]: asyncio.CancelledError()},
    )
    extractor = ArticleExtractor(fetcher=fetcher, cache=cache, timeout=1.0)

    report = await prewarm(extractor, urls, concurrency=2)

    assert report.failed == {urls[1]: "CancelledError"}
    assert sorted(report.succeeded) == sorted([urls[0], urls[2], urls[3]])
    assert cache.get(urls[1]) is None


@pytest.mark.asyncio
async def test_cancelling_background_warm_stops_in_flight_fetches(cache):
    fetcher = FakeFetcher({url: ARTICLE_PAGE for url in _urls(4)}, delay=10.0)
    extractor = ArticleExtractor(fetcher=fetcher, cache=cache, timeout=30.0)

    task = warm_in_background(extractor, _urls(4), concurrency=2)
    for _ in range(100):
        if fetcher.in_flight == 2:
            break
        await asyncio.sleep(0.01)
    assert fetcher.in_flight == 2

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert fetcher.in_flight == 0
    assert fetcher.calls == _urls(2)
