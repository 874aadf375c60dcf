"""Prewarm — fill the extraction cache before anyone asks for the article.

``prewarm`` keeps at most ``concurrency`` extractions in flight and starts
the next queued URL whenever one finishes; completion order is whatever the
network gives us. A failing or cancelled URL is logged and recorded, never
fatal to the batch. Cancelling the batch itself cancels whatever is still in
flight before the cancellation propagates.

``warm_in_background`` and ``cached_or_warm`` give the route layer a
non-blocking policy: serve what is cached, schedule the rest.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Iterable

import structlog

from articlex.config import settings
from articlex.extraction.extractor import ArticleExtractor
from articlex.extraction.urls import normalize_url
from articlex.models.schemas import CacheEntry, PrewarmReport

logger = structlog.get_logger(component="extraction.prewarm")

# Strong references to background tasks so they are not garbage-collected mid-flight
_background: set[asyncio.Task] = set()


async def _warm_one(extractor: ArticleExtractor, url: str) -> str:
    await extractor.extract_article_cached(url)
    return url


async def prewarm(
    extractor: ArticleExtractor,
    urls: Iterable[str],
    concurrency: int | None = None,
) -> PrewarmReport:
    """Extract every URL in *urls* into the cache, ``concurrency`` at a time.

    Empty URLs and duplicates (by normalized form) are skipped.
    """
    limit = max(1, concurrency if concurrency is not None else settings.prewarm_concurrency)
    report = PrewarmReport()

    queue: deque[str] = deque()
    seen: set[str] = set()
    for url in urls:
        key = normalize_url(url) if url else ""
        if not key or key in seen:
            report.skipped.append(url)
            continue
        seen.add(key)
        queue.append(url)

    in_flight: dict[asyncio.Task, str] = {}

    def _start_next() -> None:
        url = queue.popleft()
        in_flight[asyncio.create_task(_warm_one(extractor, url))] = url

    while queue and len(in_flight) < limit:
        _start_next()

    try:
        while in_flight:
            done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                url = in_flight.pop(task)
                if task.cancelled():
                    logger.warning("prewarm_cancelled", url=url)
                    report.failed[url] = "CancelledError"
                elif task.exception() is not None:
                    exc = task.exception()
                    logger.warning("prewarm_failed", url=url, error_type=type(exc).__name__, error=str(exc))
                    report.failed[url] = type(exc).__name__
                else:
                    report.succeeded.append(url)
                if queue:
                    _start_next()
    finally:
        # Cancelled batch: stop the extractions still running
        for task in in_flight:
            task.cancel()
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)

    logger.info(
        "prewarm_complete",
        succeeded=len(report.succeeded),
        failed=len(report.failed),
        skipped=len(report.skipped),
    )
    return report


def warm_in_background(
    extractor: ArticleExtractor,
    urls: Iterable[str],
    concurrency: int | None = None,
) -> asyncio.Task:
    """Schedule :func:`prewarm` on the running loop and return its task."""
    task = asyncio.create_task(prewarm(extractor, list(urls), concurrency))
    _background.add(task)
    task.add_done_callback(_background.discard)
    return task


def cached_or_warm(extractor: ArticleExtractor, url: str) -> CacheEntry | None:
    """Return the cached entry for *url*, or None after scheduling a background warm.

    Never waits on the network.
    """
    entry = extractor.get_cached_extraction(url)
    if entry is not None:
        return entry
    logger.debug("deferred_extraction_scheduled", url=url)
    warm_in_background(extractor, [url], concurrency=1)
    return None
