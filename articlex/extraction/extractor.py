"""ArticleExtractor — URL in, clean article html + metadata out.

Pipeline for one URL:
  0. RSS body supplied and long enough        → return it   (``rss``)
  1. fetch page (retry/backoff, 10 s deadline)
  2. ContentSelector: selectors → heuristic   (``selectors`` / ``heuristic-picker``)
  3. element passes, then paywall check on the remaining text → PaywallError
  4. string passes (truncation, heading dedupe)
  5. still under ``full_text_threshold``?
       a. paragraph aggregation                (``paragraph-aggregate``)
       b. AMP mirror, same chain               (``amp-fallback``)
     each replaces the result only if it carries more text
  6. under ``min_text_length`` → InsufficientContentError

Failures always surface as an ``ExtractionError`` subclass; the caller
decides whether to fall back to a description, a cached copy, or a link-out.
The cached variant consults ``ExtractionCache`` first and writes back on
success.
"""

from __future__ import annotations

import asyncio

import structlog
from bs4 import BeautifulSoup

from articlex.config import settings
from articlex.errors import (
    ExtractionError,
    FetchError,
    InsufficientContentError,
    NoContentFoundError,
    PaywallError,
)
from articlex.extraction.cache import ExtractionCache, get_default_cache
from articlex.extraction.fetcher import PageFetcher
from articlex.extraction.paywall import detect_paywall
from articlex.extraction.rules import HeuristicRules, default_rules
from articlex.extraction.sanitizer import strip_furniture, text_length, trim_markup
from articlex.extraction.selector import Candidate, ContentSelector, ParagraphAggregateStrategy
from articlex.extraction.urls import amp_url
from articlex.models.schemas import (
    CacheEntry,
    ExtractionMetadata,
    ExtractionResult,
    RawPage,
    StrategyTag,
)

logger = structlog.get_logger(component="extraction.extractor")


class ArticleExtractor:
    """Fetch, select, sanitize — with fallbacks and an optional cache.

    Usage::

        async with ArticleExtractor() as extractor:
            result = await extractor.extract_article_cached(url)
            print(result.metadata.strategy, result.metadata.text_length)

    Args:
        fetcher:          Page fetcher. One is created (and owned) if omitted.
        cache:            Extraction cache. Defaults to the process-wide one.
        rules:            Heuristic rules. Defaults to the configured rules.
        selector:         Primary strategy chain. Defaults to selectors → heuristic.
        timeout:          Overall deadline in seconds for each page fetch.
        amp_max_retries:  Retries for the AMP mirror fetch.
    """

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        cache: ExtractionCache | None = None,
        rules: HeuristicRules | None = None,
        selector: ContentSelector | None = None,
        timeout: float | None = None,
        amp_max_retries: int | None = None,
    ) -> None:
        self.rules = rules or default_rules()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or PageFetcher()
        self.cache = cache if cache is not None else get_default_cache()
        self.selector = selector or ContentSelector(rules=self.rules)
        self.aggregator = ParagraphAggregateStrategy(self.rules)
        self.timeout = timeout if timeout is not None else settings.extraction_timeout
        self.amp_max_retries = (
            amp_max_retries if amp_max_retries is not None else settings.amp_max_retries
        )

    # ── Pipeline steps ────────────────────────────────────────────────────

    async def _fetch(self, url: str, max_retries: int | None = None) -> RawPage:
        try:
            return await asyncio.wait_for(
                self.fetcher.fetch_page(url, max_retries=max_retries),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("fetch_deadline_exceeded", url=url, timeout=self.timeout)
            raise FetchError(f"Timed out fetching {url} after {self.timeout}s", url=url) from exc

    @staticmethod
    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    def _clean(self, candidate: Candidate, url: str) -> tuple[str, int]:
        """Strip furniture, paywall-check, then trim *candidate*; returns (html, text length)."""
        if not candidate.prebuilt:
            strip_furniture(candidate.node, self.rules)
        if detect_paywall(candidate.node.get_text(), self.rules.paywall_phrases):
            logger.info("paywall_detected", url=url, strategy=candidate.strategy.value)
            raise PaywallError("Article is behind a paywall", url=url)
        html = candidate.node.decode_contents()
        if not candidate.prebuilt:
            html = trim_markup(html, self.rules)
        return html, text_length(html)

    async def _amp_fallback(self, url: str) -> tuple[str, int] | None:
        """Run the primary chain against the AMP mirror; None if it yields nothing."""
        target = amp_url(url)
        if target == url:
            return None
        try:
            page = await self._fetch(target, max_retries=self.amp_max_retries)
            candidate = self.selector.select(self._parse(page.html))
            return self._clean(candidate, url)
        except PaywallError:
            raise
        except (FetchError, NoContentFoundError) as exc:
            logger.debug("amp_fallback_failed", url=target, error=str(exc))
            return None
        except Exception as exc:
            logger.warning("amp_processing_failed", url=target, error_type=type(exc).__name__, error=str(exc))
            return None

    def _from_rss(self, url: str, rss_content: str | None) -> ExtractionResult | None:
        if not rss_content or len(rss_content) <= self.rules.thresholds.rss_min_length:
            return None
        logger.debug("rss_content_used", url=url, chars=len(rss_content))
        return ExtractionResult(
            html=rss_content,
            metadata=ExtractionMetadata(
                strategy=StrategyTag.RSS,
                text_length=text_length(rss_content),
                source_url=url,
            ),
        )

    # ── Public API ────────────────────────────────────────────────────────

    async def extract_article(self, url: str, rss_content: str | None = None) -> ExtractionResult:
        """Extract clean article html for *url*, bypassing the cache.

        Raises:
            FetchError, NoContentFoundError, InsufficientContentError, PaywallError
        """
        rss = self._from_rss(url, rss_content)
        if rss is not None:
            return rss

        page = await self._fetch(url)
        t = self.rules.thresholds

        html, length = "", 0
        strategy: StrategyTag | None = None
        try:
            document = self._parse(page.html)
            try:
                candidate = self.selector.select(document)
                html, length = self._clean(candidate, url)
                strategy = candidate.strategy
            except NoContentFoundError:
                logger.debug("no_primary_candidate", url=url)

            logger.info(
                "initial_extraction",
                url=url,
                strategy=strategy.value if strategy else None,
                text_length=length,
            )

            if length < t.full_text_threshold:
                aggregate = self.aggregator.try_extract(document)
                if aggregate is not None and aggregate.text_length > length:
                    html, length = self._clean(aggregate, url)
                    strategy = aggregate.strategy
        except ExtractionError:
            raise
        except Exception as exc:
            logger.warning("document_processing_failed", url=url, error=str(exc))
            raise NoContentFoundError(f"Could not process document for {url}: {exc}", url=url) from exc

        if length < t.full_text_threshold:
            amp = await self._amp_fallback(url)
            if amp is not None and amp[1] > length:
                html, length = amp
                strategy = StrategyTag.AMP_FALLBACK

        if strategy is None:
            logger.warning("no_content_found", url=url)
            raise NoContentFoundError(f"No article content found for {url}", url=url)
        if not html or length < t.min_text_length:
            logger.warning("content_too_short", url=url, text_length=length, strategy=strategy.value)
            raise InsufficientContentError(
                f"Article content too short ({length} chars) for {url}",
                url=url,
                text_length=length,
            )

        logger.info("extraction_succeeded", url=url, strategy=strategy.value, text_length=length)
        return ExtractionResult(
            html=html,
            metadata=ExtractionMetadata(strategy=strategy, text_length=length, source_url=url),
        )

    async def extract_article_cached(
        self,
        url: str,
        rss_content: str | None = None,
    ) -> ExtractionResult:
        """Like :meth:`extract_article`, but served from / written to the cache.

        RSS-sourced results skip the cache entirely.
        """
        rss = self._from_rss(url, rss_content)
        if rss is not None:
            return rss

        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("cache_hit", url=url, strategy=cached.metadata.strategy.value)
            return cached.to_result()

        result = await self.extract_article(url)
        self.cache.set(url, result)
        return result

    def get_cached_extraction(self, url: str) -> CacheEntry | None:
        return self.cache.get(url)

    def set_cached_extraction(self, url: str, result: ExtractionResult) -> CacheEntry:
        return self.cache.set(url, result)

    def clear_cache(self) -> None:
        self.cache.clear()

    async def close(self) -> None:
        if self._owns_fetcher:
            await self.fetcher.close()

    async def __aenter__(self) -> "ArticleExtractor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
