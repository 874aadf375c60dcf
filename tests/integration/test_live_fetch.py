"""Live-network checks for the fetch layer and the pipeline's failure path."""

from __future__ import annotations

import pytest

from articlex.errors import ExtractionError
from articlex.extraction.cache import ExtractionCache
from articlex.extraction.extractor import ArticleExtractor
from articlex.extraction.fetcher import PageFetcher

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_fetch_example_domain():
    async with PageFetcher() as fetcher:
        page = await fetcher.fetch_page("https://example.com/")

    assert page.status_code == 200
    assert "Example Domain" in page.html


@pytest.mark.asyncio
async def test_short_page_raises_typed_error():
    async with ArticleExtractor(cache=ExtractionCache()) as extractor:
        with pytest.raises(ExtractionError):
            await extractor.extract_article("https://example.com/")
        assert len(extractor.cache) == 0
