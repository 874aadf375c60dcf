"""Unit-test conftest — shared fixtures built on the fakes in ``fakes.py``.

All fixtures here are available to every test under tests/unit/ without import.
"""

from __future__ import annotations

import pytest

from fakes import FakeClock, FakeFetcher

from articlex.extraction.cache import ExtractionCache
from articlex.extraction.extractor import ArticleExtractor
from articlex.extraction.rules import default_rules


@pytest.fixture
def rules():
    return default_rules()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """A fresh ExtractionCache on a fake clock for each test."""
    return ExtractionCache(ttl=600.0, clock=clock)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def extractor(fetcher, cache):
    return ArticleExtractor(fetcher=fetcher, cache=cache, timeout=1.0)
