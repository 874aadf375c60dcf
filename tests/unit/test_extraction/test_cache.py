"""Tests for ExtractionCache — keys, TTL expiry, eviction, immutability."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from articlex.extraction import cache as cache_module
from articlex.extraction.cache import ExtractionCache, get_default_cache
from articlex.models.schemas import ExtractionMetadata, ExtractionResult, StrategyTag

URL = "https://www.coindesk.com/markets/2025/01/15/bitcoin-hits-record"


def _result(html: str = "<p>body</p>", length: int = 4) -> ExtractionResult:
    return ExtractionResult(
        html=html,
        metadata=ExtractionMetadata(strategy=StrategyTag.SELECTORS, text_length=length, source_url=URL),
    )


# ── Keys ──────────────────────────────────────────────────────────────────────


def test_set_stores_under_normalized_key(cache, clock):
    entry = cache.set(URL + "/?utm_source=x", _result())
    assert entry.normalized_url == URL
    assert entry.inserted_at == clock.now
    assert cache.get(URL) == entry
    assert cache.get(URL + "#frag") == entry


def test_get_missing_returns_none(cache):
    assert cache.get(URL) is None


def test_overwrite_replaces_entry(cache):
    cache.set(URL, _result("<p>old</p>", 3))
    cache.set(URL + "/", _result("<p>new</p>", 3))
    assert len(cache) == 1
    assert cache.get(URL).html == "<p>new</p>"


def test_to_result_round_trips_metadata(cache):
    entry = cache.set(URL, _result())
    assert entry.to_result() == _result()


# ── TTL ───────────────────────────────────────────────────────────────────────


def test_entry_valid_at_exact_ttl(cache, clock):
    cache.set(URL, _result())
    clock.advance(600.0)
    assert cache.get(URL) is not None


def test_entry_valid_just_before_ttl(cache, clock):
    cache.set(URL, _result())
    clock.advance(599.999)
    assert cache.get(URL) is not None


def test_entry_expires_just_after_ttl(cache, clock):
    cache.set(URL, _result())
    clock.advance(600.001)
    assert cache.get(URL) is None


def test_expired_entry_is_purged_on_read(cache, clock):
    cache.set(URL, _result())
    clock.advance(601)
    assert len(cache) == 1
    cache.get(URL)
    assert len(cache) == 0


def test_rewrite_restarts_ttl(cache, clock):
    cache.set(URL, _result())
    clock.advance(500)
    cache.set(URL, _result())
    clock.advance(500)
    assert cache.get(URL) is not None


def test_contains_respects_expiry(cache, clock):
    cache.set(URL, _result())
    assert URL in cache
    clock.advance(700)
    assert URL not in cache
    assert 42 not in cache


# ── Removal / bounds ──────────────────────────────────────────────────────────


def test_delete_and_clear(cache):
    cache.set(URL, _result())
    cache.set(URL + "-two", _result())
    cache.delete(URL + "/")
    assert cache.get(URL) is None
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


def test_delete_missing_is_noop(cache):
    cache.delete(URL)
    assert len(cache) == 0


def test_max_entries_evicts_oldest_insertion(clock):
    bounded = ExtractionCache(ttl=600, max_entries=2, clock=clock)
    bounded.set("https://a.com/1", _result())
    bounded.set("https://a.com/2", _result())
    bounded.set("https://a.com/1", _result())  # re-insert moves it to the back
    bounded.set("https://a.com/3", _result())
    assert bounded.get("https://a.com/2") is None
    assert bounded.get("https://a.com/1") is not None
    assert bounded.get("https://a.com/3") is not None


def test_unbounded_by_default(cache):
    for i in range(50):
        cache.set(f"https://a.com/{i}", _result())
    assert len(cache) == 50


# ── Immutability / singleton ──────────────────────────────────────────────────


def test_entries_are_frozen(cache):
    entry = cache.set(URL, _result())
    with pytest.raises(ValidationError):
        entry.html = "<p>tampered</p>"


def test_default_cache_is_a_singleton(monkeypatch):
    monkeypatch.setattr(cache_module, "_default_cache", None)
    first = get_default_cache()
    assert get_default_cache() is first
    assert first.ttl == 600.0
