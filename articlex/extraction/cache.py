"""ExtractionCache — TTL-bound map from normalized URL to extracted html.

In-process only. Entries expire ``ttl`` seconds after insertion and are
purged lazily when a lookup finds them stale. Single event loop, so no
locking: every get/set runs to completion between suspension points.

One cache per process by convention (``get_default_cache``), but the
extractor takes it as a constructor argument so tests use a fresh one.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable

import structlog

from articlex.config import settings
from articlex.extraction.urls import normalize_url
from articlex.models.schemas import CacheEntry, ExtractionResult
from articlex.utils.clock import now_ts

logger = structlog.get_logger(component="extraction.cache")

# TTL default: 10 minutes
DEFAULT_TTL = 600.0


class ExtractionCache:
    """Read-through cache for extraction results.

    Args:
        ttl:         Seconds an entry stays valid (``now - inserted_at <= ttl``).
        max_entries: Optional bound; the oldest insertion is evicted first.
        clock:       Returns epoch seconds. Injected in tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_entries: int | None = None,
        clock: Callable[[], float] = now_ts,
    ) -> None:
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, url: str) -> CacheEntry | None:
        """Return the live entry for *url*, or None if missing or expired."""
        key = normalize_url(url)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at > self.ttl:
            del self._entries[key]
            logger.debug("cache_expired", url=key)
            return None
        return entry

    def set(self, url: str, result: ExtractionResult) -> CacheEntry:
        """Store *result* under *url*'s normalized form, replacing any prior entry."""
        key = normalize_url(url)
        entry = CacheEntry(
            normalized_url=key,
            html=result.html,
            metadata=result.metadata,
            inserted_at=self._clock(),
        )
        self._entries.pop(key, None)
        self._entries[key] = entry
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache_evicted", url=evicted)
        return entry

    def delete(self, url: str) -> None:
        self._entries.pop(normalize_url(url), None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.get(url) is not None


_default_cache: ExtractionCache | None = None


def get_default_cache() -> ExtractionCache:
    """The process-wide cache, created on first use from settings."""
    global _default_cache
    if _default_cache is None:
        _default_cache = ExtractionCache(
            ttl=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )
    return _default_cache
