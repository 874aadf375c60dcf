"""articlex — news article extraction engine.

Public surface
--------------
``ArticleExtractor``  — extract_article / extract_article_cached
``ExtractionCache``   — TTL cache keyed by normalized URL
``prewarm``           — bounded-concurrency cache filling
``normalize_url``     — canonical URL form used for cache keys
"""

from articlex.errors import (
    ExtractionError,
    FetchError,
    InsufficientContentError,
    NoContentFoundError,
    PaywallError,
)
from articlex.extraction import (
    ArticleExtractor,
    ExtractionCache,
    PageFetcher,
    find_feed_content,
    normalize_url,
    prewarm,
)
from articlex.models import ExtractionMetadata, ExtractionResult, FeedItem, StrategyTag

__all__ = [
    "ArticleExtractor",
    "ExtractionCache",
    "ExtractionError",
    "ExtractionMetadata",
    "ExtractionResult",
    "FeedItem",
    "FetchError",
    "InsufficientContentError",
    "NoContentFoundError",
    "PageFetcher",
    "PaywallError",
    "StrategyTag",
    "find_feed_content",
    "normalize_url",
    "prewarm",
]
