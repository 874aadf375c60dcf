"""articlex extraction engine — fetch, select, sanitize, cache, prewarm.

Architecture:
    PageFetcher       — async GET with UA rotation + retry/backoff
    ContentSelector   — ordered strategy chain (selectors → heuristic)
    sanitize          — strips site furniture from the chosen node
    detect_paywall    — phrase scan; PaywallError is terminal
    ExtractionCache   — TTL map keyed by normalized URL
    ArticleExtractor  — the pipeline, cached and uncached
    prewarm           — bounded-concurrency cache filling
"""

from .cache import ExtractionCache, get_default_cache
from .extractor import ArticleExtractor
from .feed import find_feed_content, find_feed_item
from .fetcher import PageFetcher
from .paywall import detect_paywall
from .prewarm import cached_or_warm, prewarm, warm_in_background
from .rules import HeuristicRules, default_rules, load_rules
from .sanitizer import sanitize
from .selector import ContentSelector, pick_best_content_node, select_content_node
from .urls import amp_url, normalize_url

__all__ = [
    "ArticleExtractor",
    "ContentSelector",
    "ExtractionCache",
    "HeuristicRules",
    "PageFetcher",
    "amp_url",
    "cached_or_warm",
    "default_rules",
    "detect_paywall",
    "find_feed_content",
    "find_feed_item",
    "get_default_cache",
    "load_rules",
    "normalize_url",
    "pick_best_content_node",
    "prewarm",
    "sanitize",
    "select_content_node",
    "warm_in_background",
]
