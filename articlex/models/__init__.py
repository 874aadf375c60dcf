"""Pydantic models shared across the extraction pipeline."""

from .schemas import (
    CacheEntry,
    ExtractionMetadata,
    ExtractionResult,
    FeedItem,
    PrewarmReport,
    RawPage,
    StrategyTag,
)

__all__ = [
    "CacheEntry",
    "ExtractionMetadata",
    "ExtractionResult",
    "FeedItem",
    "PrewarmReport",
    "RawPage",
    "StrategyTag",
]
