"""Core schemas — extraction results, cache entries, and shared types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StrategyTag(str, Enum):
    """Which fallback tier produced an extraction. Diagnostic only."""

    SELECTORS = "selectors"
    HEURISTIC_PICKER = "heuristic-picker"
    PARAGRAPH_AGGREGATE = "paragraph-aggregate"
    AMP_FALLBACK = "amp-fallback"
    RSS = "rss"


class ExtractionMetadata(BaseModel):
    """Provenance and quality signal attached to every extraction."""

    model_config = ConfigDict(frozen=True)

    strategy: StrategyTag = Field(description="Fallback tier that produced the html")
    text_length: int = Field(ge=0, description="Stripped text length of the html")
    source_url: str = Field(description="URL the caller asked for")


class ExtractionResult(BaseModel):
    """Transient return value of one extraction attempt.

    Not persisted automatically — the caller decides whether to cache it.
    """

    model_config = ConfigDict(frozen=True)

    html: str
    metadata: ExtractionMetadata


class CacheEntry(BaseModel):
    """One cached extraction, keyed by normalized URL.

    Immutable: a fresh extraction for the same URL replaces the entry.
    """

    model_config = ConfigDict(frozen=True)

    normalized_url: str
    html: str
    metadata: ExtractionMetadata
    inserted_at: float = Field(description="Epoch seconds at insertion")

    def to_result(self) -> ExtractionResult:
        return ExtractionResult(html=self.html, metadata=self.metadata)


class RawPage(BaseModel):
    """The raw HTTP response for a single page fetch."""

    url: str
    final_url: str
    status_code: int
    html: str


class FeedItem(BaseModel):
    """A pre-parsed RSS item: its link and full ``content:encoded`` body."""

    link: str = ""
    content: str = ""


class PrewarmReport(BaseModel):
    """Outcome of one prewarm batch."""

    succeeded: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(
        default_factory=dict,
        description="url → error class name",
    )
    skipped: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.skipped)
