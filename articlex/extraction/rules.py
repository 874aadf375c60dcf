"""HeuristicRules — the tunable phrase lists, patterns and thresholds.

Everything publisher-specific lives in ``articlex/data/heuristics.json``
rather than in the pipeline code. Point ``ARTICLEX_HEURISTICS_PATH`` at a
different file to retune for another site without touching the selector or
sanitizer.

The thresholds are empirically tuned against CoinDesk markup; they are kept
as defaults, not derived values.
"""

from __future__ import annotations

import json
import re
from functools import cached_property, lru_cache
from importlib import resources
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(component="extraction.rules")

_BUNDLED_RULES = "heuristics.json"


class Thresholds(BaseModel):
    # Content-node selection
    selector_min_text: int = 200
    heuristic_min_text: int = 500
    heuristic_max_len: int = 20_000
    paragraph_weight: int = 50
    list_item_weight: int = 10
    length_divisor: int = 20
    full_text_threshold: int = 500
    paragraph_min_text: int = 40
    paragraph_min_count: int = 4
    min_text_length: int = 150
    rss_min_length: int = 200

    # Sanitizer
    nav_list_max_links: int = 3
    nav_list_max_text: int = 300
    category_list_max_text: int = 500
    link_farm_max_links: int = 5
    link_farm_max_text: int = 400
    cutoff_min_position: int = 500
    byline_min_position: int = 1000
    timestamp_list_threshold: int = 3
    timestamp_list_min_position: int = 1500
    timestamp_cleanup_threshold: int = 2
    timestamp_element_min_links: int = 2
    timestamp_element_max_text: int = 100


class HeuristicRules(BaseModel):
    """Versioned heuristics configuration artifact."""

    version: str = "unversioned"
    publisher: str = ""

    selectors: list[str] = Field(default_factory=list)
    paragraph_selectors: str = "article p, main p"

    candidate_tags: list[str] = Field(default_factory=lambda: ["main", "article", "section", "div"])
    candidate_noise_tags: list[str] = Field(default_factory=list)
    candidate_junk_pattern: str = r"(nav|footer|sidebar|menu)"

    strip_tags: list[str] = Field(default_factory=list)
    junk_pattern: str = r"(nav|footer|sidebar|menu)"
    kill_phrases: list[str] = Field(default_factory=list)
    category_pattern: str = r"(News|Markets)"
    hard_cutoff_phrases: list[str] = Field(default_factory=list)

    relative_timestamp_pattern: str = r"\d+\s+(?:minute|minutes|hour|hours|day|days)\s+ago"
    absolute_date_pattern: str = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d+,\s+20\d{2}"
    list_timestamp_pattern: str = r"\d+\s+(?:hour|hours|minute|minutes)\s+ago"
    timestamp_phrase_pattern: str = r"(?:hour|minute|day)s?\s+ago"
    byline_pattern: str = r"By\s+[A-Z][a-zA-Z\s,]+\d{1,2},\s+20\d{2}"

    paywall_phrases: list[str] = Field(default_factory=list)

    thresholds: Thresholds = Field(default_factory=Thresholds)

    # ── Compiled patterns ─────────────────────────────────────────────────

    @cached_property
    def candidate_junk_re(self) -> re.Pattern[str]:
        return re.compile(self.candidate_junk_pattern)

    @cached_property
    def junk_re(self) -> re.Pattern[str]:
        return re.compile(self.junk_pattern)

    @cached_property
    def category_re(self) -> re.Pattern[str]:
        return re.compile(self.category_pattern, re.IGNORECASE)

    @cached_property
    def truncation_res(self) -> list[re.Pattern[str]]:
        """Patterns that mark the start of an embedded article list."""
        return [
            re.compile(self.relative_timestamp_pattern, re.IGNORECASE),
            re.compile(self.absolute_date_pattern, re.IGNORECASE),
        ]

    @cached_property
    def list_timestamp_re(self) -> re.Pattern[str]:
        return re.compile(self.list_timestamp_pattern, re.IGNORECASE)

    @cached_property
    def timestamp_phrase_re(self) -> re.Pattern[str]:
        return re.compile(self.timestamp_phrase_pattern, re.IGNORECASE)

    @cached_property
    def byline_re(self) -> re.Pattern[str]:
        return re.compile(self.byline_pattern, re.IGNORECASE)

    @cached_property
    def cutoff_phrase_re(self) -> re.Pattern[str] | None:
        """Any hard cutoff phrase, case-insensitive; None when the list is empty."""
        if not self.hard_cutoff_phrases:
            return None
        return re.compile("|".join(re.escape(p) for p in self.hard_cutoff_phrases), re.IGNORECASE)

    @cached_property
    def lowered_paywall_phrases(self) -> list[str]:
        return [p.lower() for p in self.paywall_phrases]


def load_rules(path: str | Path | None = None) -> HeuristicRules:
    """Load heuristics from *path*, or the bundled JSON when *path* is None."""
    if path is None:
        raw = resources.files("articlex.data").joinpath(_BUNDLED_RULES).read_text(encoding="utf-8")
        source = _BUNDLED_RULES
    else:
        raw = Path(path).read_text(encoding="utf-8")
        source = str(path)
    rules = HeuristicRules.model_validate(json.loads(raw))
    logger.debug("heuristics_loaded", source=source, version=rules.version)
    return rules


@lru_cache(maxsize=1)
def default_rules() -> HeuristicRules:
    """Rules selected by settings — loaded once per process."""
    from articlex.config import settings
    return load_rules(settings.heuristics_path)
