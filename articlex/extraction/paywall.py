"""Paywall detection — plain phrase matching, no inference."""

from __future__ import annotations

from collections.abc import Iterable

from articlex.extraction.rules import default_rules


def detect_paywall(text: str, phrases: Iterable[str] | None = None) -> bool:
    """Return True if *text* contains any known paywall phrase (case-insensitive)."""
    if not text:
        return False
    lowered = text.lower()
    candidates = (
        [p.lower() for p in phrases] if phrases is not None
        else default_rules().lowered_paywall_phrases
    )
    return any(phrase in lowered for phrase in candidates)
