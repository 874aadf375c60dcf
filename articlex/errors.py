"""Typed extraction failures.

Every failure the pipeline can produce is an :class:`ExtractionError`, so the
caller (route layer, CLI, prewarmer) can catch one base class and branch on
the concrete kind:

    FetchError               — network/timeout/HTTP status after all retries
    NoContentFoundError      — no strategy produced a candidate node
    InsufficientContentError — best candidate is below the text floor
    PaywallError             — terminal; link out instead of retrying
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for all extraction failures."""

    retryable: bool = True

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class FetchError(ExtractionError):
    """Raised when every fetch attempt for a URL failed."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message, url)
        self.status_code = status_code


class NoContentFoundError(ExtractionError):
    """Raised when no selector or heuristic candidate met the thresholds."""


class InsufficientContentError(ExtractionError):
    """Raised when the best candidate's text is below the absolute floor."""

    def __init__(self, message: str, url: str = "", text_length: int = 0) -> None:
        super().__init__(message, url)
        self.text_length = text_length


class PaywallError(ExtractionError):
    """Raised when the article body is gated behind a paywall."""

    retryable = False
