"""Tests for paywall phrase detection."""

from __future__ import annotations

import pytest

from articlex.extraction.paywall import detect_paywall


@pytest.mark.parametrize(
    "text",
    [
        "Create a free account to continue reading this story.",
        "You've reached your monthly limit of free articles",
        "PREMIUM CONTENT",
        "Bitcoin rallied. Subscribe to continue reading.",
    ],
)
def test_detects_bundled_phrases_case_insensitively(text):
    assert detect_paywall(text) is True


def test_plain_article_text_is_not_paywalled():
    assert detect_paywall("Bitcoin rose 4% on Tuesday as ETF inflows accelerated.") is False


def test_empty_text_is_not_paywalled():
    assert detect_paywall("") is False


def test_custom_phrase_list_replaces_bundled_one():
    assert detect_paywall("Members only beyond this point", ["members only"]) is True
    assert detect_paywall("premium content", ["members only"]) is False
