"""Match a requested article URL against pre-parsed RSS items.

Feed polling and XML parsing happen elsewhere; this only answers "does the
feed already carry the full body for this URL?".
"""

from __future__ import annotations

from collections.abc import Iterable

from articlex.extraction.urls import normalize_url
from articlex.models.schemas import FeedItem


def find_feed_item(url: str, items: Iterable[FeedItem]) -> FeedItem | None:
    """Return the first item whose link matches *url*.

    A link matches when its normalized form equals the normalized target, or
    is a prefix of it (feeds sometimes publish a shorter canonical link).
    """
    target = normalize_url(url)
    for item in items:
        if not item.link:
            continue
        link = normalize_url(item.link)
        if link == target or target.startswith(link):
            return item
    return None


def find_feed_content(url: str, items: Iterable[FeedItem]) -> str | None:
    """Return the full ``content:encoded`` body for *url*, if the feed has one."""
    item = find_feed_item(url, items)
    if item is None or not item.content:
        return None
    return item.content
