"""Content sanitizer — strip site furniture from an article-body node.

Lossy by nature: a short real paragraph that happens to contain a kill
phrase is dropped, and short unrecognised junk can survive. The passes run
in a fixed order and every one only removes material, so running the
sanitizer over its own output removes nothing further.

Element passes (on the live node):
  1. structural tags            (script, nav, figure, form, …)
  2. class/id junk pattern      (share, related, newsletter, …)
  3. kill phrases, bottom-up    ("Related Stories", "Sign In", …)
  4. navigation lists           (link-dense or category labels)
  5. link-farm divs

String passes (on the serialized HTML):
  6. cut at the first timestamp / date / cutoff phrase past the preamble
  7. cut at a second article's byline
  8. article-list evidence: cut at a late timestamp, drop timestamped links

Final passes (re-parsed): navigation lists and link farms again on the
truncated fragment, then drop repeated headings.

The paywall check runs between the element and string passes, so
``strip_furniture`` and ``trim_markup`` are exposed separately.
"""

from __future__ import annotations

import re

import structlog
from bs4 import BeautifulSoup, Tag

from articlex.extraction.rules import HeuristicRules, default_rules

logger = structlog.get_logger(component="extraction.sanitizer")

_HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def _label(el: Tag) -> str:
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return " ".join(classes) + " " + (el.get("id") or "")


def _fragment(html: str) -> Tag:
    """Parse an HTML fragment into a detached ``<div>`` wrapper."""
    return BeautifulSoup(f"<div>{html}</div>", "html.parser").div


# ── Element passes ────────────────────────────────────────────────────────────

def _strip_structural(node: Tag, rules: HeuristicRules) -> None:
    for el in node.find_all(rules.strip_tags):
        if not el.decomposed:
            el.decompose()


def _strip_junk_labels(node: Tag, rules: HeuristicRules) -> None:
    for el in node.find_all(True):
        if el.decomposed:
            continue
        if not (el.has_attr("class") or el.has_attr("id")):
            continue
        if rules.junk_re.search(_label(el).lower()):
            el.decompose()


def _strip_kill_phrases(node: Tag, rules: HeuristicRules) -> None:
    # Deepest elements first, so only the tightest container around a phrase goes
    for el in reversed(node.find_all(True)):
        if el.decomposed:
            continue
        text = el.get_text()
        if any(phrase in text for phrase in rules.kill_phrases):
            el.decompose()


def _strip_nav_lists(node: Tag, rules: HeuristicRules) -> None:
    t = rules.thresholds
    for el in node.find_all(["ul", "ol"]):
        if el.decomposed:
            continue
        links = len(el.find_all("a"))
        text = el.get_text().strip()
        if links > t.nav_list_max_links and len(text) < t.nav_list_max_text:
            el.decompose()
        elif len(text) < t.category_list_max_text and rules.category_re.search(text):
            el.decompose()


def _strip_link_farms(node: Tag, rules: HeuristicRules) -> None:
    t = rules.thresholds
    for el in node.find_all("div"):
        if el.decomposed:
            continue
        if len(el.find_all("a")) > t.link_farm_max_links and len(el.get_text().strip()) < t.link_farm_max_text:
            el.decompose()


# ── String passes ─────────────────────────────────────────────────────────────

def _first_match_from(pattern: re.Pattern[str], html: str, start: int) -> int:
    match = pattern.search(html, start)
    return match.start() if match else -1


def _cut(html: str, pos: int) -> str:
    """Truncate at *pos*, backing up to the tag start if *pos* is inside a tag."""
    open_at = html.rfind("<", 0, pos)
    if open_at > html.rfind(">", 0, pos):
        pos = open_at
    return html[:pos]


def _cut_at_list_markers(html: str, rules: HeuristicRules) -> str:
    """Cut at the earliest timestamp, date or cutoff phrase past the preamble.

    Matches inside the first ``cutoff_min_position`` characters are treated
    as the article's own byline/dateline and ignored.
    """
    start = rules.thresholds.cutoff_min_position
    patterns = list(rules.truncation_res)
    if rules.cutoff_phrase_re is not None:
        patterns.append(rules.cutoff_phrase_re)

    hits = [pos for pos in (_first_match_from(p, html, start) for p in patterns) if pos != -1]
    return _cut(html, min(hits)) if hits else html


def _cut_at_second_byline(html: str, rules: HeuristicRules) -> str:
    pos = _first_match_from(rules.byline_re, html, rules.thresholds.byline_min_position + 1)
    return _cut(html, pos) if pos != -1 else html


def _strip_article_list(html: str, rules: HeuristicRules) -> str:
    t = rules.thresholds
    stamps = list(rules.list_timestamp_re.finditer(html))
    if len(stamps) < t.timestamp_list_threshold:
        return html

    for stamp in stamps:
        if stamp.start() > t.timestamp_list_min_position:
            html = _cut(html, stamp.start())
            break

    if len(rules.list_timestamp_re.findall(html)) < t.timestamp_cleanup_threshold:
        return html

    wrapper = _fragment(html)
    for el in reversed(wrapper.find_all(True)):
        if el.decomposed:
            continue
        text = el.get_text()
        if not rules.timestamp_phrase_re.search(text):
            continue
        if len(el.find_all("a")) >= t.timestamp_element_min_links or len(text) < t.timestamp_element_max_text:
            el.decompose()
    return wrapper.decode_contents()


# ── Final passes (re-parsed) ──────────────────────────────────────────────────

def _dedupe_headings(node: Tag) -> None:
    seen: set[str] = set()
    for heading in node.find_all(_HEADINGS):
        if heading.decomposed:
            continue
        key = heading.get_text().strip().lower()
        if not key:
            continue
        if key in seen:
            heading.decompose()
        else:
            seen.add(key)


# ── Public API ────────────────────────────────────────────────────────────────

def strip_furniture(node: Tag, rules: HeuristicRules | None = None) -> None:
    """Run the element passes over *node* in place."""
    rules = rules or default_rules()
    _strip_structural(node, rules)
    _strip_junk_labels(node, rules)
    _strip_kill_phrases(node, rules)
    _strip_nav_lists(node, rules)
    _strip_link_farms(node, rules)


def trim_markup(html: str, rules: HeuristicRules | None = None) -> str:
    """Run the string passes over serialized *html*, then the re-parsed cleanup.

    Lists and divs shortened by a cut are re-checked against the
    navigation and link-farm thresholds.
    """
    rules = rules or default_rules()
    html = _cut_at_list_markers(html, rules)
    html = _cut_at_second_byline(html, rules)
    html = _strip_article_list(html, rules)

    wrapper = _fragment(html)
    _strip_nav_lists(wrapper, rules)
    _strip_link_farms(wrapper, rules)
    _dedupe_headings(wrapper)
    return wrapper.decode_contents()


def sanitize(node: Tag | None, rules: HeuristicRules | None = None) -> str:
    """Strip non-article material from *node* and return its inner HTML.

    *node* is modified in place. Returns an empty string for ``None``.
    """
    if node is None:
        return ""
    rules = rules or default_rules()

    strip_furniture(node, rules)
    html = node.decode_contents()
    cleaned = trim_markup(html, rules)

    logger.debug("sanitized", chars_in=len(html), chars_out=len(cleaned))
    return cleaned


def text_length(html: str) -> int:
    """Stripped visible-text length of an HTML fragment."""
    if not html:
        return 0
    return len(BeautifulSoup(html, "html.parser").get_text().strip())
