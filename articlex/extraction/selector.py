"""Content-node selection — which element of the page is the article body.

Each strategy implements ``try_extract(document) -> Candidate | None``.
``ContentSelector`` walks its strategies in order and returns the first hit:

  1. SelectorStrategy   — publisher CSS selectors (``selectors``)
  2. HeuristicStrategy  — scored DOM walk (``heuristic-picker``)

``ParagraphAggregateStrategy`` is not part of the default chain; the
extractor runs it only when the chain's result is short, and keeps it only
if it yields more text. The AMP mirror is async and lives in the extractor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag

from articlex.errors import NoContentFoundError
from articlex.extraction.rules import HeuristicRules, default_rules
from articlex.models.schemas import StrategyTag

logger = structlog.get_logger(component="extraction.selector")


@dataclass
class Candidate:
    """A located article-body element.

    Attributes:
        node:        The element (live in its document; sanitizing mutates it).
        strategy:    Which tier found it.
        text_length: Stripped raw text length of *node*.
        prebuilt:    True when *node* was synthesized from clean text and
                     needs no sanitizing.
    """

    node: Tag
    strategy: StrategyTag
    text_length: int
    prebuilt: bool = False


class ContentStrategy(Protocol):
    name: StrategyTag

    def try_extract(self, document: BeautifulSoup) -> Candidate | None: ...


def _label(el: Tag) -> str:
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return (" ".join(classes) + " " + (el.get("id") or "")).lower()


def pick_best_content_node(
    document: BeautifulSoup,
    rules: HeuristicRules | None = None,
) -> Tag | None:
    """Return the highest-scoring container element, or None.

    Strips structural noise from *document* first (this mutates it). Score
    rewards paragraphs, then list items, then raw length capped at
    ``heuristic_max_len``. Containers whose class/id look like navigation,
    sidebars or promos are never candidates.
    """
    rules = rules or default_rules()
    t = rules.thresholds

    for tag in document.find_all(rules.candidate_noise_tags):
        if not tag.decomposed:
            tag.decompose()

    best: Tag | None = None
    best_score = 0.0
    for el in document.find_all(rules.candidate_tags):
        if rules.candidate_junk_re.search(_label(el)):
            continue
        length = len(" ".join(el.get_text().split()))
        score = (
            len(el.find_all("p")) * t.paragraph_weight
            + len(el.find_all("li")) * t.list_item_weight
            + min(length, t.heuristic_max_len) / t.length_divisor
        )
        if score > best_score and length > t.heuristic_min_text:
            best = el
            best_score = score
    return best


class SelectorStrategy:
    """First publisher selector whose match carries enough text."""

    name = StrategyTag.SELECTORS

    def __init__(self, rules: HeuristicRules | None = None) -> None:
        self.rules = rules or default_rules()

    def try_extract(self, document: BeautifulSoup) -> Candidate | None:
        floor = self.rules.thresholds.selector_min_text
        for css in self.rules.selectors:
            el = document.select_one(css)
            if el is None:
                continue
            length = len(el.get_text().strip())
            if length > floor:
                return Candidate(node=el, strategy=self.name, text_length=length)
        return None


class HeuristicStrategy:
    name = StrategyTag.HEURISTIC_PICKER

    def __init__(self, rules: HeuristicRules | None = None) -> None:
        self.rules = rules or default_rules()

    def try_extract(self, document: BeautifulSoup) -> Candidate | None:
        node = pick_best_content_node(document, self.rules)
        if node is None:
            return None
        return Candidate(node=node, strategy=self.name, text_length=len(node.get_text().strip()))


class ParagraphAggregateStrategy:
    """Rebuild the body from scattered paragraph blocks.

    Some article templates split the body into many sibling components, none
    of which passes the selector floor on its own. Collects every
    paragraph-like element with real text and wraps each in a fresh ``<p>``.
    """

    name = StrategyTag.PARAGRAPH_AGGREGATE

    def __init__(self, rules: HeuristicRules | None = None) -> None:
        self.rules = rules or default_rules()

    def try_extract(self, document: BeautifulSoup) -> Candidate | None:
        t = self.rules.thresholds
        texts = [
            text
            for text in (n.get_text().strip() for n in document.select(self.rules.paragraph_selectors))
            if len(text) > t.paragraph_min_text
        ]
        if len(texts) < t.paragraph_min_count:
            return None

        soup = BeautifulSoup("", "html.parser")
        block = soup.new_tag("div")
        for i, text in enumerate(texts):
            if i:
                block.append(NavigableString("\n"))
            para = soup.new_tag("p")
            para.string = text
            block.append(para)
        soup.append(block)
        return Candidate(
            node=block,
            strategy=self.name,
            text_length=sum(len(text) for text in texts),
            prebuilt=True,
        )


class ContentSelector:
    """Ordered strategy chain; the first strategy to return a candidate wins."""

    def __init__(
        self,
        strategies: list[ContentStrategy] | None = None,
        rules: HeuristicRules | None = None,
    ) -> None:
        rules = rules or default_rules()
        self.strategies: list[ContentStrategy] = (
            strategies if strategies is not None
            else [SelectorStrategy(rules), HeuristicStrategy(rules)]
        )

    def select(self, document: BeautifulSoup) -> Candidate:
        """Return the first strategy's candidate.

        Raises:
            NoContentFoundError: no strategy produced a candidate.
        """
        for strategy in self.strategies:
            candidate = strategy.try_extract(document)
            if candidate is not None:
                logger.debug(
                    "content_node_selected",
                    strategy=candidate.strategy.value,
                    text_length=candidate.text_length,
                )
                return candidate
        raise NoContentFoundError("No content candidate met the selection thresholds")


def select_content_node(document: BeautifulSoup, rules: HeuristicRules | None = None) -> Candidate:
    """Run the default selector chain over *document*."""
    return ContentSelector(rules=rules).select(document)
