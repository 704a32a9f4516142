"""
Readability-style content scoring and body-root selection.

Every block element earns a base score from its own text (commas and
length, or character count for CJK text). The score is credited to the
block, its parent and, at reduced weight, its grandparent, so a container
that wraps several good paragraphs outranks any single paragraph. Each
credited node then becomes a candidate: its accumulated score is adjusted
by tag weight and class/id keywords, scaled down by link density, and the
best candidate in document order wins.

Scores live in a table keyed by node identity for the duration of one
``score()`` call; nothing is written onto the tree.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..config.config import ExtractionSettings
from .models import CandidateNode
from .signals import (
    NON_CONTENT_TAGS,
    KeywordSignals,
    TextStats,
    cjk_ratio,
    collect_text_stats,
    is_document,
    is_text_leaf,
    normalize_space,
    walk,
)

logger = structlog.get_logger(__name__)

SCORABLE_TAGS = frozenset(
    {"p", "pre", "td", "blockquote", "li", "dd", "div", "section", "article", "main", "h1", "h2", "h3", "h4", "h5", "h6"}
)

# Page chrome: never chosen as body root, and nothing inside them is either.
UNLIKELY_ROOT_TAGS = frozenset({"nav", "aside", "footer", "header", "menu"})

# Page-level elements whose class/id reflect page state rather than content.
PAGE_TAGS = frozenset({"html", "body"})


class ContentScorer:
    """Selects the element most likely to hold the article body."""

    def __init__(self, settings: ExtractionSettings) -> None:
        self.settings = settings
        self.signals = KeywordSignals(settings.positive_keywords, settings.negative_keywords)

    def score(self, tree: BeautifulSoup) -> CandidateNode:
        """Score the tree and return the selected body root.

        Falls back to ``<body>`` (or the document itself) when no candidate
        clears ``min_candidate_score``.
        """
        stats = collect_text_stats(tree)
        order = list(walk(tree))
        content_scores: Dict[int, float] = {}

        for node in order:
            if node.name not in SCORABLE_TAGS:
                continue
            base = self.base_score(self.own_text(node))
            if base <= 0:
                continue
            self._credit(content_scores, node, base)
            parent = node.parent
            if self._can_receive_credit(parent):
                self._credit(content_scores, parent, base)
                grandparent = parent.parent
                if self._can_receive_credit(grandparent):
                    self._credit(content_scores, grandparent, base * self.settings.grandparent_weight)

        in_chrome: Dict[int, bool] = {}
        disqualified: Dict[int, bool] = {}
        best: Optional[CandidateNode] = None
        for node in order:
            chrome = in_chrome.get(id(node.parent), False) or node.name in UNLIKELY_ROOT_TAGS
            in_chrome[id(node)] = chrome
            disqualified[id(node)] = chrome or self._is_disqualified(node, disqualified.get(id(node.parent), False))
            if disqualified[id(node)] or id(node) not in content_scores:
                continue
            candidate = self._candidate(node, stats[id(node)], content_scores[id(node)])
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None or best.score < self.settings.min_candidate_score:
            logger.debug(
                "no_candidate_above_threshold",
                best_score=best.score if best else None,
                threshold=self.settings.min_candidate_score,
            )
            return self.fallback(tree, stats)

        logger.debug(
            "candidate_selected",
            candidate_tag=best.tag_name,
            candidate_tokens=" ".join(best.node.get("class") or []),
            score=round(best.score, 2),
            text_length=best.text_length,
            link_density=round(best.link_density, 3),
        )
        return best

    def fallback(self, tree: BeautifulSoup, stats: Optional[Dict[int, TextStats]] = None) -> CandidateNode:
        """Return the document's outermost content container as a candidate."""
        root: Tag = tree.body or tree
        if stats is None:
            stats = collect_text_stats(root)
        node_stats = stats.get(id(root), TextStats())
        return CandidateNode(
            node=root,
            text_length=node_stats.text_length,
            comma_count=node_stats.comma_count,
            link_text_length=node_stats.link_text_length,
            score=0.0,
            keyword_flag=0,
        )

    def own_text(self, node: Tag) -> str:
        """Text of ``node`` outside nested scorable blocks, whitespace-collapsed."""
        parts: List[str] = []
        stack = list(reversed(list(node.children)))
        while stack:
            child = stack.pop()
            if is_text_leaf(child):
                parts.append(str(child))
            elif isinstance(child, Tag) and child.name not in SCORABLE_TAGS and child.name not in NON_CONTENT_TAGS:
                stack.extend(reversed(list(child.children)))
        return normalize_space("".join(parts))

    def base_score(self, text: str) -> float:
        """Score a block's own text; zero below the minimum length."""
        s = self.settings
        length = len(text)
        if cjk_ratio(text) >= s.cjk_ratio_threshold:
            if length < s.cjk_min_text_length:
                return 0.0
            return s.base_score + min(length / s.cjk_chars_per_point, s.cjk_max_length_bonus)
        if length < s.min_text_length:
            return 0.0
        return s.base_score + text.count(",") + min(length / s.chars_per_point, s.max_length_bonus)

    def _candidate(self, node: Tag, node_stats: TextStats, content_score: float) -> CandidateNode:
        flag = 0 if node.name in PAGE_TAGS else self.signals.flag(node)
        total = content_score + self.settings.tag_weights.get(node.name, 0.0) + flag * self.settings.keyword_weight
        return CandidateNode(
            node=node,
            text_length=node_stats.text_length,
            comma_count=node_stats.comma_count,
            link_text_length=node_stats.link_text_length,
            score=total * (1.0 - node_stats.link_density),
            keyword_flag=flag,
        )

    def _is_disqualified(self, node: Tag, inside_disqualified: bool) -> bool:
        """Keyword disqualification; descendants inherit it unless they carry a positive token."""
        if node.name in PAGE_TAGS or is_document(node):
            return False
        positive, negative = self.signals.classify(node)
        if positive:
            return False
        return negative or inside_disqualified

    @staticmethod
    def _can_receive_credit(node: Optional[Tag]) -> bool:
        return isinstance(node, Tag) and not is_document(node) and node.name not in {"html", "head"}

    @staticmethod
    def _credit(scores: Dict[int, float], node: Tag, amount: float) -> None:
        scores[id(node)] = scores.get(id(node), 0.0) + amount
