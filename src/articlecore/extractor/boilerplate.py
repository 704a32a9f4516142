"""
Boilerplate removal inside the selected body root.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List

import structlog
from bs4 import Tag
from bs4.element import PreformattedString

from ..config.config import ExtractionSettings
from .models import CandidateNode
from .signals import KeywordSignals, TextStats, collect_text_stats

logger = structlog.get_logger(__name__)

# Removed wherever they appear, with everything inside them.
REMOVE_TAGS = frozenset(
    {
        "script",
        "style",
        "noscript",
        "template",
        "link",
        "meta",
        "object",
        "embed",
        "applet",
        "button",
        "input",
        "select",
        "textarea",
        "nav",
        "aside",
        "footer",
        "menu",
    }
)

# Inline content markup; never removed for its class or id.
INLINE_TAGS = frozenset(
    {
        "a",
        "img",
        "picture",
        "source",
        "em",
        "strong",
        "b",
        "i",
        "u",
        "s",
        "br",
        "sup",
        "sub",
        "small",
        "code",
        "mark",
        "abbr",
        "cite",
        "q",
        "time",
        "del",
        "ins",
        "kbd",
        "var",
    }
)

LINK_LIST_TAGS = frozenset({"ul", "ol", "dl", "div", "section", "table"})

# Block containers dropped once removal leaves them without text or media.
# Inline wrappers stay: their whitespace separates words.
EMPTY_REMOVABLE_TAGS = frozenset(
    {
        "div",
        "section",
        "article",
        "header",
        "p",
        "ul",
        "ol",
        "li",
        "dl",
        "figure",
        "blockquote",
        "center",
        "form",
        "table",
        "html",
    }
)

WRAPPED_BLOCK_TAGS = ["p", "pre", "blockquote", "article", "main", "table"]

MEDIA_TAGS = ["img", "picture", "video", "audio", "iframe", "svg", "canvas", "math"]

VIDEO_EMBED = re.compile(r"(youtube(-nocookie)?\.com|youtu\.be|vimeo\.com|dailymotion\.com|soundcloud\.com)", re.I)

# Link-heavy containers with media and little link text are figures, not link lists.
FIGURE_LINK_TEXT_LIMIT = 100


class BoilerplateFilter:
    """Prunes scripts, ads, widgets and other boilerplate from a body root.

    Only the per-call tree is mutated. Text inside retained elements is left
    exactly as parsed.
    """

    def __init__(self, settings: ExtractionSettings) -> None:
        self.settings = settings
        self.signals = KeywordSignals(settings.positive_keywords, settings.negative_keywords)

    def clean(self, candidate: CandidateNode) -> Tag:
        """Remove boilerplate within the candidate's subtree and return its root."""
        root = candidate.node
        self.remove_unsafe(root)
        removed = self._prune(root, self._is_removable_tag)

        stats = collect_text_stats(root)
        root_length = stats[id(root)].text_length
        removed += self._prune(root, lambda node: self._is_negative(node, stats, root_length))

        stats = collect_text_stats(root)
        removed += self._prune(root, lambda node: self._is_link_list(node, stats))
        removed += self._remove_empty(root)

        logger.debug("boilerplate_removed", root_tag=root.name, removed=removed)
        return root

    def remove_unsafe(self, root: Tag) -> int:
        """Drop comments, doctypes, script/style elements and any document head under ``root``."""
        removed = 0
        for leaf in root.find_all(string=lambda s: isinstance(s, PreformattedString)):
            leaf.extract()
            removed += 1
        for tag in root.find_all(["script", "style", "head"]):
            tag.decompose()
            removed += 1
        return removed

    @staticmethod
    def _prune(root: Tag, should_remove: Callable[[Tag], bool]) -> int:
        """Pre-order walk that decomposes matching elements and skips their subtrees."""
        removed = 0
        stack: List[Tag] = [c for c in reversed(list(root.children)) if isinstance(c, Tag)]
        while stack:
            node = stack.pop()
            if should_remove(node):
                node.decompose()
                removed += 1
                continue
            stack.extend(c for c in reversed(list(node.children)) if isinstance(c, Tag))
        return removed

    @staticmethod
    def _is_removable_tag(node: Tag) -> bool:
        if node.name in REMOVE_TAGS:
            return True
        if node.name == "iframe":
            return not VIDEO_EMBED.search(node.get("src") or "")
        return False

    def _is_negative(self, node: Tag, stats: Dict[int, TextStats], root_length: int) -> bool:
        if node.name in INLINE_TAGS:
            return False
        positive, negative = self.signals.classify(node)
        if not negative:
            return False
        node_stats = stats.get(id(node))
        node_length = node_stats.text_length if node_stats else 0
        if node_length < self.settings.protected_text_ratio * root_length:
            return True
        if positive:
            return False
        # Negative-only layout wrappers ("site has-sidebar") keep the blocks they hold.
        return node.find(WRAPPED_BLOCK_TAGS) is None

    def _is_link_list(self, node: Tag, stats: Dict[int, TextStats]) -> bool:
        if node.name not in LINK_LIST_TAGS:
            return False
        node_stats = stats.get(id(node))
        if node_stats is None or node_stats.link_density <= self.settings.max_link_density:
            return False
        has_media = node.find(MEDIA_TAGS) is not None
        return not (has_media and node_stats.link_text_length < FIGURE_LINK_TEXT_LIMIT)

    @staticmethod
    def _remove_empty(root: Tag) -> int:
        removed = 0
        # Reverse document order visits descendants before their ancestors.
        for node in reversed(root.find_all(sorted(EMPTY_REMOVABLE_TAGS))):
            if node.get_text().strip():
                continue
            if node.find(MEDIA_TAGS) is not None:
                continue
            node.decompose()
            removed += 1
        return removed
