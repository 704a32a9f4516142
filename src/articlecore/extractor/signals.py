"""
Structural and textual signals shared by the scorer and the boilerplate filter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

# Subtrees whose text never counts as readable content.
NON_CONTENT_TAGS = frozenset(
    {
        "script",
        "style",
        "noscript",
        "template",
        "head",
        "title",
        "meta",
        "link",
        "textarea",
        "select",
        "option",
        "button",
        "iframe",
        "object",
        "embed",
    }
)

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")

# Han, kana, hangul, CJK punctuation and full-width forms.
_CJK_CHARS = re.compile(
    "[\u3000-\u303f\u3040-\u309f\u30a0-\u30ff\u3400-\u4dbf\u4e00-\u9fff"
    "\uac00-\ud7af\uf900-\ufaff\uff00-\uffef]"
)


def is_text_leaf(node: object) -> bool:
    """True for readable text nodes (not comments, doctypes or CDATA)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def normalize_space(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def cjk_ratio(text: str) -> float:
    """Share of CJK characters among the non-space characters of ``text``."""
    visible = len(text) - sum(1 for ch in text if ch.isspace())
    if visible <= 0:
        return 0.0
    return len(_CJK_CHARS.findall(text)) / visible


def walk(root: Tag) -> Iterator[Tag]:
    """Yield ``root`` and its element descendants in document order.

    Subtrees rooted at non-content tags (script, style, ...) are skipped.
    """
    stack: List[Tag] = [root]
    while stack:
        node = stack.pop()
        yield node
        children = [c for c in node.children if isinstance(c, Tag) and c.name not in NON_CONTENT_TAGS]
        stack.extend(reversed(children))


def class_id_tokens(tag: Tag) -> List[str]:
    """Lower-cased alphanumeric tokens of a tag's class and id attributes."""
    parts: List[str] = []
    classes = tag.get("class")
    if isinstance(classes, str):
        parts.append(classes)
    elif classes:
        parts.extend(classes)
    element_id = tag.get("id")
    if isinstance(element_id, str):
        parts.append(element_id)
    joined = " ".join(parts).lower()
    return [t for t in _TOKEN_SPLIT.split(joined) if t]


@dataclass(slots=True)
class TextStats:
    text_length: int = 0
    link_text_length: int = 0
    comma_count: int = 0

    @property
    def link_density(self) -> float:
        if self.text_length <= 0:
            return 0.0
        return min(1.0, self.link_text_length / self.text_length)


def collect_text_stats(root: Tag) -> Dict[int, TextStats]:
    """Compute subtree text statistics for every element under ``root``.

    Returns a table keyed by ``id(element)``; the tree itself is not touched.
    """
    order = list(walk(root))
    stats: Dict[int, TextStats] = {id(node): TextStats() for node in order}
    for node in reversed(order):
        own = stats[id(node)]
        for child in node.children:
            if is_text_leaf(child):
                text = normalize_space(str(child))
                own.text_length += len(text)
                own.comma_count += text.count(",") + text.count("，") + text.count("、")
        if node.name == "a":
            own.link_text_length = own.text_length
        if node is root:
            continue
        parent_stats = stats.get(id(node.parent))
        if parent_stats is not None:
            parent_stats.text_length += own.text_length
            parent_stats.link_text_length += own.link_text_length
            parent_stats.comma_count += own.comma_count
    return stats


class KeywordSignals:
    """Matches class/id tokens against positive and negative keyword lists.

    A token matches a keyword when it equals it, or starts with it for
    keywords longer than two characters ("comments" matches "comment",
    but "add" does not match "ad").
    """

    def __init__(self, positive: Iterable[str], negative: Iterable[str]) -> None:
        self.positive = tuple(k.lower() for k in positive)
        self.negative = tuple(k.lower() for k in negative)

    @staticmethod
    def _matches(token: str, keywords: Tuple[str, ...]) -> bool:
        for keyword in keywords:
            if token == keyword or (len(keyword) > 2 and token.startswith(keyword)):
                return True
        return False

    def classify(self, tag: Tag) -> Tuple[bool, bool]:
        """Return ``(positive, negative)`` for the tag's class/id tokens."""
        positive = negative = False
        for token in class_id_tokens(tag):
            positive = positive or self._matches(token, self.positive)
            negative = negative or self._matches(token, self.negative)
        return positive, negative

    def flag(self, tag: Tag) -> int:
        positive, negative = self.classify(tag)
        if positive == negative:
            return 0
        return 1 if positive else -1


def is_document(node: Tag) -> bool:
    return isinstance(node, BeautifulSoup)
