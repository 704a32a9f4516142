"""
Document title resolution and display normalization.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from ..config.config import ExtractionSettings

DEFAULT_TITLE_SEPARATORS = (" | ", " — ", " – ")
DEFAULT_MAX_SUFFIX_WORDS = 4
MAX_SUFFIX_CHARS = 40

# ASCII whitespace and no-break space; ideographic spaces are kept as typed.
_TITLE_WHITESPACE = re.compile("[ \t\n\r\f\v\u00a0]+")
_TITLE_STRIP = " \t\n\r\f\v\u00a0"


def _drop_control_chars(text: str) -> str:
    chars = []
    for ch in text:
        if unicodedata.category(ch) == "Cc":
            if ch in "\t\n\r\f\v":
                chars.append(" ")
            continue
        chars.append(ch)
    return "".join(chars).strip()


def sanitize_title(
    raw: str,
    *,
    separators: Iterable[str] = DEFAULT_TITLE_SEPARATORS,
    max_suffix_words: int = DEFAULT_MAX_SUFFIX_WORDS,
) -> str:
    """Normalize a title for display and comparison.

    Trims the title, collapses whitespace runs and strips a trailing
    site-name suffix such as ``"Headline | Example News"`` when the suffix
    is short and the remaining headline is longer than it.

    Args:
        raw: Title as returned by extraction
        separators: Separators that may introduce a site-name suffix
        max_suffix_words: Longest suffix, in words, that is stripped

    Returns:
        Normalized title (possibly empty)
    """
    title = _TITLE_WHITESPACE.sub(" ", raw or "").strip(_TITLE_STRIP)
    if not title:
        return ""

    split_at = -1
    split_sep = ""
    for sep in separators:
        index = title.rfind(sep)
        if index > split_at:
            split_at, split_sep = index, sep
    if split_at <= 0:
        return title

    head = title[:split_at].rstrip()
    suffix = title[split_at + len(split_sep) :].strip()
    if (
        suffix
        and len(suffix.split()) <= max_suffix_words
        and len(suffix) <= MAX_SUFFIX_CHARS
        and len(head) > len(suffix)
    ):
        return head
    return title


class TitleResolver:
    """Derives the document title from head metadata, ``<title>`` or a heading."""

    def __init__(self, settings: ExtractionSettings) -> None:
        self.meta_fields: Sequence[str] = tuple(f.lower() for f in settings.title_meta_fields)

    def resolve(self, tree: BeautifulSoup, root: Optional[Tag] = None) -> str:
        """Return the first non-empty title from the fallback chain, or ``""``."""
        for source in (self._from_meta, self._from_title_element):
            title = _drop_control_chars(source(tree))
            if title:
                return title
        return _drop_control_chars(self._from_heading(root if root is not None else (tree.body or tree)))

    def _from_meta(self, tree: BeautifulSoup) -> str:
        metas = tree.find_all("meta")
        for field in self.meta_fields:
            for meta in metas:
                key = meta.get("property") or meta.get("name") or ""
                if isinstance(key, str) and key.strip().lower() == field:
                    content = meta.get("content")
                    if isinstance(content, str) and content.strip():
                        return content
        return ""

    @staticmethod
    def _from_title_element(tree: BeautifulSoup) -> str:
        for title in tree.find_all("title"):
            if title.find_parent("svg") is None:
                return title.get_text()
        return ""

    @staticmethod
    def _from_heading(root: Tag) -> str:
        for level in ("h1", "h2"):
            heading = root.find(level)
            if heading is not None:
                text = heading.get_text()
                if text.strip():
                    return text
        return ""
