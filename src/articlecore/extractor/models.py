"""
Data models for extraction results and scoring candidates.
"""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import Tag


@dataclass(slots=True, frozen=True)
class Article:
    """Result of HTML content extraction."""

    title: str
    content: str  # serialized markup fragment


@dataclass(slots=True)
class CandidateNode:
    """A tree element under consideration as the article body root."""

    node: Tag
    text_length: int = 0
    comma_count: int = 0
    link_text_length: int = 0
    score: float = 0.0
    keyword_flag: int = 0  # +1 positive class/id tokens, -1 negative, 0 neither or both

    @property
    def link_density(self) -> float:
        if self.text_length <= 0:
            return 0.0
        return min(1.0, self.link_text_length / self.text_length)

    @property
    def tag_name(self) -> str:
        return self.node.name
