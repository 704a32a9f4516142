"""
Exceptions raised by the extraction pipeline.
"""

from __future__ import annotations


class ArticleCoreError(Exception):
    """Base class for ArticleCore errors."""

    pass


class UnparseableDocumentError(ArticleCoreError, ValueError):
    """Raised when input cannot be treated as an HTML document at all."""

    pass


class DomainRuleError(ArticleCoreError):
    """Raised when a domain rule's transform fails or returns garbage."""

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(f"Domain rule '{rule}' failed: {message}")
        self.rule = rule
