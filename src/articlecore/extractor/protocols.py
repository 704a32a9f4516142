"""
Protocols for pluggable article extraction strategies.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .models import Article


@runtime_checkable
class Extractor(Protocol):
    """HTML-to-Article strategy with an optional per-URL pre-pass."""

    name: str

    async def run_url_specific_operations(self, html: str, url: Optional[str] = None) -> str:
        """Apply site-specific rewrites before extraction.

        Args:
            html: Raw document
            url: Optional source URL used to pick a rule

        Returns:
            Rewritten (or unchanged) HTML
        """
        ...

    async def extract(self, html: str) -> Article:
        """Extract title and main content from an HTML string.

        Args:
            html: HTML content to extract from

        Returns:
            Article with extracted title and content
        """
        ...
