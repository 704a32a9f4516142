"""
HTML parse-tree construction on top of BeautifulSoup.
"""

from __future__ import annotations

from typing import Any

import structlog
from bs4 import BeautifulSoup

from .errors import UnparseableDocumentError

logger = structlog.get_logger(__name__)

FALLBACK_PARSER = "html.parser"


def _coerce_text(html: Any) -> str:
    """Return ``html`` as text or raise if it is not textual."""
    if isinstance(html, bytes):
        try:
            html = html.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnparseableDocumentError(f"Document is not valid UTF-8: {e}") from e
    if not isinstance(html, str):
        raise UnparseableDocumentError(f"Expected HTML text, got {type(html).__name__}")
    if "\x00" in html:
        raise UnparseableDocumentError("Document contains NUL characters; refusing binary input")
    return html


def parse(html: str | bytes, *, parser: str = "lxml") -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree.

    Malformed markup is repaired by the tree builder rather than rejected.
    Comments, doctypes and processing instructions stay in the tree.

    Args:
        html: Document text (UTF-8 bytes are accepted)
        parser: BeautifulSoup tree builder name

    Returns:
        Parsed document tree

    Raises:
        UnparseableDocumentError: If the input is not textual
    """
    text = _coerce_text(html)
    try:
        return BeautifulSoup(text, parser)
    except Exception as e:
        if parser == FALLBACK_PARSER:
            raise UnparseableDocumentError(f"Document could not be parsed: {e}") from e
        logger.warning("parser_failed_retrying", parser=parser, fallback=FALLBACK_PARSER, error=str(e))

    try:
        return BeautifulSoup(text, FALLBACK_PARSER)
    except Exception as e:
        raise UnparseableDocumentError(f"Document could not be parsed: {e}") from e
