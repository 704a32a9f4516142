"""
ArticleCore - Readable article extraction from arbitrary HTML.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import (
    Article,
    ContentExtractor,
    UnparseableDocumentError,
    extract,
    run_url_specific_operations,
    sanitize_title,
)

__all__ = [
    "__version__",
    "Article",
    "Config",
    "ContentExtractor",
    "UnparseableDocumentError",
    "extract",
    "run_url_specific_operations",
    "sanitize_title",
]
