"""
Article extraction pipeline: domain rules, parsing, scoring, cleaning, titles.
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import time
from typing import Optional

import structlog
from bs4 import Tag

from ..config.config import ExtractionSettings
from .boilerplate import BoilerplateFilter
from .domain_rules import DomainRuleRegistry, default_registry
from .models import Article, CandidateNode
from .parse_tree import parse
from .scorer import ContentScorer
from .serializer import serialize
from .title import TitleResolver

logger = structlog.get_logger(__name__)


class ContentExtractor:
    """Extracts the title and main content of an HTML document.

    Instances hold only read-only configuration; every call builds and
    discards its own tree, so one extractor can serve concurrent calls.
    """

    name = "articlecore"

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        rules: Optional[DomainRuleRegistry] = None,
    ) -> None:
        if settings is None:
            from ..config.config import settings as global_settings

            settings = global_settings.extraction
        self.settings = settings
        self.rules = rules if rules is not None else default_registry
        self.scorer = ContentScorer(settings)
        self.boilerplate = BoilerplateFilter(settings)
        self.titles = TitleResolver(settings)
        self.logger = logger.bind(component="ContentExtractor")

    async def run_url_specific_operations(self, html: str, url: Optional[str] = None) -> str:
        """Apply the domain rule registered for ``url``'s host, if any.

        Never raises: a failing rule yields ``html`` unchanged.
        """
        return await self.rules.resolve(html, url)

    async def extract(self, html: str) -> Article:
        """Extract an Article from HTML.

        Args:
            html: Document text

        Returns:
            Article with possibly empty title

        Raises:
            UnparseableDocumentError: If the input is not textual
        """
        # CPU-bound; keep it off the event loop. The copied context carries
        # bound log fields (extraction_id) into the worker thread.
        loop = asyncio.get_running_loop()
        call = functools.partial(contextvars.copy_context().run, self.extract_sync, html)
        return await loop.run_in_executor(None, call)

    def extract_sync(self, html: str) -> Article:
        """Blocking variant of :meth:`extract`."""
        start_time = time.perf_counter()
        tree = parse(html, parser=self.settings.parser)

        try:
            candidate = self.scorer.score(tree)
        except Exception as e:
            self.logger.warning("scoring_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
            candidate = self.scorer.fallback(tree)

        title = self.titles.resolve(tree, candidate.node)

        try:
            root = self.boilerplate.clean(candidate)
        except Exception as e:
            self.logger.warning("cleaning_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
            root = self._safe_fallback_root(html)

        content = serialize(root)
        self.logger.info(
            "extraction_completed",
            root_tag=candidate.tag_name,
            score=round(candidate.score, 2),
            title_found=bool(title),
            content_length=len(content),
            extraction_time=round(time.perf_counter() - start_time, 4),
        )
        return Article(title=title, content=content)

    def _safe_fallback_root(self, html: str) -> Tag:
        tree = parse(html, parser=self.settings.parser)
        fallback: CandidateNode = self.scorer.fallback(tree)
        self.boilerplate.remove_unsafe(fallback.node)
        return fallback.node


_default_extractor: Optional[ContentExtractor] = None


def get_default_extractor() -> ContentExtractor:
    """Return the process-wide extractor built from ``settings.extraction``."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = ContentExtractor()
    return _default_extractor


async def run_url_specific_operations(html: str, url: Optional[str] = None) -> str:
    """Apply the registered domain rule for ``url`` to ``html``."""
    return await get_default_extractor().run_url_specific_operations(html, url)


async def extract(html: str) -> Article:
    """Extract title and main content from ``html``."""
    return await get_default_extractor().extract(html)
