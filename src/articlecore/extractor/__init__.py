"""
ArticleCore Content Extraction Module

Extracts the readable title and body of arbitrary HTML pages:
1. Domain rules: per-site rewrites applied before generic extraction
2. Parsing: forgiving BeautifulSoup/lxml parse tree
3. Scoring: readability-style candidate scoring picks the body root
4. Cleaning: scripts, ads, widgets, comment sections and link lists removed
5. Titles: head metadata, <title> or the first heading, plus a sanitizer
"""

from .boilerplate import BoilerplateFilter
from .content_extractor import ContentExtractor, extract, get_default_extractor, run_url_specific_operations
from .domain_rules import DEFAULT_RULES, DomainRule, DomainRuleRegistry, default_registry
from .errors import ArticleCoreError, DomainRuleError, UnparseableDocumentError
from .models import Article, CandidateNode
from .parse_tree import parse
from .protocols import Extractor
from .scorer import ContentScorer
from .serializer import serialize
from .title import TitleResolver, sanitize_title

__all__ = [
    "Article",
    "ArticleCoreError",
    "BoilerplateFilter",
    "CandidateNode",
    "ContentExtractor",
    "ContentScorer",
    "DEFAULT_RULES",
    "DomainRule",
    "DomainRuleError",
    "DomainRuleRegistry",
    "Extractor",
    "TitleResolver",
    "UnparseableDocumentError",
    "default_registry",
    "extract",
    "get_default_extractor",
    "parse",
    "run_url_specific_operations",
    "sanitize_title",
    "serialize",
]
