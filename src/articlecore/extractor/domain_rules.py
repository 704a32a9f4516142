"""
Domain-Specific Pre-Extraction Rules

Some sites wrap their content in markup the generic scorer mishandles. A
domain rule pairs a hostname matcher with an ``html -> html`` transform that
runs before generic extraction:

- Quora: rebuilds question pages as one flat article of answers
- Medium: swaps blurred image placeholders for the real ``<noscript>`` images

Rules are kept in an ordered registry and resolved by linear scan; the first
matching rule wins. A failing rule never breaks extraction, the original
HTML is used instead.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup, Tag

from .errors import DomainRuleError
from .parse_tree import parse
from .serializer import serialize
from .signals import normalize_space

logger = structlog.get_logger(__name__)

Transform = Callable[[str], Union[str, Awaitable[str]]]
HostPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class DomainRule:
    """A hostname-keyed pre-extraction transform."""

    name: str
    transform: Transform
    hosts: Tuple[str, ...] = field(default_factory=tuple)
    predicate: Optional[HostPredicate] = None

    def matches(self, hostname: str) -> bool:
        """True if ``hostname`` is one of ``hosts`` (or a subdomain) or the predicate accepts it."""
        host = hostname.lower().rstrip(".")
        for candidate in self.hosts:
            candidate = candidate.lower()
            if host == candidate or host.endswith(f".{candidate}"):
                return True
        if self.predicate is not None:
            return bool(self.predicate(host))
        return False


def hostname_of(url: Optional[str]) -> Optional[str]:
    """Extract the lower-cased hostname from ``url``; scheme-less URLs are accepted."""
    if not url or not url.strip():
        return None
    url = url.strip()
    if "//" not in url:
        url = f"//{url}"
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


class DomainRuleRegistry:
    """Ordered collection of domain rules with the async resolve entry point."""

    def __init__(self, rules: Iterable[DomainRule] = ()) -> None:
        self._rules: List[DomainRule] = list(rules)
        self.logger = logger

    @property
    def rules(self) -> Tuple[DomainRule, ...]:
        return tuple(self._rules)

    def register(self, rule: DomainRule) -> DomainRule:
        """Append a rule; earlier registrations take precedence."""
        if any(existing.name == rule.name for existing in self._rules):
            raise ValueError(f"Domain rule '{rule.name}' is already registered")
        self._rules.append(rule)
        return rule

    def match(self, url: Optional[str]) -> Optional[DomainRule]:
        """Return the first rule accepting ``url``'s host.

        A rule whose host check raises is logged and skipped.
        """
        hostname = hostname_of(url)
        if not hostname:
            return None
        for rule in self._rules:
            try:
                if rule.matches(hostname):
                    return rule
            except Exception as e:
                self.logger.warning(
                    "domain_rule_failed",
                    rule=rule.name,
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return None

    async def resolve(self, html: str, url: Optional[str] = None) -> str:
        """Apply the first rule matching ``url`` to ``html``.

        Args:
            html: Raw document
            url: Optional source URL

        Returns:
            Transformed HTML, or ``html`` unchanged when no rule matches or
            the matching rule fails
        """
        rule = self.match(url)
        if rule is None:
            return html

        try:
            result = rule.transform(html)
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, str):
                raise DomainRuleError(rule.name, f"transform returned {type(result).__name__}, expected str")
        except Exception as e:
            self.logger.warning(
                "domain_rule_failed",
                rule=rule.name,
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return html

        self.logger.debug("domain_rule_applied", rule=rule.name, url=url, size_before=len(html), size_after=len(result))
        return result


# --- Quora ---

QUORA_ANSWER_SELECTOR = ".AnswerBase, .Answer"
QUORA_AUTHOR_SELECTORS = (".author_info", ".feed_item_answer_user", ".AnswerHeader")
QUORA_BODY_SELECTORS = (".ExpandedAnswer", ".inline_editor_value", ".answer_content")
QUORA_QUESTION_SELECTORS = (".question_text_edit", ".QuestionText", "h1")
QUORA_BLOCKS = ["p", "pre", "blockquote", "ul", "ol", "h2", "h3", "table", "figure"]
QUORA_TITLE_SUFFIX = " - Quora"


def _outermost(tags: List[Tag]) -> List[Tag]:
    chosen = {id(t) for t in tags}
    return [t for t in tags if not any(id(p) in chosen for p in t.parents)]


def _quora_question(soup: BeautifulSoup) -> str:
    for selector in QUORA_QUESTION_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            text = normalize_space(element.get_text())
            if text:
                return text
    title = soup.find("title")
    text = normalize_space(title.get_text()) if title is not None else ""
    if text.endswith(QUORA_TITLE_SUFFIX):
        text = text[: -len(QUORA_TITLE_SUFFIX)].rstrip()
    return text


def quora_transform(html: str) -> str:
    """Flatten a Quora question page into ``<article>`` with one run of paragraphs per answer."""
    soup = parse(html)
    answers = _outermost(soup.select(QUORA_ANSWER_SELECTOR))
    if not answers:
        return html

    question = _quora_question(soup)
    doc = BeautifulSoup("<html><head><title></title></head><body><article></article></body></html>", "lxml")
    doc.title.string = question
    article = doc.find("article")
    heading = doc.new_tag("h1")
    heading.string = question
    article.append(heading)

    for index, answer in enumerate(answers):
        author = None
        for selector in QUORA_AUTHOR_SELECTORS:
            author = answer.select_one(selector)
            if author is not None:
                break
        author_text = normalize_space(author.get_text()) if author is not None else ""
        if author is not None:
            author.extract()

        body = None
        for selector in QUORA_BODY_SELECTORS:
            body = answer.select_one(selector)
            if body is not None:
                break
        if body is None:
            body = answer

        if index:
            article.append(doc.new_tag("hr"))
        if author_text:
            byline = doc.new_tag("p", attrs={"class": "answer-author"})
            byline.string = author_text
            article.append(byline)

        blocks = _outermost(body.find_all(QUORA_BLOCKS))
        if blocks:
            for block in blocks:
                article.append(block.extract())
        else:
            text = normalize_space(body.get_text())
            if text:
                paragraph = doc.new_tag("p")
                paragraph.string = text
                article.append(paragraph)

    return serialize(doc)


# --- Medium ---

MEDIUM_PLACEHOLDER_SELECTOR = ".progressiveMedia-thumbnail, .progressiveMedia-canvas"


def medium_transform(html: str) -> str:
    """Drop progressive-loading placeholders and unwrap ``<noscript>`` images."""
    soup = parse(html)
    for placeholder in soup.select(MEDIUM_PLACEHOLDER_SELECTOR):
        placeholder.decompose()
    for noscript in soup.find_all("noscript"):
        if noscript.find("img") is not None:
            noscript.unwrap()
    return serialize(soup)


DEFAULT_RULES: Tuple[DomainRule, ...] = (
    DomainRule(name="quora", transform=quora_transform, hosts=("quora.com",)),
    DomainRule(name="medium", transform=medium_transform, hosts=("medium.com",)),
)

default_registry = DomainRuleRegistry(DEFAULT_RULES)
