"""
Shared test configuration for ArticleCore.

Provides extraction settings, extractor instances and access to the HTML
fixture corpus under ``tests/fixtures/articles``.
"""

# Standard library imports
from pathlib import Path
from typing import Callable

# Third-party imports
import pytest

# Local imports
from articlecore.config import Config, ExtractionSettings, MonitoringConfig
from articlecore.extractor import ContentExtractor, DomainRuleRegistry
from articlecore.extractor.domain_rules import DEFAULT_RULES
from articlecore.observability import configure_logging

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "articles"

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def extraction_settings() -> ExtractionSettings:
    """Default extraction settings, independent of any config file on disk."""
    return ExtractionSettings()


@pytest.fixture
def test_config() -> Config:
    """Default configuration."""
    return Config()


@pytest.fixture
def rule_registry() -> DomainRuleRegistry:
    """A fresh registry holding the built-in rules."""
    return DomainRuleRegistry(DEFAULT_RULES)


@pytest.fixture
def extractor(extraction_settings: ExtractionSettings, rule_registry: DomainRuleRegistry) -> ContentExtractor:
    """Extractor wired with default settings and the built-in rules."""
    return ContentExtractor(extraction_settings, rule_registry)


@pytest.fixture(scope="session")
def load_fixture() -> Callable[[str], str]:
    """Return a loader for HTML fixtures by name (without extension)."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / f"{name}.html").read_text(encoding="utf-8")

    return _load


@pytest.fixture
def sample_html() -> str:
    """A small article page with typical boilerplate around it."""
    return """
    <html>
    <head><title>Test Article | Example News</title></head>
    <body>
        <nav class="menu"><a href="/">Home</a> <a href="/world">World</a></nav>
        <div id="story" class="article-body">
            <h1>Test Article</h1>
            <p>This is the first paragraph of the article, and it is long enough to be scored.</p>
            <p>The second paragraph adds more text, more commas, and a little more weight.</p>
        </div>
        <div class="comments"><p>Nice article, thanks for writing it up so clearly!</p></div>
        <footer>© Example News</footer>
    </body>
    </html>
    """


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging():
    """Route structlog through stdlib logging at WARNING for the whole session."""
    configure_logging(MonitoringConfig(log_level="WARNING"))
