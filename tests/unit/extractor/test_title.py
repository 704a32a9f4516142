"""
Unit tests for title resolution and sanitizing.
"""

import pytest

from articlecore.config.config import ExtractionSettings
from articlecore.extractor.parse_tree import parse
from articlecore.extractor.title import TitleResolver, sanitize_title


@pytest.fixture
def resolver(extraction_settings):
    return TitleResolver(extraction_settings)


class TestSanitizeTitle:
    """Test cases for sanitize_title()."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("  Plain title  ", "Plain title"),
            ("Many   spaces\n\tand breaks", "Many spaces and breaks"),
            ("Harbor Bridge Reopens | Coastal Daily", "Harbor Bridge Reopens"),
            ("Docker For Mac Beta Review – Medium", "Docker For Mac Beta Review"),
            ("Why We Left the Cloud — Example Blog", "Why We Left the Cloud"),
            ("Section | Sub | Site Name", "Section | Sub"),
            ("", ""),
            ("   ", ""),
        ],
    )
    def test_normalization(self, raw, expected):
        """Test trimming, whitespace collapsing and suffix stripping."""
        assert sanitize_title(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "What is the best way to learn a language? - Quora",
            "Cats · Dogs",
            "Q&A | The Longer Part Of This Particular Title Here",
            "Short | A suffix with far too many words to be a site name",
            "| Leading separator",
        ],
    )
    def test_keeps_unconfident_suffixes(self, raw):
        """Test that ambiguous separators and long suffixes are kept."""
        assert sanitize_title(raw) == raw

    def test_ideographic_space_is_kept(self):
        """Test that CJK full-width spaces are part of the title."""
        assert sanitize_title("東京\u3000ニュース") == "東京\u3000ニュース"

    def test_custom_separators(self):
        """Test configurable separators."""
        assert sanitize_title("Headline text here - Site", separators=[" - "]) == "Headline text here"

    def test_is_idempotent(self):
        """Test that sanitizing twice changes nothing."""
        once = sanitize_title("  Headline  text | Site ")
        assert sanitize_title(once) == once == "Headline text"


class TestTitleResolver:
    """Test cases for TitleResolver."""

    def test_prefers_og_title(self, resolver):
        """Test meta og:title before <title>."""
        tree = parse(
            '<html><head><title>Page | Site</title><meta property="og:title" content="Real Headline">'
            "</head><body><h1>Heading</h1></body></html>"
        )
        assert resolver.resolve(tree) == "Real Headline"

    def test_twitter_title_by_name(self, resolver):
        """Test twitter:title given as a name attribute."""
        tree = parse('<head><meta name="twitter:title" content="Tweeted Headline"><title>Other</title></head>')
        assert resolver.resolve(tree) == "Tweeted Headline"

    def test_blank_meta_falls_through(self, resolver):
        """Test that empty meta content is skipped."""
        tree = parse('<head><meta property="og:title" content="  "><title>Document Title</title></head>')
        assert resolver.resolve(tree) == "Document Title"

    def test_ignores_svg_titles(self, resolver):
        """Test that <title> inside inline SVG is not the page title."""
        tree = parse("<body><svg><title>Icon</title></svg><h1>Page Heading</h1></body>", parser="html.parser")
        assert resolver.resolve(tree) == "Page Heading"

    def test_heading_fallback_within_root(self, resolver):
        """Test the first h1 of the selected root."""
        tree = parse("<body><div id='a'><h1>Outside</h1></div><div id='b'><h2>Sub</h2><h1>Inside</h1></div></body>")
        assert resolver.resolve(tree, tree.select_one("#b")) == "Inside"

    def test_h2_fallback(self, resolver):
        """Test h2 when the root has no h1."""
        tree = parse("<body><div id='b'><h2>Second Level</h2><p>text</p></div></body>")
        assert resolver.resolve(tree, tree.select_one("#b")) == "Second Level"

    def test_heading_fallback_without_root(self, resolver):
        """Test that the body is searched when no root is given."""
        tree = parse("<body><h1>Body Heading</h1></body>")
        assert resolver.resolve(tree) == "Body Heading"

    def test_empty_title(self, resolver):
        """Test that a document with no title source yields an empty string."""
        tree = parse("<body><p>No headings here.</p></body>")
        assert resolver.resolve(tree) == ""

    def test_control_characters_are_dropped(self, resolver):
        """Test that control characters never reach the title."""
        tree = parse("<head><title>\n  Breaking\x07 News\tToday \x1b</title></head>", parser="html.parser")
        assert resolver.resolve(tree) == "Breaking News Today"

    def test_custom_meta_fields(self):
        """Test configurable meta fields."""
        resolver = TitleResolver(ExtractionSettings(title_meta_fields=["dc.title"]))
        tree = parse('<head><meta name="DC.title" content="Dublin Core Title"><title>Fallback</title></head>')
        assert resolver.resolve(tree) == "Dublin Core Title"
