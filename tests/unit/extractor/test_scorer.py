"""
Unit tests for ContentScorer.
"""

import pytest

from articlecore.config.config import ExtractionSettings
from articlecore.extractor.parse_tree import parse
from articlecore.extractor.scorer import ContentScorer
from articlecore.extractor.serializer import serialize

# 64 characters, two commas: base score 1 + 2 + 0.64
PARAGRAPH = "This paragraph has enough text, commas, and words to score well."
CJK_PARAGRAPH = "今日は天気が良いので公園を散歩しました。"  # 20 characters


@pytest.fixture
def scorer(extraction_settings):
    return ContentScorer(extraction_settings)


class TestBaseScore:
    """Test cases for block base scores."""

    def test_latin_text(self, scorer):
        """Test commas and length bonus."""
        assert scorer.base_score(PARAGRAPH) == pytest.approx(3.64)

    def test_short_text_scores_zero(self, scorer):
        """Test the minimum text length."""
        assert scorer.base_score("Too short to count.") == 0.0

    def test_length_bonus_is_capped(self, scorer):
        """Test that very long text earns at most max_length_bonus."""
        assert scorer.base_score("word " * 400) == pytest.approx(4.0)

    def test_cjk_text_uses_character_count(self, scorer):
        """Test that CJK text is scored by character count with a lower minimum."""
        assert scorer.base_score(CJK_PARAGRAPH) == pytest.approx(1 + 20 / 30)
        assert scorer.base_score("短い文です。") == 0.0

    def test_custom_settings(self):
        """Test that thresholds come from settings."""
        scorer = ContentScorer(ExtractionSettings(min_text_length=5, base_score=0.0, chars_per_point=10))
        assert scorer.base_score("abc, def") == pytest.approx(1 + 0.8)


class TestOwnText:
    """Test cases for own-text collection."""

    def test_excludes_nested_blocks(self, scorer):
        """Test that nested scorable blocks and scripts are not counted."""
        tree = parse("<div>Intro   text <span>inline</span><p>nested</p><script>var x;</script><!-- c --></div>")
        assert scorer.own_text(tree.find("div")) == "Intro text inline"


class TestScore:
    """Test cases for body-root selection."""

    def test_selects_article_container(self, scorer, sample_html):
        """Test that the positive, paragraph-rich container wins."""
        candidate = scorer.score(parse(sample_html))

        assert candidate.node.get("id") == "story"
        assert candidate.keyword_flag == 1
        assert candidate.score > scorer.settings.min_candidate_score

    def test_ties_go_to_earliest(self, scorer):
        """Test that equal scores keep the first node in document order."""
        html = f'<body><div class="first"><p>{PARAGRAPH}</p></div><div class="second"><p>{PARAGRAPH}</p></div></body>'
        candidate = scorer.score(parse(html))
        assert candidate.node.get("class") == ["first"]

    def test_negative_container_disqualifies_descendants(self, scorer):
        """Test that blocks inside a negative container are never chosen."""
        html = (
            "<body>"
            f'<div class="comments"><div class="thread"><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></div>'
            f'<div class="prose"><p>{PARAGRAPH}</p></div>'
            "</body>"
        )
        candidate = scorer.score(parse(html))
        assert candidate.node.get("class") == ["prose"]

    def test_positive_block_inside_negative_layout_wrapper(self, scorer):
        """Test that a page wrapper like "site has-sidebar" does not hide the article inside it."""
        html = (
            '<body class="single"><div id="page" class="site has-sidebar">'
            f'<div class="entry-content"><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div>'
            '<div class="widget-area"><p>Archives, categories, and a tag cloud for the whole blog.</p></div>'
            "</div></body>"
        )
        candidate = scorer.score(parse(html))

        assert candidate.node.get("class") == ["entry-content"]
        assert candidate.keyword_flag == 1

    def test_chrome_tags_disqualify_positive_descendants(self, scorer):
        """Test that a positive token does not lift a block out of an <aside>."""
        html = (
            "<body>"
            f'<aside><div class="story"><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></aside>'
            f'<div class="prose"><p>{PARAGRAPH}</p></div>'
            "</body>"
        )
        candidate = scorer.score(parse(html))
        assert candidate.node.get("class") == ["prose"]

    def test_mixed_signals_are_not_disqualified(self, scorer):
        """Test that a positive token cancels a negative one."""
        html = f'<body><div class="content comments"><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>'
        candidate = scorer.score(parse(html))

        assert candidate.node.get("class") == ["content", "comments"]
        assert candidate.keyword_flag == 0

    def test_structural_boilerplate_is_disqualified(self, scorer):
        """Test that nothing inside nav/aside/footer becomes the root."""
        html = (
            "<body>"
            f"<nav><div><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></nav>"
            f"<aside><div><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></aside>"
            f'<div class="prose"><p>{PARAGRAPH}</p></div>'
            "</body>"
        )
        candidate = scorer.score(parse(html))
        assert candidate.node.get("class") == ["prose"]

    def test_link_density_penalizes_link_lists(self, scorer):
        """Test that a container of links loses to plain prose."""
        link = '<a href="/x">A headline that is long enough to be scored as text</a>'
        html = (
            f'<body><div class="links"><p>{link}</p><p>{link}</p><p>{link}</p></div>'
            f'<div class="prose"><p>{PARAGRAPH}</p></div></body>'
        )
        candidate = scorer.score(parse(html))

        assert candidate.node.get("class") == ["prose"]
        assert candidate.link_density == 0.0

    def test_cjk_paragraphs_are_scored(self, scorer):
        """Test that short CJK paragraphs still select their container."""
        html = f'<body><div class="honbun"><p>{CJK_PARAGRAPH}</p><p>{CJK_PARAGRAPH}</p></div></body>'
        candidate = scorer.score(parse(html))
        assert candidate.node.get("class") == ["honbun"]

    def test_falls_back_to_body(self, scorer):
        """Test the body fallback when nothing clears the threshold."""
        tree = parse("<html><body><p>Short.</p><div>Tiny</div></body></html>")
        candidate = scorer.score(tree)

        assert candidate.node is tree.body
        assert candidate.score == 0.0

    def test_falls_back_to_document_without_body(self, scorer):
        """Test the document fallback for an empty tree."""
        tree = parse("")
        assert scorer.score(tree).node is tree

    def test_tree_is_not_mutated(self, scorer, sample_html):
        """Test that scoring leaves no state on the tree."""
        tree = parse(sample_html)
        before = serialize(tree)
        scorer.score(tree)
        scorer.score(tree)
        assert serialize(tree) == before
