"""Unit tests for SEO scoring."""

import pytest

from draftdesk.models.article import ArticleForm
from draftdesk.services.seo_scoring import assess_article, assess_seo, count_words


def body(words: int, heading: bool = True) -> str:
    text = " ".join(["word"] * words)
    return f"<h2>Section</h2><p>{text}</p>" if heading else f"<p>{text}</p>"


@pytest.fixture
def perfect_fields():
    """Fields that pass every check."""
    return {
        "title": "",
        "seo_title": "x" * 45,
        "seo_description": "d" * 140,
        "content": body(350),
        "slug": "my-clean-slug-2",
    }


class TestAssessSeo:
    """Test the five-check SEO checklist."""

    def test_all_checks_pass(self, perfect_fields):
        """Test a fully optimized article scores 100."""
        assessment = assess_seo(**perfect_fields)

        assert assessment.score == 100
        assert all(check.passed for check in assessment.checks)

    def test_check_order_and_labels(self, perfect_fields):
        """Test checks run in a fixed order with measured values in labels."""
        labels = [check.label for check in assess_seo(**perfect_fields).checks]

        assert labels == [
            "SEO title (45/60 chars)",
            "Meta description (140/160 chars)",
            "Content (350 words)",
            "Clean URL slug",
            "Structure (H2/H3 headings)",
        ]

    def test_empty_article(self):
        """Test an empty article scores 0 with critical failures."""
        assessment = assess_seo()

        assert assessment.score == 0
        severities = [check.severity for check in assessment.checks]
        assert severities == ["critical", "critical", "critical", "warning", "info"]

    def test_score_rounds_to_nearest_percent(self, perfect_fields):
        """Test 3/5, 4/5 and 1/5 passed checks give 60, 80 and 20."""
        perfect_fields["slug"] = "Not Clean"
        assert assess_seo(**perfect_fields).score == 80

        perfect_fields["content"] = body(350, heading=False)
        assert assess_seo(**perfect_fields).score == 60

        perfect_fields["seo_title"] = ""
        perfect_fields["seo_description"] = ""
        assert assess_seo(**perfect_fields).score == 20


class TestTitleCheck:
    """Test the SEO title length check."""

    @pytest.mark.parametrize("length,passed,severity", [
        (9, False, "critical"),
        (10, False, "warning"),
        (29, False, "warning"),
        (30, True, "warning"),
        (60, True, "warning"),
        (61, False, "warning"),
        (70, False, "warning"),
        (71, False, "critical"),
    ])
    def test_title_length_boundaries(self, length, passed, severity):
        check = assess_seo(seo_title="t" * length).checks[0]

        assert check.passed is passed
        assert check.severity == severity

    def test_falls_back_to_title(self):
        """Test the article title is measured when seo_title is empty."""
        check = assess_seo(title="t" * 40, seo_title="").checks[0]

        assert check.passed
        assert check.label == "SEO title (40/60 chars)"

    def test_seo_title_wins_over_title(self):
        check = assess_seo(title="t" * 40, seo_title="short").checks[0]

        assert not check.passed


class TestMetaDescriptionCheck:
    """Test the meta description length check."""

    def test_just_below_minimum_is_warning(self):
        """Test 119 characters fails with a warning, 120 passes."""
        failing = assess_seo(seo_description="d" * 119).checks[1]
        passing = assess_seo(seo_description="d" * 120).checks[1]

        assert not failing.passed
        assert failing.severity == "warning"
        assert passing.passed

    @pytest.mark.parametrize("length,passed,severity", [
        (49, False, "critical"),
        (50, False, "warning"),
        (160, True, "warning"),
        (161, False, "warning"),
    ])
    def test_description_boundaries(self, length, passed, severity):
        check = assess_seo(seo_description="d" * length).checks[1]

        assert check.passed is passed
        assert check.severity == severity


class TestContentCheck:
    """Test word count check."""

    def test_count_words_ignores_extra_whitespace(self):
        assert count_words("  one\ttwo\n\nthree  ") == 3
        assert count_words("") == 0

    @pytest.mark.parametrize("words,passed,severity", [
        (99, False, "critical"),
        (100, False, "warning"),
        (299, False, "warning"),
        (300, True, "warning"),
    ])
    def test_word_count_boundaries(self, words, passed, severity):
        check = assess_seo(content=" ".join(["w"] * words)).checks[2]

        assert check.passed is passed
        assert check.severity == severity


class TestSlugAndHeadings:
    """Test slug format and heading structure checks."""

    @pytest.mark.parametrize("slug,passed", [
        ("clean-slug-123", True),
        ("", False),
        ("Upper-Case", False),
        ("with space", False),
        ("accentué", False),
    ])
    def test_slug_format(self, slug, passed):
        assert assess_seo(slug=slug).checks[3].passed is passed

    @pytest.mark.parametrize("content,passed", [
        ("<h2>Title</h2>", True),
        ("<H3 class='x'>Title</H3>", True),
        ("<h4>Title</h4>", True),
        ("<h1>Title</h1>", False),
        ("<h5>Title</h5>", False),
        ("no markup", False),
    ])
    def test_heading_detection(self, content, passed):
        assert assess_seo(content=content).checks[4].passed is passed


class TestAssessArticle:
    """Test scoring a whole working article."""

    def test_reads_article_fields(self, perfect_fields):
        article = ArticleForm(**perfect_fields)

        assert assess_article(article).score == 100

    def test_is_pure(self, perfect_fields):
        article = ArticleForm(**perfect_fields)

        assert assess_article(article) == assess_article(article)
