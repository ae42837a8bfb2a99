"""SEO scoring: a pure checklist over the working article fields."""

import math
import re

from draftdesk.models.article import ArticleForm
from draftdesk.models.seo import SeoAssessment, SeoCheck


SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
HEADING_PATTERN = re.compile(r"<h[2-4]", re.IGNORECASE)

SEO_TITLE_RANGE = (30, 60)
META_DESCRIPTION_RANGE = (120, 160)
MIN_WORD_COUNT = 300


def count_words(text: str) -> int:
    """Whitespace-separated token count, ignoring empty tokens."""
    return len(text.split())


def _title_check(title: str, seo_title: str) -> SeoCheck:
    length = len(seo_title or title)
    low, high = SEO_TITLE_RANGE
    return SeoCheck(
        label=f"SEO title ({length}/{high} chars)",
        passed=low <= length <= high,
        severity="critical" if length < 10 or length > 70 else "warning",
    )


def _description_check(seo_description: str) -> SeoCheck:
    length = len(seo_description)
    low, high = META_DESCRIPTION_RANGE
    return SeoCheck(
        label=f"Meta description ({length}/{high} chars)",
        passed=low <= length <= high,
        severity="critical" if length < 50 else "warning",
    )


def _content_check(content: str) -> SeoCheck:
    word_count = count_words(content)
    return SeoCheck(
        label=f"Content ({word_count} words)",
        passed=word_count >= MIN_WORD_COUNT,
        severity="critical" if word_count < 100 else "warning",
    )


def _slug_check(slug: str) -> SeoCheck:
    return SeoCheck(
        label="Clean URL slug",
        passed=bool(slug) and SLUG_PATTERN.match(slug) is not None,
        severity="warning",
    )


def _heading_check(content: str) -> SeoCheck:
    return SeoCheck(
        label="Structure (H2/H3 headings)",
        passed=HEADING_PATTERN.search(content) is not None,
        severity="info",
    )


def assess_seo(
    title: str = "",
    seo_title: str = "",
    seo_description: str = "",
    content: str = "",
    slug: str = "",
) -> SeoAssessment:
    """
    Score an article's SEO basics.

    Runs five checks in a fixed order (title length, meta description length,
    word count, slug format, heading structure). The score is the rounded
    percentage of passed checks, halves rounding up.

    Args:
        title: Article title, used when seo_title is empty
        seo_title: Title tag override
        seo_description: Meta description
        content: HTML body
        slug: URL slug

    Returns:
        SeoAssessment with score 0-100 and the ordered checks
    """
    title = title or ""
    content = content or ""
    checks = (
        _title_check(title, seo_title or ""),
        _description_check(seo_description or ""),
        _content_check(content),
        _slug_check(slug or ""),
        _heading_check(content),
    )
    passed = sum(1 for check in checks if check.passed)
    score = math.floor(100 * passed / len(checks) + 0.5)
    return SeoAssessment(score=score, checks=checks)


def assess_article(article: ArticleForm) -> SeoAssessment:
    """Score a working article record."""
    return assess_seo(
        title=article.title,
        seo_title=article.seo_title,
        seo_description=article.seo_description,
        content=article.content,
        slug=article.slug,
    )
