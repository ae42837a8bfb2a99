"""ArticleForm model: the complete editable field set of one article."""

import re
import unicodedata
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


PublishPlatform = Literal["flowz", "woocommerce", "wordpress"]

ArticleStatus = Literal["draft", "scheduled", "published", "archived"]

ArticleFormat = Literal[
    "standard", "aside", "gallery", "link", "image",
    "quote", "status", "video", "audio", "chat",
]


class ArticleForm(BaseModel):
    """Editable article record.

    Every field carries a neutral default so that a working copy is always
    structurally complete, whatever partial data it was seeded from.
    Length and format constraints belong to submit-time validation on the
    save side, not to this record: a half-typed title is a valid working value.
    """

    # Content
    title: str = Field(default="", description="Article title")
    slug: str = Field(default="", description="URL slug (lowercase, digits, dashes)")
    content: str = Field(default="", description="HTML body")
    excerpt: str = Field(default="", description="Short summary shown in listings")

    # Media
    featured_image_url: str = Field(default="")
    featured_image_alt: str = Field(default="")

    # Organisation
    category: str = Field(default="")
    tags: list[str] = Field(default_factory=list)

    # SEO
    seo_title: str = Field(default="", description="Title tag override (falls back to title)")
    seo_description: str = Field(default="", description="Meta description")
    seo_og_image: str = Field(default="")
    seo_canonical_url: str = Field(default="")
    no_index: bool = Field(default=False)

    # Publication
    status: ArticleStatus = Field(default="draft")
    author_id: Optional[str] = Field(default=None)
    publish_mode: Literal["now", "scheduled", "draft"] = Field(default="draft")
    scheduled_at: Optional[str] = Field(default=None)
    platforms: list[PublishPlatform] = Field(default_factory=lambda: ["flowz"])

    # WordPress settings (from sync)
    comment_status: Literal["open", "closed"] = Field(default="open")
    ping_status: Literal["open", "closed"] = Field(default="closed")
    sticky: bool = Field(default=False)
    format: ArticleFormat = Field(default="standard")
    template: str = Field(default="")

    # Sync data (read-only on the editor side)
    platform_post_id: Optional[str] = Field(default=None)
    link: Optional[str] = Field(default=None)

    # WordPress author
    wp_author_id: Optional[int] = Field(default=None)
    wp_author_name: Optional[str] = Field(default=None)

    model_config = {"frozen": True}

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Names of every field in the article schema, in declaration order."""
        return tuple(cls.model_fields)

    @classmethod
    def has_field(cls, name: str) -> bool:
        return name in cls.model_fields

    def with_field(self, name: str, value: Any) -> "ArticleForm":
        """Return a validated copy with one field replaced."""
        data = self.model_dump()
        data[name] = value
        return type(self).model_validate(data)

    @classmethod
    def from_article(cls, article: Optional[dict[str, Any]] = None) -> "ArticleForm":
        """
        Build editor default values from a stored article record.

        Top-level columns win; WordPress metadata synced into ``custom_fields``,
        ``seo_data``, ``taxonomies`` and ``author`` fills the gaps.

        Args:
            article: Raw article dict as returned by the storage layer (None for a new article)

        Returns:
            Complete ArticleForm
        """
        article = article or {}
        custom_fields = article.get("custom_fields") or {}
        seo_data = article.get("seo_data") or {}
        taxonomies = article.get("taxonomies") or {}
        author = article.get("author") or {}
        embedded = custom_fields.get("_embedded") or {}
        media = (embedded.get("wp:featuredmedia") or [{}])[0] or {}
        embedded_author = (embedded.get("author") or [{}])[0] or {}
        robots = seo_data.get("robots") or {}

        categories = taxonomies.get("categories") or []
        first_category = categories[0].get("name", "") if categories else ""
        taxonomy_tags = [t.get("name") for t in taxonomies.get("tags") or [] if t.get("name")]

        status = article.get("status") or "draft"
        if status not in ("draft", "scheduled", "published", "archived"):
            status = "draft"

        post_id = article.get("platform_post_id")
        if not post_id and custom_fields.get("id") is not None:
            post_id = str(custom_fields["id"])

        return cls(
            title=article.get("title") or "",
            slug=article.get("slug") or "",
            content=article.get("content") or "",
            excerpt=article.get("excerpt") or "",
            featured_image_url=article.get("featured_image_url") or article.get("featured_image") or "",
            featured_image_alt=article.get("featured_image_alt") or media.get("alt_text") or "",
            category=article.get("category") or first_category,
            tags=article.get("tags") or taxonomy_tags,
            seo_title=article.get("seo_title") or seo_data.get("title") or "",
            seo_description=article.get("seo_description") or seo_data.get("description") or "",
            seo_og_image=article.get("seo_og_image") or seo_data.get("og_image") or "",
            seo_canonical_url=article.get("seo_canonical_url") or seo_data.get("canonical") or "",
            no_index=robots.get("index") == "noindex",
            status=status,
            author_id=article.get("author_id"),
            publish_mode="scheduled" if status == "scheduled" else "draft",
            scheduled_at=None,
            platforms=["flowz"],
            comment_status=custom_fields.get("comment_status") or "open",
            ping_status=custom_fields.get("ping_status") or "closed",
            sticky=bool(custom_fields.get("sticky")),
            format=custom_fields.get("format") or "standard",
            template=custom_fields.get("template") or "",
            platform_post_id=post_id,
            link=custom_fields.get("link"),
            wp_author_id=author.get("id") or embedded_author.get("id"),
            wp_author_name=author.get("name") or embedded_author.get("name"),
        )


def generate_slug(title: str) -> str:
    """
    Generate a URL slug from a title.

    Example:
        >>> generate_slug("  Éléphants & Café: le Guide ")
        'elephants-cafe-le-guide'
    """
    slug = unicodedata.normalize("NFD", title.lower())
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9\s-]", "", slug).strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
