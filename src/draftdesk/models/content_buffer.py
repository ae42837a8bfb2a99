"""ContentBuffer model: the three content representations of one article."""

from typing import Any

from pydantic import BaseModel, Field

from draftdesk.models.article import ArticleForm


class ContentBuffer(BaseModel):
    """Immutable snapshot of an article's original, working and draft content.

    Observers of the buffer manager receive a fresh instance on every change,
    never a reference that is later mutated. Field names in ``original`` and
    ``draft_by_field`` are checked against the article schema by the manager
    before a buffer is built.
    """

    original: dict[str, Any] = Field(
        default_factory=dict,
        description="Fields as last confirmed synced from the authoritative source (partial)"
    )

    working: ArticleForm = Field(
        default_factory=ArticleForm,
        description="Complete, currently edited field set (what will be saved)"
    )

    draft_by_field: dict[str, str] = Field(
        default_factory=dict,
        description="Pending AI-generated replacement per field"
    )

    def has_draft(self, field: str) -> bool:
        return field in self.draft_by_field

    def draft_for(self, field: str) -> str | None:
        return self.draft_by_field.get(field)

    model_config = {"frozen": True}
