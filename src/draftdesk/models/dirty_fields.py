"""DirtyFieldsSnapshot model: which fields diverged from the last save."""

from typing import Literal

from pydantic import BaseModel, Field


ContentStatus = Literal["synced", "modified", "draft", "conflict"]


class DirtyFieldsSnapshot(BaseModel):
    """Derived view of unsaved and conflicting fields.

    ``draft`` is part of the status vocabulary shared with the storage layer
    but is never produced by the tracker.
    """

    changed_fields: tuple[str, ...] = Field(
        default=(),
        description="Fields whose working value differs from the saved snapshot (schema order)"
    )

    conflict_fields: tuple[str, ...] = Field(
        default=(),
        description="Fields edited locally that also changed remotely since the original was loaded"
    )

    content_status: ContentStatus = Field(
        default="synced",
        description="Coarse status derived from changed and conflict fields"
    )

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflict_fields)

    model_config = {"frozen": True}
