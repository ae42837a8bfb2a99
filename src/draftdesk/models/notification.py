"""Notification model for user-facing toast messages."""

from pydantic import BaseModel, Field
from typing import Literal, Optional


class Notification(BaseModel):
    """A short, human-readable message raised by an editor action."""

    level: Literal["success", "info", "error"] = Field(
        ...,
        description="Visual category of the toast"
    )

    title: str = Field(
        ...,
        description="One-line headline"
    )

    description: Optional[str] = Field(
        default=None,
        description="Optional detail line"
    )

    field: Optional[str] = Field(
        default=None,
        description="Article field the message is about, if any"
    )

    model_config = {"frozen": True}
