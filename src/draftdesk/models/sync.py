"""Publication sync models: status, logs and publish options."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from draftdesk.models.article import PublishPlatform


SyncStatus = Literal["draft", "pending", "syncing", "synced", "failed", "partial"]

# Scheduled publication must leave the backend this much lead time
MIN_SCHEDULE_LEAD = timedelta(minutes=5)

UTC = timezone.utc


class SyncLog(BaseModel):
    """Outcome of one push of the article to one platform."""

    platform: PublishPlatform = Field(..., description="Target platform")
    status: SyncStatus = Field(..., description="Result of the push")
    external_id: Optional[str] = Field(default=None, description="Post ID on the platform")
    external_url: Optional[str] = Field(default=None, description="Public URL on the platform")
    error_message: Optional[str] = Field(default=None, description="Failure details")
    synced_at: Optional[datetime] = Field(default=None)

    model_config = {"frozen": True}


class ConnectedPlatform(BaseModel):
    """A publication target and whether the store is connected to it."""

    platform: PublishPlatform
    connected: bool = False

    model_config = {"frozen": True}


class SyncState(BaseModel):
    """Sync-side view of the article, owned by the sync collaborator."""

    article_status: Optional[str] = Field(
        default=None,
        description="Stored article status (None when the article is not loaded yet)"
    )

    sync_logs: tuple[SyncLog, ...] = Field(default=(), description="Latest push results")

    metadata_sync_status: Optional[str] = Field(
        default=None,
        description="Backend progress marker ('syncing' while a push runs)"
    )

    scheduled_at: Optional[str] = Field(default=None, description="Scheduled publication time")

    is_publishing: bool = Field(default=False)
    is_scheduling: bool = Field(default=False)

    @property
    def sync_status(self) -> SyncStatus:
        return derive_sync_status(self.article_status, self.sync_logs, self.metadata_sync_status)

    @property
    def is_published(self) -> bool:
        return self.article_status in ("published", "publish")

    @property
    def is_scheduled(self) -> bool:
        return self.article_status == "scheduled"

    model_config = {"frozen": True}


def derive_sync_status(
    article_status: Optional[str],
    sync_logs: Iterable[SyncLog] = (),
    metadata_sync_status: Optional[str] = None,
) -> SyncStatus:
    """
    Derive the article's overall sync status.

    Published articles report the combined outcome of their platform pushes;
    otherwise the stored status decides.

    Args:
        article_status: Stored article status ("publish" is WordPress' spelling)
        sync_logs: Latest push results per platform
        metadata_sync_status: Backend progress marker

    Returns:
        One of draft, pending, syncing, synced, failed, partial
    """
    if article_status is None:
        return "draft"

    if article_status in ("published", "publish"):
        statuses = {log.status for log in sync_logs}
        has_failed = "failed" in statuses
        if has_failed and "synced" in statuses:
            return "partial"
        if has_failed:
            return "failed"
        return "synced"

    if article_status == "scheduled":
        return "pending"
    if metadata_sync_status == "syncing":
        return "syncing"

    return "draft"


class PublishOptions(BaseModel):
    """Options for publishing or scheduling an article."""

    mode: Literal["now", "scheduled", "draft"] = Field(..., description="When to publish")
    scheduled_at: Optional[datetime] = Field(default=None, description="Publication time for scheduled mode")
    timezone: str = Field(default="Europe/Paris")
    platforms: list[PublishPlatform] = Field(..., min_length=1, description="Target platforms")
    notify_subscribers: bool = Field(default=False)
    auto_share_social: bool = Field(default=False)

    @model_validator(mode="after")
    def check_schedule(self) -> "PublishOptions":
        """Scheduled mode needs a date, and any date must leave enough lead time."""
        if self.mode == "scheduled" and self.scheduled_at is None:
            raise ValueError("scheduled_at is required when mode is 'scheduled'")

        if self.scheduled_at is not None:
            when = self.scheduled_at
            if when.tzinfo is None:
                when = when.replace(tzinfo=UTC)
            if when <= datetime.now(UTC) + MIN_SCHEDULE_LEAD:
                raise ValueError("scheduled_at must be at least 5 minutes in the future")

        return self

    model_config = {"frozen": True}
