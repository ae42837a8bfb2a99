"""Interfaces of the external collaborators an edit session depends on.

The session never implements saving, publishing or text generation itself;
it is handed objects satisfying these protocols.
"""

from typing import Any, Iterable, Optional, Protocol, Sequence

from draftdesk.models.article import ArticleForm
from draftdesk.models.sync import ConnectedPlatform, PublishOptions, SyncState


class FormLayer(Protocol):
    """Field-level read/write surface of the editing widgets."""

    def get_value(self, field: str) -> Any: ...

    def set_value(self, field: str, value: Any, mark_dirty: bool = True) -> None: ...

    def get_all_values(self) -> ArticleForm: ...

    def touched_fields(self) -> frozenset[str]: ...

    def reset(self, values: Optional[ArticleForm] = None) -> None: ...


class AIGenerator(Protocol):
    """Text generation intents. None (or an empty result) means "no suggestion"."""

    async def generate_intro(self, content: str) -> Optional[str]: ...

    async def generate_conclusion(self, content: str) -> Optional[str]: ...

    async def suggest_titles(self, content: str) -> Optional[Sequence[str]]: ...

    async def generate_meta_description(self, title: str, content: str) -> Optional[str]: ...

    async def generate_excerpt(self, content: str) -> Optional[str]: ...


class SaveCollaborator(Protocol):
    """Persists the working copy. Returns the stored article, or None if nothing was saved."""

    async def save_draft(self, working: ArticleForm) -> Optional[dict[str, Any]]: ...

    async def save_and_publish(self, working: ArticleForm) -> Optional[dict[str, Any]]: ...


class SyncCollaborator(Protocol):
    """Pushes the article to publication platforms and reports sync state."""

    @property
    def state(self) -> SyncState: ...

    @property
    def connected_platforms(self) -> Sequence[ConnectedPlatform]: ...

    async def publish_now(self, platforms: Iterable[str]) -> bool: ...

    async def schedule_publish(self, options: PublishOptions) -> bool: ...

    async def retry_sync(self, platform: str) -> bool: ...
