"""Edit session: the single read/write surface of the article editor.

An EditSession composes the content buffer, the dirty field tracker, the SEO
scorer and the draft lifecycle for one article, plus the injected save and
sync collaborators. It is created when the editor opens, passed to every
widget, and closed when the editor closes.
"""

from typing import Any, Iterable, Mapping, Optional, Sequence

from draftdesk.models.article import ArticleForm, generate_slug
from draftdesk.models.content_buffer import ContentBuffer
from draftdesk.models.config import EditorConfig
from draftdesk.models.dirty_fields import DirtyFieldsSnapshot
from draftdesk.models.notification import Notification
from draftdesk.models.operation import OperationState
from draftdesk.models.seo import SeoAssessment, SeoCheck
from draftdesk.models.sync import ConnectedPlatform, PublishOptions, SyncStatus
from draftdesk.services.collaborators import AIGenerator, FormLayer, SaveCollaborator, SyncCollaborator
from draftdesk.services.content_buffer import ContentBufferManager
from draftdesk.services.dirty_tracker import compute_dirty_fields
from draftdesk.services.draft_lifecycle import DraftSuggestionLifecycle
from draftdesk.services.exceptions import SessionClosedError
from draftdesk.services.form_state import FormState
from draftdesk.services.generators import GeneratorRegistry, build_default_registry
from draftdesk.services.notifier import Notifier, RecordingNotifier
from draftdesk.services.seo_scoring import assess_article
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)


class DraftActions:
    """Accept / reject / regenerate verbs and their busy flags, as seen by widgets."""

    def __init__(self, session: "EditSession", lifecycle: DraftSuggestionLifecycle):
        self._session = session
        self._lifecycle = lifecycle

    async def handle_accept_field(self, field: str) -> bool:
        self._session._ensure_open()
        return await self._lifecycle.accept(field)

    async def handle_reject_field(self, field: str) -> bool:
        self._session._ensure_open()
        return await self._lifecycle.reject(field)

    async def handle_regenerate_field(self, field: str) -> Optional[str]:
        self._session._ensure_open()
        return await self._lifecycle.regenerate(field)

    @property
    def is_accepting(self) -> bool:
        return self._lifecycle.is_accepting

    @property
    def is_rejecting(self) -> bool:
        return self._lifecycle.is_rejecting

    @property
    def is_regenerating(self) -> bool:
        return self._lifecycle.is_regenerating

    def operation_state(self, field: str) -> OperationState:
        return self._lifecycle.operation_state(field)

    @property
    def preview_field(self) -> Optional[str]:
        return self._lifecycle.preview_field

    def set_preview_field(self, field: Optional[str]) -> None:
        self._lifecycle.set_preview_field(field)


class ArticleSyncView:
    """Read-only sync status plus pass-through publish operations."""

    def __init__(self, sync: SyncCollaborator):
        self._sync = sync

    @property
    def sync_status(self) -> SyncStatus:
        return self._sync.state.sync_status

    @property
    def is_published(self) -> bool:
        return self._sync.state.is_published

    @property
    def is_scheduled(self) -> bool:
        return self._sync.state.is_scheduled

    @property
    def scheduled_at(self) -> Optional[str]:
        return self._sync.state.scheduled_at

    @property
    def is_publishing(self) -> bool:
        return self._sync.state.is_publishing

    @property
    def is_scheduling(self) -> bool:
        return self._sync.state.is_scheduling

    @property
    def connected_platforms(self) -> Sequence[ConnectedPlatform]:
        return self._sync.connected_platforms

    async def publish_now(self, platforms: Iterable[str]) -> bool:
        platforms = list(platforms)
        logger.info("sync_publish_requested", platforms=platforms)
        return await self._sync.publish_now(platforms)

    async def schedule_publish(self, options: PublishOptions) -> bool:
        logger.info("sync_schedule_requested", mode=options.mode, platforms=options.platforms)
        return await self._sync.schedule_publish(options)

    async def retry_sync(self, platform: str) -> bool:
        logger.info("sync_retry_requested", platform=platform)
        return await self._sync.retry_sync(platform)


class EditSession:
    """
    Editing session for one article.

    Example:
        >>> async with EditSession(article=stored, ai=generator, saver=saver) as session:
        ...     session.set_field("title", "A better title")
        ...     await session.draft_actions.handle_regenerate_field("excerpt")
        ...     await session.handle_save()
    """

    def __init__(
        self,
        article: Optional[Mapping[str, Any]] = None,
        article_id: Optional[str] = None,
        form: Optional[FormLayer] = None,
        ai: Optional[AIGenerator] = None,
        registry: Optional[GeneratorRegistry] = None,
        saver: Optional[SaveCollaborator] = None,
        sync: Optional[SyncCollaborator] = None,
        notifier: Optional[Notifier] = None,
        editor: Optional[EditorConfig] = None,
        is_loading: bool = False,
    ):
        """
        Args:
            article: Stored article record (None for a new article)
            article_id: Identifier of the stored article (None for a new article)
            form: Form layer; defaults to a FormState seeded from the article
            ai: AI generator used to build the default generator registry
            registry: Explicit generator registry (takes precedence over ``ai``)
            saver: Save collaborator
            sync: Sync collaborator
            notifier: Receives user-facing messages
            editor: Editor defaults; new articles start with its default platforms
        """
        self.article_id = article_id
        self.article = dict(article) if article is not None else None
        self.is_loading = is_loading

        self.form: FormLayer = form or FormState(self._initial_form(editor))
        self.notifier: Notifier = notifier or RecordingNotifier()
        self._saver = saver
        self._sync = sync

        if registry is None and ai is not None:
            registry = build_default_registry(ai)

        self._buffer = ContentBufferManager()
        self._lifecycle = DraftSuggestionLifecycle(self._buffer, self.form, registry, self.notifier)
        self.draft_actions = DraftActions(self, self._lifecycle)
        self.article_sync = ArticleSyncView(sync) if sync is not None else None

        self.saved_snapshot: Optional[ArticleForm] = None
        self.is_saving = False
        self._remote: Optional[dict[str, Any]] = None
        self._dirty = DirtyFieldsSnapshot()
        self._changed: frozenset[str] = frozenset()
        self._seo: Optional[SeoAssessment] = None
        self._unsubscribe = None
        self._open = False

    def _initial_form(self, editor: Optional[EditorConfig]) -> ArticleForm:
        values = ArticleForm.from_article(self.article)
        if self.article is None and editor is not None:
            values = values.model_copy(update={"platforms": list(editor.default_platforms)})
        return values

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_new(self) -> bool:
        return self.article_id is None

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "EditSession":
        """Seed the buffer from the form and start reacting to buffer changes."""
        if self._open:
            return self
        self._unsubscribe = self._buffer.subscribe(self._on_buffer_change)
        self._open = True
        self._buffer.initialize(self.form.get_all_values())
        logger.info("session_opened", article_id=self.article_id, is_new=self.is_new)
        return self

    def close(self) -> None:
        """
        Stop reacting to changes. Further edits raise SessionClosedError.

        Pending proposals are dropped and regenerates still in flight are
        discarded when they finish.
        """
        if not self._open:
            return
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._open = False
        dropped = self._lifecycle.cancel_all()
        logger.info(
            "session_closed",
            article_id=self.article_id,
            unsaved_fields=list(self._dirty.changed_fields),
            pending_proposals=list(dropped),
        )

    async def __aenter__(self) -> "EditSession":
        return self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if not self._open:
            raise SessionClosedError(self.article_id)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def _on_buffer_change(self, buffer: ContentBuffer) -> None:
        self._recompute(buffer)

    def _recompute(self, buffer: Optional[ContentBuffer] = None) -> None:
        buffer = buffer or self._buffer.buffer
        self._dirty = compute_dirty_fields(
            buffer.working,
            self.saved_snapshot,
            touched_fields=self.form.touched_fields(),
            original=buffer.original,
            remote=self._remote,
        )
        self._changed = frozenset(self._dirty.changed_fields)
        self._seo = assess_article(buffer.working)

    @property
    def content_buffer(self) -> ContentBuffer:
        return self._buffer.buffer

    @property
    def working(self) -> ArticleForm:
        return self._buffer.buffer.working

    @property
    def dirty_fields(self) -> DirtyFieldsSnapshot:
        return self._dirty

    @property
    def seo_assessment(self) -> SeoAssessment:
        if self._seo is None:
            self._seo = assess_article(self.working)
        return self._seo

    @property
    def seo_score(self) -> int:
        return self.seo_assessment.score

    @property
    def seo_checks(self) -> tuple[SeoCheck, ...]:
        return self.seo_assessment.checks

    @property
    def remaining_proposals(self) -> tuple[str, ...]:
        return self._lifecycle.remaining_proposals

    def is_field_modified(self, name: str) -> bool:
        return name in self._changed

    def is_field_with_draft(self, name: str) -> bool:
        return self._lifecycle.has_proposal(name)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_field(self, field: str, value: Any) -> None:
        """Apply a user edit to the form and the working copy."""
        self._ensure_open()
        self.form.set_value(field, value, mark_dirty=True)
        self._buffer.update_working(field, self.form.get_value(field))

    def generate_slug_from_title(self) -> Optional[str]:
        """Derive the slug from the current title; no-op when the title is empty."""
        self._ensure_open()
        title = self.working.title
        if not title:
            return None
        slug = generate_slug(title)
        self.set_field("slug", slug)
        return slug

    def set_saved_snapshot(self, snapshot: Optional[ArticleForm]) -> None:
        self.saved_snapshot = snapshot
        self._recompute()

    def reset_modified_fields(self) -> None:
        """Revert the working copy to the last save (or to the loaded article)."""
        self._ensure_open()
        self.form.reset(self.saved_snapshot)
        self._buffer.replace_working(self.form.get_all_values())
        logger.info("session_fields_reset", article_id=self.article_id)

    def refetch_original(self, remote: Mapping[str, Any]) -> DirtyFieldsSnapshot:
        """
        Record a fresh fetch from the authoritative source.

        ``remote`` is a stored article record; it is mapped onto the editor
        fields the same way the session's defaults are. The first fetch
        becomes the baseline. Later fetches are compared with it to flag
        fields that changed remotely while they were edited locally; once
        reviewed, ``acknowledge_remote`` adopts the fetch as the new baseline.
        """
        self._ensure_open()
        remote = ArticleForm.from_article(dict(remote)).model_dump()
        if not self.content_buffer.original:
            self._remote = None
            self._buffer.refresh_original(remote)
        else:
            self._remote = remote
            self._recompute()

        if self._dirty.has_conflict:
            logger.warning("session_conflict_detected", fields=list(self._dirty.conflict_fields))
        return self._dirty

    def acknowledge_remote(self) -> None:
        """Adopt the last remote fetch as the new original baseline."""
        self._ensure_open()
        if self._remote is None:
            return
        remote, self._remote = self._remote, None
        self._buffer.refresh_original(remote)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def handle_save(self, publish: bool = False) -> bool:
        """
        Forward the working copy to the save collaborator.

        On success the saved snapshot advances to exactly the value that was
        sent. Edits typed while the save was in flight differ from it and stay
        dirty.

        Args:
            publish: Use save_and_publish instead of save_draft

        Returns:
            True if the collaborator reported a stored article
        """
        self._ensure_open()
        if self._saver is None:
            logger.warning("session_save_skipped", reason="no_save_collaborator")
            return False

        working = self.working
        self.is_saving = True
        logger.info("session_save_started", article_id=self.article_id, publish=publish)
        try:
            if publish:
                saved = await self._saver.save_and_publish(working)
            else:
                saved = await self._saver.save_draft(working)
        except Exception as e:
            logger.error("session_save_failed", article_id=self.article_id, error=str(e))
            self.notifier.notify(Notification(
                level="error",
                title="Save failed",
                description=str(e) or type(e).__name__,
            ))
            return False
        finally:
            self.is_saving = False

        if saved is None:
            logger.warning("session_save_empty", article_id=self.article_id)
            self.notifier.notify(Notification(level="error", title="Save failed"))
            return False

        if self.article_id is None and saved.get("id") is not None:
            self.article_id = str(saved["id"])
        self.article = dict(saved)
        self.set_saved_snapshot(working)
        logger.info("session_save_completed", article_id=self.article_id)
        return True
