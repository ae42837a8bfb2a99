"""Content buffer manager: owns original, working and draft content of one article."""

from typing import Any, Callable, Mapping, Optional, Union

from draftdesk.models.article import ArticleForm
from draftdesk.models.content_buffer import ContentBuffer
from draftdesk.services.exceptions import BufferInvariantError
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)

BufferObserver = Callable[[ContentBuffer], None]


def _require_field(field: str) -> None:
    if not ArticleForm.has_field(field):
        raise BufferInvariantError(field)


class ContentBufferManager:
    """
    In-memory store for an article's three content representations.

    Every mutation builds a new frozen ContentBuffer and hands it to the
    registered observers. There is no I/O here; saving and syncing are the
    edit session's collaborators' business.
    """

    def __init__(self):
        self._buffer = ContentBuffer()
        self._observers: list[BufferObserver] = []

    @property
    def buffer(self) -> ContentBuffer:
        return self._buffer

    def subscribe(self, observer: BufferObserver) -> Callable[[], None]:
        """
        Register an observer called with each new buffer value.

        Returns:
            Callable that unregisters the observer (safe to call twice)
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, buffer: ContentBuffer, event: str, **details: Any) -> None:
        self._buffer = buffer
        logger.debug(event, draft_fields=sorted(buffer.draft_by_field), **details)
        for observer in list(self._observers):
            observer(buffer)

    def initialize(self, working_seed: Union[ArticleForm, Mapping[str, Any], None] = None) -> ContentBuffer:
        """
        Start a session buffer: empty original, seeded working copy, no drafts.

        Args:
            working_seed: Complete article or partial field mapping (missing fields get defaults)
        """
        if working_seed is None:
            working = ArticleForm()
        elif isinstance(working_seed, ArticleForm):
            working = working_seed
        else:
            for name in working_seed:
                _require_field(name)
            working = ArticleForm.model_validate(dict(working_seed))

        self._publish(ContentBuffer(working=working), "buffer_initialized")
        return self._buffer

    def set_draft(self, field: str, value: str) -> None:
        """Insert or overwrite the pending suggestion for a field. Working is untouched."""
        _require_field(field)
        drafts = dict(self._buffer.draft_by_field)
        drafts[field] = value
        self._publish(
            self._buffer.model_copy(update={"draft_by_field": drafts}),
            "buffer_draft_set",
            field=field,
        )

    def clear_draft(self, field: str) -> None:
        """Remove a field's pending suggestion; no-op when there is none."""
        _require_field(field)
        if field not in self._buffer.draft_by_field:
            return
        drafts = {k: v for k, v in self._buffer.draft_by_field.items() if k != field}
        self._publish(
            self._buffer.model_copy(update={"draft_by_field": drafts}),
            "buffer_draft_cleared",
            field=field,
        )

    def promote(self, field: str, value: Any) -> None:
        """Write an accepted suggestion into the working copy. Callers clear the draft."""
        _require_field(field)
        self._write_working(field, value, "buffer_draft_promoted")

    def update_working(self, field: str, value: Any) -> None:
        """Write a user edit into the working copy."""
        _require_field(field)
        self._write_working(field, value, "buffer_working_updated")

    def replace_working(self, working: ArticleForm) -> None:
        """Swap in a whole working copy (used when reverting to a saved state)."""
        self._publish(self._buffer.model_copy(update={"working": working}), "buffer_working_replaced")

    def refresh_original(self, snapshot: Optional[Mapping[str, Any]]) -> None:
        """Replace the synced baseline after an explicit refetch."""
        snapshot = dict(snapshot or {})
        for name in snapshot:
            _require_field(name)
        self._publish(
            self._buffer.model_copy(update={"original": snapshot}),
            "buffer_original_refreshed",
            fields=sorted(snapshot),
        )

    def _write_working(self, field: str, value: Any, event: str) -> None:
        working = self._buffer.working.with_field(field, value)
        if working == self._buffer.working:
            return
        self._publish(self._buffer.model_copy(update={"working": working}), event, field=field)
