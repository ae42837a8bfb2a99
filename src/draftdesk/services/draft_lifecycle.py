"""Draft suggestion lifecycle: regenerate, accept and reject AI drafts per field.

Per field the states are none -> proposed -> (accepted | rejected) -> none.
A new successful regenerate on a proposed field simply replaces the draft.

Each field carries a generation token. Issuing a regenerate, accepting or
rejecting bumps it; a generation result is only written if the token it was
issued under is still current. This makes concurrent regenerates on one field
last-write-wins and stops a late result from reviving a proposal the user
already dismissed.
"""

from collections import Counter
from typing import Optional

from pydantic import ValidationError

from draftdesk.models.notification import Notification
from draftdesk.models.operation import OperationState
from draftdesk.services.collaborators import FormLayer
from draftdesk.services.content_buffer import ContentBufferManager
from draftdesk.services.exceptions import BufferInvariantError
from draftdesk.services.generators import GeneratorRegistry
from draftdesk.services.notifier import Notifier, RecordingNotifier
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)

# Reported by operation_state() when a field has several actions in flight
_STATE_PRIORITY = (OperationState.ACCEPTING, OperationState.REJECTING, OperationState.REGENERATING)


class DraftSuggestionLifecycle:
    """Creates and resolves pending AI proposals on top of a ContentBufferManager."""

    def __init__(
        self,
        buffer: ContentBufferManager,
        form: FormLayer,
        registry: Optional[GeneratorRegistry] = None,
        notifier: Optional[Notifier] = None,
    ):
        """
        Args:
            buffer: Store holding the drafts and the working copy
            form: Form layer accepted drafts are committed through
            registry: Field generators; None when no AI backend is available
            notifier: Receives user-facing messages (defaults to a RecordingNotifier)
        """
        self._buffer = buffer
        self._form = form
        self._registry = registry
        self._notifier = notifier or RecordingNotifier()

        self._proposals: list[str] = []
        self._proposal_set: set[str] = set()
        self._tokens: dict[str, int] = {}
        self._in_flight: Counter = Counter()
        self.preview_field: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def remaining_proposals(self) -> tuple[str, ...]:
        """Fields with an outstanding suggestion, in the order they were proposed."""
        return tuple(self._proposals)

    def has_proposal(self, field: str) -> bool:
        return field in self._proposal_set

    @property
    def has_ai_backend(self) -> bool:
        return self._registry is not None

    def operation_state(self, field: str) -> OperationState:
        for state in _STATE_PRIORITY:
            if self._in_flight[(field, state)] > 0:
                return state
        return OperationState.IDLE

    def is_field_busy(self, field: str) -> bool:
        return self.operation_state(field) is not OperationState.IDLE

    def _any_in(self, state: OperationState) -> bool:
        return any(count > 0 for (_, s), count in self._in_flight.items() if s is state)

    @property
    def is_accepting(self) -> bool:
        return self._any_in(OperationState.ACCEPTING)

    @property
    def is_rejecting(self) -> bool:
        return self._any_in(OperationState.REJECTING)

    @property
    def is_regenerating(self) -> bool:
        return self._any_in(OperationState.REGENERATING)

    def set_preview_field(self, field: Optional[str]) -> None:
        self.preview_field = field

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _bump_token(self, field: str) -> int:
        self._tokens[field] = self._tokens.get(field, 0) + 1
        return self._tokens[field]

    def _enter(self, field: str, state: OperationState) -> None:
        self._in_flight[(field, state)] += 1

    def _leave(self, field: str, state: OperationState) -> None:
        self._in_flight[(field, state)] -= 1
        if self._in_flight[(field, state)] <= 0:
            del self._in_flight[(field, state)]

    def _add_proposal(self, field: str) -> None:
        if field not in self._proposal_set:
            self._proposal_set.add(field)
            self._proposals.append(field)

    def _drop_proposal(self, field: str) -> bool:
        if field not in self._proposal_set:
            return False
        self._proposal_set.discard(field)
        self._proposals.remove(field)
        return True

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def regenerate(self, field: str) -> Optional[str]:
        """
        Ask the AI backend for a new suggestion for ``field``.

        Unsupported fields, a missing backend and an empty source text are
        no-ops. Generation errors are reported to the notifier and leave all
        state untouched.

        Returns:
            The suggestion that was stored as the field's draft, or None
        """
        if self._registry is None:
            logger.info("draft_regenerate_skipped", field=field, reason="no_ai_backend")
            return None

        generator = self._registry.get(field)
        if generator is None:
            logger.debug("draft_regenerate_skipped", field=field, reason="unsupported_field")
            return None

        article = self._form.get_all_values()
        source_field = self._registry.source_field(field)
        if not str(getattr(article, source_field) or "").strip():
            logger.info("draft_regenerate_skipped", field=field, reason="empty_source", source_field=source_field)
            self._notifier.notify(Notification(
                level="info",
                title="Nothing to generate from",
                description=f'Fill in "{source_field}" first.',
                field=field,
            ))
            return None

        token = self._bump_token(field)
        self._enter(field, OperationState.REGENERATING)
        logger.info("draft_regenerate_started", field=field, token=token)

        try:
            suggestion = await generator(article)
        except BufferInvariantError:
            raise
        except Exception as e:
            if self._tokens.get(field) != token:
                logger.warning("draft_regenerate_stale_failure", field=field, token=token, error=str(e))
                return None
            logger.error("draft_regenerate_failed", field=field, error=str(e), error_type=type(e).__name__)
            self._notifier.notify(Notification(
                level="error",
                title="Error",
                description="Could not generate a new suggestion.",
                field=field,
            ))
            return None
        finally:
            self._leave(field, OperationState.REGENERATING)

        if self._tokens.get(field) != token:
            logger.warning("draft_regenerate_stale_discarded", field=field, token=token, current=self._tokens.get(field))
            return None

        if not suggestion or not suggestion.strip():
            logger.info("draft_regenerate_empty", field=field)
            return None

        self._buffer.set_draft(field, suggestion)
        self._add_proposal(field)
        logger.info("draft_proposed", field=field, length=len(suggestion))
        self._notifier.notify(Notification(
            level="success",
            title="Suggestion generated",
            description="You can accept or reject it.",
            field=field,
        ))
        return suggestion

    async def accept(self, field: str) -> bool:
        """
        Promote the field's pending draft into the working copy.

        The value is committed through the form layer first so its dirty
        bookkeeping sees the change. A field without a draft is a silent no-op.

        Returns:
            True if a draft was accepted
        """
        draft = self._buffer.buffer.draft_for(field)
        if draft is None:
            logger.debug("draft_accept_skipped", field=field, reason="no_draft")
            return False

        self._enter(field, OperationState.ACCEPTING)
        try:
            try:
                self._form.set_value(field, draft, mark_dirty=True)
            except ValidationError as e:
                logger.error("draft_accept_failed", field=field, error=str(e))
                self._notifier.notify(Notification(
                    level="error",
                    title="Error",
                    description="Could not accept the suggestion.",
                    field=field,
                ))
                return False

            self._bump_token(field)
            self._buffer.promote(field, draft)
            self._drop_proposal(field)
            self._buffer.clear_draft(field)
        finally:
            self._leave(field, OperationState.ACCEPTING)

        if self.preview_field == field:
            self.preview_field = None

        logger.info("draft_accepted", field=field)
        self._notifier.notify(Notification(
            level="success",
            title="Suggestion accepted",
            description=f'Field "{field}" was updated.',
            field=field,
        ))
        return True

    async def reject(self, field: str) -> bool:
        """
        Discard the field's pending draft, if any.

        Also invalidates a regenerate still in flight for the field.

        Returns:
            True if a proposal or draft was discarded
        """
        self._enter(field, OperationState.REJECTING)
        try:
            self._bump_token(field)
            had_draft = self._buffer.buffer.has_draft(field)
            dropped = self._drop_proposal(field)
            self._buffer.clear_draft(field)
        finally:
            self._leave(field, OperationState.REJECTING)

        if self.preview_field == field:
            self.preview_field = None

        if not (had_draft or dropped):
            logger.debug("draft_reject_skipped", field=field, reason="no_draft")
            return False

        logger.info("draft_rejected", field=field)
        self._notifier.notify(Notification(level="info", title="Suggestion rejected", field=field))
        return True

    def cancel_all(self) -> tuple[str, ...]:
        """
        Drop every pending proposal and invalidate every regenerate in flight.

        Used when the editor goes away: results that arrive afterwards find
        their token superseded and are discarded.

        Returns:
            The proposals that were dropped
        """
        for field in list(self._tokens):
            self._bump_token(field)

        dropped = tuple(self._proposals)
        for field in set(dropped) | set(self._buffer.buffer.draft_by_field):
            self._buffer.clear_draft(field)
        self._proposals.clear()
        self._proposal_set.clear()
        self.preview_field = None

        if dropped:
            logger.info("draft_proposals_cancelled", fields=list(dropped))
        return dropped
