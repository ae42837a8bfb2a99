"""Dirty field tracking: diff the working copy against the last save."""

from typing import Any, Iterable, Mapping, Optional

from draftdesk.models.article import ArticleForm
from draftdesk.models.dirty_fields import DirtyFieldsSnapshot


def changed_fields(working: ArticleForm, saved_snapshot: ArticleForm) -> tuple[str, ...]:
    """Fields whose working value differs from the snapshot, in schema order."""
    return tuple(
        name for name in ArticleForm.field_names()
        if getattr(working, name) != getattr(saved_snapshot, name)
    )


def conflicting_fields(
    working: ArticleForm,
    original: Mapping[str, Any],
    remote: Optional[Mapping[str, Any]],
) -> tuple[str, ...]:
    """
    Three-way conflict detection.

    A field conflicts when the latest remote value moved away from the
    original baseline, the working value also moved away from the baseline,
    and the two edits disagree. Fields absent from the baseline or from the
    remote fetch cannot conflict.
    """
    if not remote:
        return ()

    conflicts = []
    for name in ArticleForm.field_names():
        if name not in original or name not in remote:
            continue
        base = original[name]
        theirs = remote[name]
        ours = getattr(working, name)
        if theirs != base and ours != base and ours != theirs:
            conflicts.append(name)
    return tuple(conflicts)


def compute_dirty_fields(
    working: ArticleForm,
    saved_snapshot: Optional[ArticleForm],
    touched_fields: Iterable[str] = (),
    original: Optional[Mapping[str, Any]] = None,
    remote: Optional[Mapping[str, Any]] = None,
) -> DirtyFieldsSnapshot:
    """
    Derive the dirty-fields snapshot for the current working copy.

    Before the first save there is no snapshot; the form layer's own touched
    bookkeeping is used instead.

    Args:
        working: Current working article
        saved_snapshot: Working value as of the last successful save, or None
        touched_fields: Form layer's touched field names (fallback only)
        original: Baseline last synced from the authoritative source
        remote: Freshly fetched remote values, for conflict detection

    Returns:
        DirtyFieldsSnapshot
    """
    if saved_snapshot is not None:
        changed = changed_fields(working, saved_snapshot)
    else:
        touched = set(touched_fields)
        changed = tuple(name for name in ArticleForm.field_names() if name in touched)

    conflicts = conflicting_fields(working, original or {}, remote)

    if conflicts:
        status = "conflict"
    elif changed:
        status = "modified"
    else:
        status = "synced"

    return DirtyFieldsSnapshot(
        changed_fields=changed,
        conflict_fields=conflicts,
        content_status=status,
    )
