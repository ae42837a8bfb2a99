"""In-memory form layer with per-field dirty bookkeeping."""

from typing import Any, Optional

from draftdesk.models.article import ArticleForm
from draftdesk.services.exceptions import BufferInvariantError
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)


class FormState:
    """
    Reference implementation of the FormLayer protocol.

    Keeps the current values plus the default values they started from.
    A field counts as touched while its value differs from its default,
    so typing a change and then restoring the old text clears it again.

    Example:
        >>> form = FormState(ArticleForm(title="Old"))
        >>> form.set_value("title", "New")
        >>> form.touched_fields()
        frozenset({'title'})
    """

    def __init__(self, defaults: Optional[ArticleForm] = None):
        self._defaults = defaults or ArticleForm()
        self._values = self._defaults
        self._touched: set[str] = set()

    def get_value(self, field: str) -> Any:
        if not ArticleForm.has_field(field):
            raise BufferInvariantError(field)
        return getattr(self._values, field)

    def set_value(self, field: str, value: Any, mark_dirty: bool = True) -> None:
        """
        Write one field.

        Args:
            field: Article field name
            value: New value (validated against the field's type)
            mark_dirty: Update touched bookkeeping; False writes silently
        """
        if not ArticleForm.has_field(field):
            raise BufferInvariantError(field)

        self._values = self._values.with_field(field, value)

        if mark_dirty:
            if getattr(self._values, field) == getattr(self._defaults, field):
                self._touched.discard(field)
            else:
                self._touched.add(field)

        logger.debug("form_value_set", field=field, mark_dirty=mark_dirty)

    def get_all_values(self) -> ArticleForm:
        return self._values

    def touched_fields(self) -> frozenset[str]:
        return frozenset(self._touched)

    @property
    def defaults(self) -> ArticleForm:
        return self._defaults

    def reset(self, values: Optional[ArticleForm] = None) -> None:
        """Make ``values`` (or the current defaults) the new baseline and clear touched fields."""
        if values is not None:
            self._defaults = values
        self._values = self._defaults
        self._touched.clear()
