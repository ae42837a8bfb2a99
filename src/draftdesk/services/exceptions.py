"""Custom exceptions for Draftdesk services."""


class BufferInvariantError(AssertionError):
    """Raised when a content buffer operation names a field outside the article schema.

    This is a programming error (a widget or generator referring to a field
    the article record does not have), so it fails fast instead of being
    recovered from.

    Attributes:
        field: The offending field name
    """

    def __init__(self, field: str, message: str = "Unknown article field"):
        self.field = field
        self.message = message
        super().__init__(f"{message}: {field!r}")


class SessionClosedError(RuntimeError):
    """Raised when an edit session is used before open() or after close()."""

    def __init__(self, article_id: str | None = None):
        self.article_id = article_id
        super().__init__(f"Edit session is not open (article: {article_id or 'new'})")
