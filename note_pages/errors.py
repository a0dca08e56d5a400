"""Error taxonomy for note resolution and page reading.

Batch-path errors are caught per book/note by the processor and logged.
Read-path errors propagate to the caller, which maps them to a status
with ``note_pages.page_reader.error_status``.
"""

from typing import Optional


class NotePagesError(Exception):
    """Base class for every error raised by this package."""


class PrimaryFileNotFoundError(NotePagesError):
    """No primary file record exists for a book."""

    def __init__(self, book_id: str):
        super().__init__(f"No primary file found for book {book_id}")
        self.book_id = book_id


class ExtractionError(NotePagesError):
    """The PDF could not be opened or parsed."""


class ExtractionTimeoutError(ExtractionError):
    """An extraction call did not finish within its time limit."""


class PageOutOfRangeError(NotePagesError):
    """Requested page index is outside 1..page_count."""

    def __init__(self, page: int, page_count: Optional[int] = None):
        if page_count is None:
            msg = f"Invalid page number: {page}"
        else:
            msg = f"Page {page} exceeds total pages ({page_count})"
        super().__init__(msg)
        self.page = page
        self.page_count = page_count


class PersistenceError(NotePagesError):
    """A note update failed to commit."""
