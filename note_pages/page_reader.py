"""Read one page of a book as display paragraphs.

Building Block: read_page
    Input Data:  RecordStore, storage root, book id, 1-based page number
    Output Data: PageContent (page, paragraphs, raw text)
    Setup Data:  optional extraction timeout
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from note_pages.db import RecordStore, file_path
from note_pages.errors import (
    ExtractionError,
    PageOutOfRangeError,
    PersistenceError,
    PrimaryFileNotFoundError,
)
from note_pages.paragraph_splitter import split_into_paragraphs
from note_pages.pdf_parser import extract_page_text, run_with_timeout

logger = logging.getLogger(__name__)


@dataclass
class PageContent:
    page: int
    content_raw: str
    content: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON body in the shape the reader UI expects."""
        return {
            "page": self.page,
            "content": self.content,
            "contentRaw": self.content_raw,
        }


def read_page(
    store: RecordStore,
    storage_root: Path,
    book_id: str,
    page: int,
    timeout: Optional[float] = None,
) -> PageContent:
    """Extract and segment a single page of the book's primary file.

    Raises PageOutOfRangeError, PrimaryFileNotFoundError or
    ExtractionError; each maps to its own status via error_status().
    """
    if page < 1:
        raise PageOutOfRangeError(page)

    record = store.find_primary_file(book_id)
    pdf_path = file_path(storage_root, record)
    try:
        raw = run_with_timeout(extract_page_text, pdf_path, page, timeout=timeout)
    except ExtractionError as exc:
        logger.error("Failed to extract page %d of book %s: %s", page, book_id, exc)
        raise

    return PageContent(page=page, content_raw=raw, content=split_into_paragraphs(raw))


def error_status(exc: Exception) -> tuple[int, str]:
    """HTTP status and message for a read_page failure."""
    if isinstance(exc, PageOutOfRangeError):
        return 400, "Invalid page number"
    if isinstance(exc, PrimaryFileNotFoundError):
        return 404, "Book file not found"
    if isinstance(exc, ExtractionError):
        return 500, "Failed to extract PDF content"
    if isinstance(exc, PersistenceError):
        return 500, "Database error"
    return 500, "Internal error"
