"""Tests for note_pages.page_reader — single page read path."""

from unittest.mock import MagicMock, patch

import pytest

from note_pages.db import FileRecord
from note_pages.errors import (
    ExtractionError,
    ExtractionTimeoutError,
    PageOutOfRangeError,
    PrimaryFileNotFoundError,
)
from note_pages.page_reader import PageContent, error_status, read_page


def test_read_page_returns_paragraphs(store, storage_root, add_book):
    add_book("b1", ["cover", "line one\nline two"])
    content = read_page(store, storage_root, "b1", 2)
    assert content.page == 2
    assert content.content_raw == "line one\nline two"
    assert content.content == ["line one line two"]


def test_to_dict_shape():
    content = PageContent(page=3, content_raw="a\n\nb", content=["a", "b"])
    assert content.to_dict() == {"page": 3, "content": ["a", "b"], "contentRaw": "a\n\nb"}


def test_page_beyond_document(store, storage_root, add_book):
    add_book("b1", ["only page"])
    with pytest.raises(PageOutOfRangeError):
        read_page(store, storage_root, "b1", 2)


def test_invalid_page_checked_before_lookup():
    store = MagicMock()
    with pytest.raises(PageOutOfRangeError):
        read_page(store, "/nowhere", "b1", 0)
    store.find_primary_file.assert_not_called()


def test_missing_primary_file(store, storage_root):
    with pytest.raises(PrimaryFileNotFoundError):
        read_page(store, storage_root, "ghost", 1)


def test_unreadable_file(store, storage_root):
    store.add_file(FileRecord("f1", "files", "b1", "book.pdf"))
    with pytest.raises(ExtractionError):
        read_page(store, storage_root, "b1", 1)


def test_null_content_page_renders_one_empty_paragraph(store, storage_root, add_book):
    add_book("b1", ["text", None])
    content = read_page(store, storage_root, "b1", 2)
    assert content.content_raw == ""
    assert content.content == [""]


def test_timeout_propagates(store, storage_root, add_book):
    add_book("b1", ["text"])
    with patch("note_pages.page_reader.run_with_timeout",
               side_effect=ExtractionTimeoutError("slow")):
        with pytest.raises(ExtractionTimeoutError):
            read_page(store, storage_root, "b1", 1, timeout=0.01)


# ─── error_status ───────────────────────────────────────────────

@pytest.mark.parametrize("exc, status", [
    (PageOutOfRangeError(5, 3), 400),
    (PrimaryFileNotFoundError("b1"), 404),
    (ExtractionError("bad"), 500),
    (ExtractionTimeoutError("slow"), 500),
    (RuntimeError("other"), 500),
])
def test_error_status(exc, status):
    code, message = error_status(exc)
    assert code == status
    assert message


def test_database_error_status():
    from note_pages.errors import PersistenceError

    assert error_status(PersistenceError("locked")) == (500, "Database error")
