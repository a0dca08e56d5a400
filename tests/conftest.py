"""Shared fixtures: minimal real PDFs and a seeded SQLite record store."""

from pathlib import Path
from typing import Optional

import pytest

from note_pages.db import FileRecord, Note, SQLiteRecordStore


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[Optional[str]]) -> bytes:
    """Build a PDF with one Helvetica text line per input line.

    A None entry produces a page without a /Contents stream.
    """
    objects: list[bytes] = []
    n_pages = len(pages)
    # 1 catalog, 2 page tree, 3 font, then (page, content) pairs
    page_ids = []
    next_id = 4
    page_objs = []
    for text in pages:
        page_id = next_id
        next_id += 1
        content_id = None
        if text is not None:
            content_id = next_id
            next_id += 1
        page_ids.append(page_id)
        page_objs.append((page_id, content_id, text))

    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    objects.append(f"<< /Type /Pages /Kids [{kids}] /Count {n_pages} >>".encode())
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    for page_id, content_id, text in page_objs:
        page = ("<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >>")
        if content_id is not None:
            page += f" /Contents {content_id} 0 R"
        objects.append((page + " >>").encode())
        if content_id is not None:
            ops = ["BT", "/F1 12 Tf", "72 720 Td", "14 TL"]
            for line in text.split("\n"):
                ops.append(f"({_escape(line)}) Tj T*")
            ops.append("ET")
            stream = "\n".join(ops).encode("latin-1")
            objects.append(
                f"<< /Length {len(stream)} >>\nstream\n".encode()
                + stream + b"\nendstream"
            )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += f"{off:010d} 00000 n \n".encode()
    out += (f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
            f"startxref\n{xref_at}\n%%EOF\n").encode()
    return bytes(out)


@pytest.fixture
def make_pdf(tmp_path):
    """Factory: make_pdf(pages, path=None) -> Path of a written PDF."""
    def _make(pages: list[Optional[str]], path: Optional[Path] = None) -> Path:
        path = path or tmp_path / "book.pdf"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_pdf(pages))
        return path
    return _make


@pytest.fixture
def store(tmp_path):
    s = SQLiteRecordStore(tmp_path / "notes.db")
    s.create_schema()
    yield s
    s.close()


@pytest.fixture
def storage_root(tmp_path):
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def add_book(store, storage_root, make_pdf):
    """Register a primary file for book_id and write its PDF into storage."""
    def _add(book_id: str, pages: list[Optional[str]]) -> FileRecord:
        record = FileRecord(id=f"file_{book_id}", collection_id="files",
                            book=book_id, filename="book.pdf", primary_file=True)
        store.add_file(record)
        make_pdf(pages, storage_root / "files" / record.id / "book.pdf")
        return record
    return _add


@pytest.fixture
def add_note(store):
    def _add(note_id: str, book: str, text: str, created: str = "") -> Note:
        note = Note(id=note_id, book=book, book_text=text, created=created)
        store.add_note(note)
        return note
    return _add
