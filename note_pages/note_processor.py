"""Resolve every unprocessed note to the page of its book that contains it.

Each book's PDF is read once per sweep; books are independent and can
be processed on a thread pool.

Building Block: process_unprocessed_notes
    Input Data:  RecordStore, storage root holding the stored PDFs
    Output Data: SweepReport; notes updated to processed=true with a page
    Setup Data:  max_workers, extraction_timeout, max_pages
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from note_pages.db import Note, RecordStore, file_path
from note_pages.errors import ExtractionError, PersistenceError, PrimaryFileNotFoundError
from note_pages.pdf_parser import extract_all_pages, run_with_timeout
from note_pages.resolver import resolve_page

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    matched: int = 0
    unresolved: int = 0
    failed_saves: int = 0
    skipped_books: int = 0
    dropped_notes: int = 0

    def merge(self, other: "SweepReport") -> None:
        self.matched += other.matched
        self.unresolved += other.unresolved
        self.failed_saves += other.failed_saves
        self.skipped_books += other.skipped_books
        self.dropped_notes += other.dropped_notes

    @property
    def processed(self) -> int:
        return self.matched + self.unresolved


def group_notes_by_book(notes: list[Note]) -> tuple[dict[str, list[Note]], int]:
    """Partition notes by book id, preserving fetch order.

    Notes without a book are left out and only counted.
    """
    by_book: dict[str, list[Note]] = {}
    dropped = 0
    for note in notes:
        if not note.book:
            dropped += 1
            continue
        by_book.setdefault(note.book, []).append(note)
    return by_book, dropped


def _process_book(
    store: RecordStore,
    storage_root: Path,
    book_id: str,
    notes: list[Note],
    extraction_timeout: Optional[float],
    max_pages: Optional[int],
) -> SweepReport:
    """Resolve and save one book's pending notes."""
    report = SweepReport()
    try:
        record = store.find_primary_file(book_id)
    except PrimaryFileNotFoundError:
        logger.warning("No PDF found for book %s. Skipping.", book_id)
        report.skipped_books = 1
        return report
    except PersistenceError as exc:
        logger.error("File lookup failed for book %s: %s", book_id, exc)
        report.skipped_books = 1
        return report

    pdf_path = file_path(storage_root, record)
    try:
        book_content = run_with_timeout(
            extract_all_pages, pdf_path, max_pages, timeout=extraction_timeout
        )
    except ExtractionError as exc:
        logger.error("Failed to read PDF for book %s: %s", book_id, exc)
        report.skipped_books = 1
        return report

    for note in notes:
        result = resolve_page(book_content, note.book_text)
        if result.found:
            logger.info("MATCH: Note %s -> Page %d", note.id, result.page)
        else:
            logger.info("FAIL: Could not find text for note %s", note.id)

        try:
            store.save_note_result(note.id, result.stored_page)
        except PersistenceError as exc:
            logger.error("Database save failed for note %s: %s", note.id, exc)
            report.failed_saves += 1
            continue

        if result.found:
            report.matched += 1
        else:
            report.unresolved += 1
    return report


def process_unprocessed_notes(
    store: RecordStore,
    storage_root: Path,
    max_workers: int = 1,
    extraction_timeout: Optional[float] = None,
    max_pages: Optional[int] = None,
) -> SweepReport:
    """One full sweep over every note with processed=false.

    Books with no primary file, or whose PDF cannot be read, are
    skipped and their notes stay unprocessed for the next sweep.
    """
    logger.info("Checking for unprocessed notes...")
    report = SweepReport()
    try:
        notes = store.fetch_unprocessed_notes()
    except PersistenceError as exc:
        logger.error("Error fetching notes: %s", exc)
        return report
    if not notes:
        logger.info("No unprocessed notes found")
        return report

    logger.info("Found %d unprocessed notes", len(notes))
    by_book, report.dropped_notes = group_notes_by_book(notes)
    if report.dropped_notes:
        logger.debug("Ignoring %d notes without a book", report.dropped_notes)

    n_workers = max(1, min(max_workers, len(by_book)))
    logger.info("Processing %d books with %d threads", len(by_book), n_workers)
    with ThreadPoolExecutor(max_workers=n_workers) as pool:
        futures = {
            pool.submit(
                _process_book, store, storage_root, book_id, book_notes,
                extraction_timeout, max_pages,
            ): book_id
            for book_id, book_notes in by_book.items()
        }
        for future in as_completed(futures):
            book_id = futures[future]
            try:
                report.merge(future.result())
            except Exception as exc:
                logger.error("Book %s failed: %s", book_id, exc)
                report.skipped_books += 1

    logger.info(
        "Sweep done: %d matched, %d unresolved, %d failed saves, %d books skipped",
        report.matched, report.unresolved, report.failed_saves, report.skipped_books,
    )
    return report
