"""note_pages — resolve highlight notes to PDF pages and read pages as paragraphs."""

__version__ = "0.1.0"

from note_pages.errors import (
    NotePagesError,
    PrimaryFileNotFoundError,
    ExtractionError,
    ExtractionTimeoutError,
    PageOutOfRangeError,
    PersistenceError,
)
from note_pages.normalizer import clean_text_for_search
from note_pages.pdf_parser import extract_all_pages, extract_page_text, run_with_timeout
from note_pages.resolver import UNRESOLVED_PAGE, PageResolution, resolve_page
from note_pages.paragraph_splitter import split_into_paragraphs
from note_pages.db import FileRecord, Note, RecordStore, SQLiteRecordStore, file_path, open_store
from note_pages.note_processor import SweepReport, process_unprocessed_notes
from note_pages.page_reader import PageContent, error_status, read_page
from note_pages.scheduler import PeriodicTask
from note_pages.config import Settings, load_settings

__all__ = [
    "NotePagesError", "PrimaryFileNotFoundError", "ExtractionError",
    "ExtractionTimeoutError", "PageOutOfRangeError", "PersistenceError",
    "clean_text_for_search",
    "extract_all_pages", "extract_page_text", "run_with_timeout",
    "UNRESOLVED_PAGE", "PageResolution", "resolve_page",
    "split_into_paragraphs",
    "FileRecord", "Note", "RecordStore", "SQLiteRecordStore", "file_path", "open_store",
    "SweepReport", "process_unprocessed_notes",
    "PageContent", "error_status", "read_page",
    "PeriodicTask",
    "Settings", "load_settings",
]
