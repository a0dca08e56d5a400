"""Record store for notes and book files.

Provides the RecordStore interface the note processor and page reader
consume, and SQLiteRecordStore, the SQLite-backed implementation.
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from note_pages.errors import PersistenceError, PrimaryFileNotFoundError

DEFAULT_DB_PATH = Path("data") / "notes.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS files (
    id TEXT PRIMARY KEY,
    collection_id TEXT NOT NULL DEFAULT 'files',
    book TEXT NOT NULL,
    filename TEXT NOT NULL,
    primary_file INTEGER DEFAULT 0
);
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    book TEXT NOT NULL DEFAULT '',
    user TEXT NOT NULL DEFAULT '',
    book_text TEXT NOT NULL DEFAULT '',
    note TEXT NOT NULL DEFAULT '',
    processed INTEGER NOT NULL DEFAULT 0,
    page INTEGER,
    created TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_notes_processed ON notes(processed);
CREATE INDEX IF NOT EXISTS idx_files_book ON files(book);
"""


@dataclass(frozen=True)
class FileRecord:
    id: str
    collection_id: str
    book: str
    filename: str
    primary_file: bool = True


@dataclass
class Note:
    id: str
    book: str
    book_text: str
    processed: bool = False
    page: Optional[int] = None
    user: str = ""
    note: str = ""
    created: str = ""


def _row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row["id"],
        book=row["book"],
        book_text=row["book_text"],
        processed=bool(row["processed"]),
        page=row["page"],
        user=row["user"],
        note=row["note"],
        created=row["created"],
    )


def _row_to_file(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        id=row["id"],
        collection_id=row["collection_id"],
        book=row["book"],
        filename=row["filename"],
        primary_file=bool(row["primary_file"]),
    )


def file_path(storage_root: Path, record: FileRecord) -> Path:
    """Location of a stored file: <root>/<collection>/<record id>/<filename>."""
    return Path(storage_root) / record.collection_id / record.id / record.filename


class RecordStore(ABC):
    """Operations the resolver core needs from the record store."""

    @abstractmethod
    def fetch_unprocessed_notes(self) -> list[Note]:
        """All notes with processed=false, newest first."""

    @abstractmethod
    def find_primary_file(self, book_id: str) -> FileRecord:
        """The book's primary file. Raises PrimaryFileNotFoundError."""

    @abstractmethod
    def save_note_result(self, note_id: str, page: int) -> None:
        """Set processed=true and page in one write. Raises PersistenceError."""


class SQLiteRecordStore(RecordStore):
    """SQLite wrapper for notes and files.

    One connection is shared between threads; a lock serializes access.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self._db_path = db_path or DEFAULT_DB_PATH
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

    def create_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self._lock:
            self._conn.executescript(_SCHEMA)
            self._conn.commit()

    def add_file(self, record: FileRecord) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO files VALUES (?,?,?,?,?)",
                (record.id, record.collection_id, record.book,
                 record.filename, 1 if record.primary_file else 0),
            )
            self._conn.commit()

    def add_note(self, note: Note) -> None:
        """Insert a note as the importer would; created defaults to now."""
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO notes "
                "(id, book, user, book_text, note, processed, page, created) "
                "VALUES (?,?,?,?,?,?,?,COALESCE(NULLIF(?, ''), CURRENT_TIMESTAMP))",
                (note.id, note.book, note.user, note.book_text, note.note,
                 1 if note.processed else 0, note.page, note.created),
            )
            self._conn.commit()

    def _query(self, sql: str, params: tuple = (), one: bool = False):
        """Run a read query; sqlite errors surface as PersistenceError."""
        with self._lock:
            try:
                cur = self._conn.execute(sql, params)
                return cur.fetchone() if one else cur.fetchall()
            except sqlite3.Error as exc:
                raise PersistenceError(f"Query failed on {self._db_path}: {exc}") from exc

    def get_note(self, note_id: str) -> Optional[Note]:
        row = self._query("SELECT * FROM notes WHERE id = ?", (note_id,), one=True)
        return _row_to_note(row) if row else None

    def fetch_unprocessed_notes(self) -> list[Note]:
        rows = self._query(
            "SELECT * FROM notes WHERE processed = 0 "
            "ORDER BY created DESC, rowid DESC"
        )
        return [_row_to_note(r) for r in rows]

    def find_primary_file(self, book_id: str) -> FileRecord:
        row = self._query(
            "SELECT * FROM files WHERE book = ? AND primary_file = 1 LIMIT 1",
            (book_id,), one=True,
        )
        if row is None:
            raise PrimaryFileNotFoundError(book_id)
        return _row_to_file(row)

    def save_note_result(self, note_id: str, page: int) -> None:
        with self._lock:
            try:
                with self._conn:
                    cur = self._conn.execute(
                        "UPDATE notes SET processed = 1, page = ? WHERE id = ?",
                        (page, note_id),
                    )
            except sqlite3.Error as exc:
                raise PersistenceError(f"Failed to save note {note_id}: {exc}") from exc
        if cur.rowcount == 0:
            raise PersistenceError(f"Note {note_id} no longer exists")

    def count_unprocessed(self) -> int:
        return self._query(
            "SELECT COUNT(*) FROM notes WHERE processed = 0", one=True
        )[0]

    def close(self) -> None:
        self._conn.close()


def open_store(db_path: Path) -> SQLiteRecordStore:
    """Open (creating if needed) the SQLite store at db_path."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    store = SQLiteRecordStore(db_path)
    store.create_schema()
    return store
