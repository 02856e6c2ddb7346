"""SQLite-backed dictionary store.

Layout:
- ``characters``: one row per ideograph, keyed by its code form, with one
  column per reading field (WITHOUT ROWID, clustered on the key)
- ``postings``: one row per (field, reading, ideograph) so every probe is an
  index seek on the clustered primary key
- ``metadata``: schema version and record count

The store is written once by :class:`SqliteDictionaryWriter` and then opened
read-only by any number of threads through :class:`SqliteDictionaryStore`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
import csv
import logging
import os
from pathlib import Path
import sqlite3
import threading
from uuid import uuid4

from mcpdict_search.adapters.dictionary_repository import (
    AbstractDictionaryRepository,
    DictionaryStoreError,
    index_terms,
)
from mcpdict_search.domain.search import Column, Record
from mcpdict_search.orthography.hanzi import to_code_form
from mcpdict_search.search.sqlite_pragmas import apply_build_pragmas, apply_read_pragmas


logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1"

_RECORD_COLUMNS = tuple(column.value for column in Column)
_RECORD_SELECT = f"SELECT {', '.join(_RECORD_COLUMNS)} FROM characters"
# Stay well below SQLITE_MAX_VARIABLE_NUMBER on older builds
_FETCH_BATCH = 500

_SCHEMA_STATEMENTS = (
    "CREATE TABLE metadata (key TEXT PRIMARY KEY, value TEXT NOT NULL) WITHOUT ROWID",
    "CREATE TABLE characters ("
    + ", ".join(f"{name} TEXT" + (" PRIMARY KEY" if name == Column.UNICODE.value else "") for name in _RECORD_COLUMNS)
    + ") WITHOUT ROWID",
    "CREATE TABLE postings ("
    "field TEXT NOT NULL, term TEXT NOT NULL, unicode TEXT NOT NULL, "
    "PRIMARY KEY (field, term, unicode)) WITHOUT ROWID",
)


def _row_to_record(row: tuple) -> Record:
    values = dict(zip(_RECORD_COLUMNS, row, strict=True))
    return Record(**{key: value for key, value in values.items() if value not in (None, "")})


class SQLiteConnectionPool:
    """Thread-safe pool handing out one read-only connection per thread."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._local = threading.local()
        self._lock = threading.Lock()
        self._connections: list[sqlite3.Connection] = []

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get this thread's connection, opening it on first use."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = self._create_connection()
        yield self._local.connection

    def _create_connection(self) -> sqlite3.Connection:
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        try:
            apply_read_pragmas(conn)
        except sqlite3.Error:
            conn.close()
            raise
        with self._lock:
            self._connections.append(conn)
        return conn

    def close_all(self) -> None:
        """Close every connection handed out by this pool."""
        with self._lock:
            connections, self._connections = self._connections, []
        for conn in connections:
            try:
                conn.close()
            except sqlite3.Error as exc:
                logger.warning("Failed to close SQLite connection for %s: %s", self.db_path, exc)
        self._local = threading.local()


class SqliteDictionaryStore(AbstractDictionaryRepository):
    """Read-only dictionary store over a prebuilt SQLite file."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        if not self.db_path.is_file():
            raise DictionaryStoreError(f"Dictionary store not found: {self.db_path}")
        self._pool = SQLiteConnectionPool(self.db_path)
        self._metadata = self._load_metadata()
        version = self._metadata.get("schema_version")
        if version != SCHEMA_VERSION:
            self.close()
            raise DictionaryStoreError(
                f"Unsupported dictionary schema version {version!r} in {self.db_path} (expected {SCHEMA_VERSION})"
            )

    def _load_metadata(self) -> dict[str, str]:
        try:
            with self._pool.get_connection() as conn:
                return dict(conn.execute("SELECT key, value FROM metadata").fetchall())
        except sqlite3.Error as exc:
            self.close()
            raise DictionaryStoreError(f"Failed to open dictionary store {self.db_path}: {exc}") from exc

    def probe(self, column: Column, term: str) -> list[str]:
        try:
            with self._pool.get_connection() as conn:
                rows = conn.execute(
                    "SELECT unicode FROM postings WHERE field = ? AND term = ?",
                    (column.value, term),
                ).fetchall()
        except sqlite3.Error as exc:
            raise DictionaryStoreError(f"Failed to probe {column.value}={term!r}: {exc}") from exc
        return sorted((row[0] for row in rows), key=lambda code: int(code, 16))

    def fetch(self, codes: Iterable[str]) -> dict[str, Record]:
        wanted = list(dict.fromkeys(codes))
        records: dict[str, Record] = {}
        try:
            with self._pool.get_connection() as conn:
                for offset in range(0, len(wanted), _FETCH_BATCH):
                    batch = wanted[offset : offset + _FETCH_BATCH]
                    placeholders = ", ".join("?" for _ in batch)
                    cursor = conn.execute(f"{_RECORD_SELECT} WHERE unicode IN ({placeholders})", batch)
                    for row in cursor:
                        record = _row_to_record(row)
                        records[record.unicode] = record
        except sqlite3.Error as exc:
            raise DictionaryStoreError(f"Failed to fetch records from {self.db_path}: {exc}") from exc
        return records

    def record_count(self) -> int:
        return int(self._metadata.get("record_count", 0))

    def close(self) -> None:
        self._pool.close_all()

    def __enter__(self) -> SqliteDictionaryStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SqliteDictionaryWriter:
    """Builds a dictionary store file from records."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)

    def build(self, records: Iterable[Record]) -> int:
        """Write all records to a fresh store, replacing any existing file.

        The store is written to a temporary sibling and renamed into place, so
        readers never observe a half-written file. The temporary file is removed
        whenever the build stops before the rename, whatever the error.

        Returns:
            Number of records written

        Raises:
            DictionaryStoreError: SQLite failed while writing
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.db_path.with_name(f".{self.db_path.name}.{uuid4().hex}.tmp")
        conn = None
        renamed = False
        try:
            conn = sqlite3.connect(tmp_path)
            apply_build_pragmas(conn)
            for statement in _SCHEMA_STATEMENTS:
                conn.execute(statement)
            count = self._store_records(conn, records)
            conn.executemany(
                "INSERT INTO metadata (key, value) VALUES (?, ?)",
                [("schema_version", SCHEMA_VERSION), ("record_count", str(count))],
            )
            conn.commit()
            conn.execute("PRAGMA optimize")
            conn.close()
            conn = None
            os.replace(tmp_path, self.db_path)
            renamed = True
        except sqlite3.Error as exc:
            raise DictionaryStoreError(f"Failed to build dictionary store {self.db_path}: {exc}") from exc
        finally:
            if conn is not None:
                try:
                    conn.close()
                except sqlite3.Error as close_error:
                    logger.warning("Failed to close SQLite connection for %s: %s", tmp_path, close_error)
            if not renamed:
                self._discard(tmp_path)

        logger.info("Built dictionary store %s with %d records", self.db_path, count)
        return count

    @staticmethod
    def _discard(tmp_path: Path) -> None:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.warning("Failed to remove partial dictionary store %s: %s", tmp_path, cleanup_error)

    def _store_records(self, conn: sqlite3.Connection, records: Iterable[Record]) -> int:
        placeholders = ", ".join("?" for _ in _RECORD_COLUMNS)
        count = 0
        for record in records:
            conn.execute(
                f"INSERT OR REPLACE INTO characters ({', '.join(_RECORD_COLUMNS)}) VALUES ({placeholders})",
                [record.value(column) for column in Column],
            )
            conn.executemany(
                "INSERT OR IGNORE INTO postings (field, term, unicode) VALUES (?, ?, ?)",
                [(column.value, term, record.unicode) for column in Column for term in index_terms(record, column)],
            )
            count += 1
        return count


def _code_form(value: str) -> str:
    value = value.strip()
    if len(value) == 1:
        return to_code_form(value)
    return value.upper().removeprefix("U+")


def load_records(path: str | Path) -> Iterator[Record]:
    """Read records from a CSV or TSV export with a header row.

    The header names the columns (``unicode``, ``mc``, ``pu``, ...). Unknown
    columns are ignored. The ``unicode`` cell holds either the character itself
    or its hexadecimal code form.
    """
    source = Path(path)
    delimiter = "\t" if source.suffix.lower() in (".tsv", ".tab") else ","
    with source.open(encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle, delimiter=delimiter)
        if not reader.fieldnames or Column.UNICODE.value not in reader.fieldnames:
            raise ValueError(f"{source} has no '{Column.UNICODE.value}' column")
        for line_number, row in enumerate(reader, start=2):
            raw_code = (row.get(Column.UNICODE.value) or "").strip()
            if not raw_code:
                logger.warning("Skipping %s line %d: empty unicode cell", source, line_number)
                continue
            fields = {column.value: (row.get(column.value) or "").strip() or None for column in Column}
            fields[Column.UNICODE.value] = _code_form(raw_code)
            yield Record(**fields)
