"""SQLite PRAGMA helpers for the dictionary store."""

from __future__ import annotations

import sqlite3


def apply_read_pragmas(
    conn: sqlite3.Connection,
    *,
    cache_size_kb: int = -16384,
    mmap_size_bytes: int = 67108864,
    temp_store: str = "MEMORY",
    busy_timeout_ms: int | None = 5000,
) -> None:
    """Tune a connection that only ever reads the immutable store."""
    if busy_timeout_ms is not None:
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms}")
    conn.execute(f"PRAGMA cache_size = {cache_size_kb}")
    conn.execute(f"PRAGMA mmap_size = {mmap_size_bytes}")
    conn.execute(f"PRAGMA temp_store = {temp_store}")
    conn.execute("PRAGMA query_only = 1")


def apply_build_pragmas(
    conn: sqlite3.Connection,
    *,
    cache_size_kb: int = -65536,
    page_size: int = 4096,
) -> None:
    """Tune a connection that bulk-loads a fresh store file.

    The file is written once and renamed into place, so journaling and fsyncs
    buy nothing; a crash leaves only a temporary file behind.
    """
    conn.execute(f"PRAGMA page_size = {page_size}")
    conn.execute("PRAGMA journal_mode = OFF")
    conn.execute("PRAGMA synchronous = OFF")
    conn.execute(f"PRAGMA cache_size = {cache_size_kb}")
    conn.execute("PRAGMA temp_store = MEMORY")
