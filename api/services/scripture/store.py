# api/services/scripture/store.py
"""
SQLite-backed corpus store.

Implements the persistent store contract the importer and the reference
layer consume: version/book/verse listing, per-version delete, bulk insert,
and a transaction scope spanning one import.
"""

import json
import logging
import threading
from contextlib import contextmanager
from typing import Optional

from utils.db import get_db

from .models import Book, ParsedReference, Verse, Version

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS versions (
    id           TEXT PRIMARY KEY,
    name         TEXT NOT NULL,
    code         TEXT NOT NULL,
    last_updated REAL NOT NULL,
    size_bytes   INTEGER NOT NULL DEFAULT 0,
    extra        TEXT
);

CREATE TABLE IF NOT EXISTS books (
    pk            TEXT PRIMARY KEY,
    version       TEXT NOT NULL,
    id            TEXT NOT NULL,
    name          TEXT NOT NULL,
    abbreviation  TEXT NOT NULL DEFAULT '',
    chapter_count INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_books_version ON books(version);

CREATE TABLE IF NOT EXISTS verses (
    pk        TEXT PRIMARY KEY,
    version   TEXT NOT NULL,
    book_id   TEXT NOT NULL,
    book_name TEXT NOT NULL,
    chapter   INTEGER NOT NULL,
    verse     INTEGER NOT NULL,
    text      TEXT NOT NULL,
    extra     TEXT
);
CREATE INDEX IF NOT EXISTS idx_verses_version ON verses(version);
CREATE INDEX IF NOT EXISTS idx_verses_location ON verses(version, book_id, chapter, verse);
"""


def _version_from_row(row) -> Version:
    return Version(
        id=row["id"],
        name=row["name"],
        code=row["code"],
        last_updated=row["last_updated"],
        size_bytes=row["size_bytes"],
        extra=json.loads(row["extra"]) if row["extra"] else {},
    )


def _book_from_row(row) -> Book:
    return Book(
        version=row["version"],
        id=row["id"],
        name=row["name"],
        abbreviation=row["abbreviation"],
        chapter_count=row["chapter_count"],
    )


def _verse_from_row(row) -> Verse:
    return Verse(
        version=row["version"],
        book_id=row["book_id"],
        book_name=row["book_name"],
        chapter=row["chapter"],
        verse=row["verse"],
        text=row["text"],
        extra=json.loads(row["extra"]) if row["extra"] else {},
    )


class CorpusStore:
    """
    Persistent store for imported versions.

    Usage:
        store = CorpusStore("/path/to/scripture.db")

        with store.transaction():
            store.delete_verses_by_version("kjv")
            store.bulk_insert_verses(verses)

        books = store.list_books()

    Safe to share between threads: every read opens its own connection and
    every transaction holds one connection for its duration. Transactions
    are serialized per store since SQLite allows one writer at a time.
    """

    def __init__(self, path=None):
        self.path = str(path) if path else None
        self._local = threading.local()
        self._write_lock = threading.Lock()
        with self._connection() as conn:
            conn.executescript(SCHEMA)

    @property
    def _txn(self):
        """This thread's open transaction connection, or None."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def _connection(self):
        if self._txn is not None:
            yield self._txn
            return

        conn = get_db(self.path)
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self):
        """
        Group writes into one commit. Nested scopes on the same thread join
        the outermost one; an exception rolls back everything written inside it.
        """
        if self._txn is not None:
            yield self
            return

        with self._write_lock:
            conn = get_db(self.path)
            self._local.conn = conn
            try:
                yield self
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._local.conn = None
                conn.close()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _fetchall(self, sql: str, params=()) -> list:
        with self._connection() as conn:
            return conn.execute(sql, params).fetchall()

    def _fetchone(self, sql: str, params=()):
        with self._connection() as conn:
            return conn.execute(sql, params).fetchone()

    def list_versions(self) -> list:
        rows = self._fetchall("SELECT * FROM versions ORDER BY name")
        return [_version_from_row(r) for r in rows]

    def get_version(self, version_id: str) -> Optional[Version]:
        row = self._fetchone("SELECT * FROM versions WHERE id = ?", (version_id,))
        return _version_from_row(row) if row else None

    def find_version(self, code_or_id: str) -> Optional[Version]:
        """Find a version by display code (case-insensitive), falling back to its id."""
        row = self._fetchone(
            "SELECT * FROM versions WHERE UPPER(code) = UPPER(?) ORDER BY last_updated DESC LIMIT 1",
            (code_or_id,),
        )
        if row:
            return _version_from_row(row)
        return self.get_version(code_or_id)

    def list_books(self, version_id: Optional[str] = None) -> list:
        if version_id:
            rows = self._fetchall(
                "SELECT * FROM books WHERE version = ? ORDER BY rowid", (version_id,)
            )
        else:
            rows = self._fetchall("SELECT * FROM books ORDER BY rowid")
        return [_book_from_row(r) for r in rows]

    def list_verses(self, version_id: str) -> list:
        rows = self._fetchall(
            "SELECT * FROM verses WHERE version = ? ORDER BY rowid", (version_id,)
        )
        return [_verse_from_row(r) for r in rows]

    def count_verses(self, version_id: str) -> int:
        row = self._fetchone(
            "SELECT COUNT(*) FROM verses WHERE version = ?", (version_id,)
        )
        return row[0]

    def get_verse(self, version_id: str, book_id: str, chapter: int, verse: int) -> Optional[Verse]:
        row = self._fetchone(
            "SELECT * FROM verses WHERE pk = ?",
            (f"{version_id}|{book_id}|{chapter}|{verse}",),
        )
        return _verse_from_row(row) if row else None

    def lookup_reference(self, parsed: ParsedReference, version_code: str) -> list:
        """
        Return the verses a parsed reference points at in one version.

        A reference without a verse returns the whole chapter. Incomplete
        references, unknown versions and inverted ranges return [].
        """
        if parsed.book is None or parsed.chapter is None:
            return []

        version = self.find_version(version_code)
        if version is None:
            logger.debug(f"Unknown version for lookup: {version_code}")
            return []

        sql = (
            "SELECT * FROM verses WHERE version = ? AND (book_id = ? OR book_name = ?) "
            "AND chapter = ?"
        )
        params = [version.id, parsed.book.id, parsed.book.name, parsed.chapter]

        if parsed.verse_start is not None:
            end = parsed.verse_end if parsed.verse_end is not None else parsed.verse_start
            if end < parsed.verse_start:
                return []
            sql += " AND verse BETWEEN ? AND ?"
            params += [parsed.verse_start, end]

        rows = self._fetchall(sql + " ORDER BY verse", params)
        return [_verse_from_row(r) for r in rows]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def put_version(self, version: Version):
        with self.transaction():
            self._txn.execute(
                """
                INSERT INTO versions (id, name, code, last_updated, size_bytes, extra)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name         = excluded.name,
                    code         = excluded.code,
                    last_updated = excluded.last_updated,
                    size_bytes   = excluded.size_bytes,
                    extra        = excluded.extra
                """,
                (
                    version.id,
                    version.name,
                    version.code,
                    version.last_updated,
                    version.size_bytes,
                    json.dumps(version.extra) if version.extra else None,
                ),
            )

    def delete_books_by_version(self, version_id: str) -> int:
        with self.transaction():
            cur = self._txn.execute("DELETE FROM books WHERE version = ?", (version_id,))
            return cur.rowcount

    def delete_verses_by_version(self, version_id: str) -> int:
        with self.transaction():
            cur = self._txn.execute("DELETE FROM verses WHERE version = ?", (version_id,))
            return cur.rowcount

    def bulk_insert_books(self, books: list):
        with self.transaction():
            self._txn.executemany(
                """
                INSERT INTO books (pk, version, id, name, abbreviation, chapter_count)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [(b.pk, b.version, b.id, b.name, b.abbreviation, b.chapter_count) for b in books],
            )

    def bulk_insert_verses(self, verses: list):
        with self.transaction():
            self._txn.executemany(
                """
                INSERT INTO verses (pk, version, book_id, book_name, chapter, verse, text, extra)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        v.pk, v.version, v.book_id, v.book_name, v.chapter, v.verse, v.text,
                        json.dumps(v.extra) if v.extra else None,
                    )
                    for v in verses
                ],
            )

    def remove_version(self, version_id: str) -> bool:
        """
        Remove a version with all its books and verses.

        Returns:
            True if removed, False if the version was not stored
        """
        with self.transaction():
            self.delete_books_by_version(version_id)
            self.delete_verses_by_version(version_id)
            cur = self._txn.execute("DELETE FROM versions WHERE id = ?", (version_id,))
        removed = cur.rowcount > 0
        if removed:
            logger.info(f"Removed version {version_id}")
        return removed
