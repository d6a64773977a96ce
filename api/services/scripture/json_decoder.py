# api/services/scripture/json_decoder.py
"""
Decoder for Bible modules distributed as a JSON document.

Expected shape:
    {
        "version": {"id": "...", "name": "...", "code": "..."},   # optional
        "verses": [{"bookId": "gen", "chapter": 1, "verse": 1, "text": "..."}, ...],
        "books": [{"id": "gen", "name": "Genesis", "chapters": 50}, ...]  # optional
    }

Extra fields on verse rows are carried through untouched.
"""

import json
import logging
from typing import Callable, Optional

from .canon import name_from_filename, resolve_version_code
from .errors import DecodeFailure
from .models import (
    PARSING,
    Book,
    DecodedCorpus,
    ImportProgress,
    Verse,
    Version,
    version_id_from_name,
)

logger = logging.getLogger(__name__)

# Verse row keys consumed into Verse fields; everything else is pass-through
_VERSE_KEYS = {"pk", "version", "bookId", "bookName", "chapter", "verse", "text"}


def _to_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _decode_books(raw_books, version_id: str) -> list:
    books = []
    for entry in raw_books:
        if not isinstance(entry, dict) or not entry.get("id") or not entry.get("name"):
            logger.warning(f"Skipping malformed book record: {entry!r}")
            continue
        books.append(Book(
            version=version_id,
            id=str(entry["id"]),
            name=str(entry["name"]),
            abbreviation=str(entry.get("abbreviation") or ""),
            chapter_count=_to_int(entry.get("chapters", entry.get("chapterCount"))) or 0,
        ))
    return books


def _derive_books(verses: list, version_id: str) -> list:
    """Build book records from verse rows when the document ships none."""
    books = {}
    for v in verses:
        book = books.get(v.book_id)
        if book is None:
            book = books[v.book_id] = Book(
                version=version_id,
                id=v.book_id,
                name=v.book_name or v.book_id,
            )
        book.chapter_count = max(book.chapter_count, v.chapter)
        if not v.book_name:
            v.book_name = book.name
    return list(books.values())


def decode_json(
    content: str,
    filename: Optional[str] = None,
    on_progress: Optional[Callable[[ImportProgress], None]] = None,
) -> DecodedCorpus:
    """
    Decode a JSON Bible document into canonical records.

    Args:
        content: Document text
        filename: Optional filename hint used for naming and code resolution
        on_progress: Optional callable receiving ImportProgress events

    Raises:
        DecodeFailure: Malformed JSON, or `verses` missing / not a list
    """
    progress = on_progress or (lambda p: None)
    progress(ImportProgress(PARSING, 0))

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise DecodeFailure(f"Malformed JSON: {e}")

    if not isinstance(data, dict):
        raise DecodeFailure("JSON document must be an object")

    meta = data.get("version")
    if not isinstance(meta, dict):
        meta = {}

    name = meta.get("name") or name_from_filename(filename) or "Bible"
    version_id = meta.get("id") or version_id_from_name(name)
    code = resolve_version_code(meta.get("code") or meta.get("abbreviation"), filename, name)

    version = Version(
        id=str(version_id),
        name=str(name),
        code=code,
        size_bytes=len(content),
        extra={k: v for k, v in meta.items() if k not in ("id", "name", "code")},
    )

    rows = data.get("verses")
    if not isinstance(rows, list):
        raise DecodeFailure("JSON document has no 'verses' array")

    verses = []
    skipped = 0
    for row in rows:
        if not isinstance(row, dict):
            skipped += 1
            continue
        chapter = _to_int(row.get("chapter"))
        verse_num = _to_int(row.get("verse"))
        text = row.get("text")
        if not row.get("bookId") or chapter is None or verse_num is None or not isinstance(text, str):
            skipped += 1
            continue
        if not text.strip():
            continue
        verses.append(Verse(
            version=version.id,
            book_id=str(row["bookId"]),
            book_name=str(row.get("bookName") or ""),
            chapter=chapter,
            verse=verse_num,
            text=text,
            extra={k: v for k, v in row.items() if k not in _VERSE_KEYS},
        ))

    if skipped:
        logger.warning(f"[JSON Import] Skipped {skipped} malformed verse rows")

    raw_books = data.get("books")
    if isinstance(raw_books, list) and raw_books:
        books = _decode_books(raw_books, version.id)
        names = {b.id: b.name for b in books}
        for v in verses:
            if not v.book_name:
                v.book_name = names.get(v.book_id, v.book_id)
    else:
        books = _derive_books(verses, version.id)

    logger.info(f"[JSON Import] {version.name}: {len(books)} books, {len(verses)} verses")
    progress(ImportProgress(PARSING, 100))
    return DecodedCorpus(version=version, books=books, verses=verses)
