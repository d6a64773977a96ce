# api/services/scripture/reference_parser.py
"""
Scripture reference parser for partially or fully typed input.

Grammar (informal):
    [NumPrefix ]BookWord+ [Chapter[:Verse[-VerseEnd]]] [VersionCode]

Handles:
- Full names and prefixes: "Matthew 3:1", "Mat 3:1", "Gen. 1:1"
- Numbered books: "1 John 1:9", "1john 1:9"
- Verse ranges: "1 John 1:9-10"
- Chapter-only: "Psalms 23"
- Trailing version codes: "John 3:16 NKJV" (unknown codes are passed through)
- Partial input: "Matthew 3:" parses with verse_start=None and no errors
"""

import re

from .book_resolver import resolve_books
from .errors import ErrorKind
from .models import ParsedReference

NUM_PREFIXES = ("1", "2", "3")

_DIGITS = re.compile(r"[0-9]+")
_VERSION_CODE = re.compile(r"[A-Za-z0-9]+")


def is_number(value: str) -> bool:
    """True when `value` is one or more ASCII digits."""
    return _DIGITS.fullmatch(value) is not None


def split_reference(text: str) -> tuple:
    """
    Split input into its book phrase and the tokens after it.

    The book phrase is the first token (the first two when the input starts
    with a bare "1", "2" or "3" and more follows), extended over every
    following token up to the first one starting with a digit.

    Returns:
        (book_phrase, tail_tokens), e.g. "1 John 1:9 KJV" -> ("1 John", ["1:9", "KJV"])
    """
    tokens = text.split()
    if not tokens:
        return "", []

    count = 2 if tokens[0] in NUM_PREFIXES and len(tokens) > 1 else 1
    while count < len(tokens) and not _DIGITS.match(tokens[count]):
        count += 1

    return " ".join(tokens[:count]), tokens[count:]


def _add_error(ref: ParsedReference, kind: ErrorKind):
    if kind not in ref.errors:
        ref.errors.append(kind)


def _number(ref: ParsedReference, value: str):
    """Parse one numeric component; '' means not typed yet."""
    if value == "":
        return None
    if not is_number(value):
        _add_error(ref, ErrorKind.INVALID_NUMBER)
        return None
    return int(value)


def _parse_location(ref: ParsedReference, token: str):
    # "3:16-18" -> chapter 3, verses 16..18
    chapter_str, colon, verse_part = token.partition(":")
    ref.chapter = _number(ref, chapter_str)
    if not colon:
        return

    start_str, dash, end_str = verse_part.partition("-")
    ref.verse_start = _number(ref, start_str)
    if dash:
        ref.verse_end = _number(ref, end_str)
        if ref.verse_end is not None and ref.verse_start is None:
            _add_error(ref, ErrorKind.INVALID_NUMBER)
            ref.verse_end = None


def _check_bounds(ref: ParsedReference):
    if ref.chapter is not None:
        if ref.chapter == 0:
            _add_error(ref, ErrorKind.RANGE_OUT_OF_BOUNDS)
        elif ref.book is not None and 0 < ref.book.chapter_count < ref.chapter:
            _add_error(ref, ErrorKind.RANGE_OUT_OF_BOUNDS)

    if ref.verse_start == 0 or ref.verse_end == 0:
        _add_error(ref, ErrorKind.RANGE_OUT_OF_BOUNDS)

    # Inverted ranges ("3:10-5") are kept as typed and flagged
    if ref.verse_start is not None and ref.verse_end is not None and ref.verse_end < ref.verse_start:
        _add_error(ref, ErrorKind.RANGE_OUT_OF_BOUNDS)


def parse_reference(text: str, books: list) -> ParsedReference:
    """
    Parse a scripture reference string against the known books.

    Never raises: unresolved books and out-of-range numbers are recorded in
    `errors`, components not typed yet are left as None.

    Args:
        text: The reference string, complete or partial
        books: Known Book records (any number of versions)

    Returns:
        ParsedReference
    """
    ref = ParsedReference()
    phrase, tail = split_reference(text)
    if not phrase:
        return ref

    query = phrase.replace(".", "").strip()
    candidates = resolve_books(query, books) if query else []
    if candidates:
        ref.book = candidates[0]
    else:
        _add_error(ref, ErrorKind.REFERENCE_UNRESOLVED)

    if tail:
        _parse_location(ref, tail[0])

    if len(tail) >= 2:
        if _VERSION_CODE.fullmatch(tail[1]):
            ref.version_code = tail[1].upper()
        else:
            _add_error(ref, ErrorKind.UNEXPECTED_TOKEN)

    if len(tail) > 2:
        _add_error(ref, ErrorKind.UNEXPECTED_TOKEN)

    _check_bounds(ref)
    return ref
