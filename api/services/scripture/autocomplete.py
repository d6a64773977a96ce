# api/services/scripture/autocomplete.py
"""
Ranked completion suggestions for a reference being typed.

The input moves through four phases, checked in this order:
book (still typing the name) -> version (past the reference) ->
verse (after "chapter:") -> chapter (after the book name).
"""

import re

from .book_resolver import resolve_books
from .models import BOOK, CHAPTER, VERSE, VERSION, Suggestion
from .reference_parser import NUM_PREFIXES, is_number, split_reference

MAX_BOOK_SUGGESTIONS = 5
VERSE_WINDOW = 5
MAX_CHAPTER_SUGGESTIONS = 5

# "Book Chapter " with exactly one trailing space
_BOOK_CHAPTER_SPACE = re.compile(r"([1-3]?\s*[A-Za-z\s]+)\s+([0-9]+)\s")


def get_smart_transform(text: str) -> str:
    """
    Rewrite "Book Chapter " into "Book Chapter:" to save a keystroke.

    "Matthew 3 " -> "Matthew 3:"
    """
    match = _BOOK_CHAPTER_SPACE.fullmatch(text)
    if match:
        return f"{match.group(1).strip()} {match.group(2)}:"
    return text


def _version_suggestions(text: str, tail: list, versions: list) -> list:
    if len(tail) >= 2:
        # "Gen 6:2 am" -> search "am", keep "Gen 6:2 "
        search = tail[-1].lower()
        prefix = text[:text.rfind(" ") + 1]
    else:
        # "Gen 6:2 " -> every version
        search = ""
        prefix = text

    return [
        Suggestion(text=f"{prefix}{v.code}", type=VERSION, description=v.name)
        for v in versions
        if v.code.lower().startswith(search)
    ]


def _chapter_suggestions(book, typed: int) -> list:
    # "Gen 3" -> 3, then 30..39 while the book has them
    candidates = [c for c in [typed] + [typed * 10 + d for d in range(10)] if c > 0]
    if book.chapter_count:
        candidates = [c for c in candidates if c <= book.chapter_count]
    return [
        Suggestion(text=f"{book.name} {c}", type=CHAPTER)
        for c in candidates[:MAX_CHAPTER_SUGGESTIONS]
    ]


def get_suggestions(text: str, books: list, versions: list) -> list:
    """
    Suggest completions for the current input.

    Args:
        text: Raw, untrimmed input
        books: Known Book records
        versions: Known Version records

    Returns:
        List of Suggestion; empty for empty or whitespace-only input
    """
    text = get_smart_transform(text)
    if not text.strip():
        return []

    text = text.lstrip()
    phrase, tail = split_reference(text)
    trailing_space = text.endswith(" ")
    matched = resolve_books(phrase.replace(".", ""), books)

    # 1. Book: still typing the name, or only a leading "1 "/"2 "/"3 " so far
    if not tail and (not trailing_space or phrase in NUM_PREFIXES):
        return [Suggestion(text=b.name, type=BOOK) for b in matched[:MAX_BOOK_SUGGESTIONS]]

    if not matched:
        return []
    book = matched[0]

    # 2. Version: past the reference
    if len(tail) >= 2 or (tail and trailing_space):
        return _version_suggestions(text, tail, versions)

    ref_part = tail[0] if tail else ""

    # 3. Verse: "chapter:verse"
    if ":" in ref_part:
        chapter_str, _, verse_str = ref_part.partition(":")
        # A range hyphen means the user is finishing the range themselves
        if "-" in verse_str or not is_number(chapter_str):
            return []
        start = int(verse_str) if is_number(verse_str) and int(verse_str) > 0 else 1
        return [
            Suggestion(text=f"{book.name} {int(chapter_str)}:{start + i}", type=VERSE)
            for i in range(VERSE_WINDOW)
        ]

    # 4. Chapter: numeric chapter typed, or the book name just finished
    if ref_part:
        if is_number(ref_part):
            return _chapter_suggestions(book, int(ref_part))
        return []

    if trailing_space:
        return [Suggestion(text=f"{book.name} 1", type=CHAPTER)]

    return []
