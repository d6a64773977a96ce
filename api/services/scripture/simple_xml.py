# api/services/scripture/simple_xml.py
"""
Decoder for the loosely structured book/chapter/verse XML dialects.

Handles the common variations seen in the wild, with case-insensitive tags:
- <bible><book name="Genesis"><chapter number="1"><verse number="1">...
- <XMLBIBLE><BIBLEBOOK bname="Genesis"><CHAPTER cnumber="1"><VERS vnumber="1">...
- <bible><testament><book number="1"><c n="1"><v n="1">...  (numbered books only)
"""

import logging
from typing import Callable, Optional

from .canon import CANONICAL_BOOKS, file_stem, name_from_filename, resolve_version_code
from .errors import UnsupportedDialect
from .models import (
    PARSING,
    Book,
    DecodedCorpus,
    ImportProgress,
    Verse,
    Version,
    book_id_from_name,
    version_id_from_name,
)
from .xml_tree import Node, normalize_space

logger = logging.getLogger(__name__)

BOOK_TAGS = ("book", "b", "biblebook")
CHAPTER_TAGS = ("chapter", "c")
VERSE_TAGS = ("verse", "v", "vers")


def _to_int(value: Optional[str]) -> int:
    try:
        return int(value or 0)
    except ValueError:
        return 0


def resolve_book_name(node: Node) -> str:
    """
    Name a book element from its attributes, falling back to canonical
    ordering when the source only numbers its books.
    """
    name = node.attr("name", "title", "n", "bname")
    if name:
        return name.strip()

    number = _to_int(node.attr("number", "bnumber"))
    if 1 <= number <= len(CANONICAL_BOOKS):
        return CANONICAL_BOOKS[number - 1]
    return ""


def _inside_book(node: Node) -> bool:
    # <b> used as bold markup inside verse text is not a book
    parent = node.parent
    while parent is not None:
        if parent.name in BOOK_TAGS:
            return True
        parent = parent.parent
    return False


def _version_from_root(root: Node, filename: Optional[str], size: int) -> Version:
    fallback = name_from_filename(filename) or "Bible"
    name = root.attr("name", "title", "n")
    if not name or name.strip().lower() == "bible":
        name = fallback

    code = resolve_version_code(
        root.attr("abbreviation", "shortName", "code"),
        filename,
        name,
    )
    return Version(
        id=version_id_from_name(name),
        name=name.strip(),
        code=code,
        size_bytes=size,
    )


def decode_simple_xml(
    root: Node,
    filename: Optional[str] = None,
    on_progress: Optional[Callable[[ImportProgress], None]] = None,
    size: int = 0,
) -> DecodedCorpus:
    """
    Decode a simple book/chapter/verse XML tree.

    Books whose name cannot be resolved are not emitted as book records,
    but their verses are still decoded.

    Raises:
        UnsupportedDialect: If no book elements are found
    """
    progress = on_progress or (lambda p: None)
    progress(ImportProgress(PARSING, 0))

    version = _version_from_root(root, filename, size)

    book_nodes = [
        n for n in root.iter()
        if n.name in BOOK_TAGS and not _inside_book(n)
    ]
    logger.info(f"[XML Import] Found {len(book_nodes)} books in {file_stem(filename) or 'document'}")
    if not book_nodes:
        raise UnsupportedDialect(f"No book elements found under <{root.tag}>")

    books = []
    verses = []

    for i, book_node in enumerate(book_nodes):
        book_name = resolve_book_name(book_node)
        book_id = book_id_from_name(book_name)
        abbreviation = book_node.attr("abbreviation", "shortName") or ""
        max_chapter = 0

        chapter_nodes = [n for n in book_node.elements() if n.name in CHAPTER_TAGS]
        for chapter_node in chapter_nodes:
            chapter_num = _to_int(chapter_node.attr("number", "n", "cnumber"))
            max_chapter = max(max_chapter, chapter_num)

            for verse_node in chapter_node.elements():
                if verse_node.name not in VERSE_TAGS:
                    continue
                text = normalize_space(verse_node.text_content())
                if not text:
                    continue
                verses.append(Verse(
                    version=version.id,
                    book_id=book_id,
                    book_name=book_name,
                    chapter=chapter_num,
                    verse=_to_int(verse_node.attr("number", "n", "vnumber")),
                    text=text,
                ))

        logger.debug(f"[XML Import] Book {book_name or '?'}: {len(chapter_nodes)} chapters")

        if book_name:
            books.append(Book(
                version=version.id,
                id=book_id,
                name=book_name,
                abbreviation=abbreviation,
                chapter_count=max_chapter,
            ))
        else:
            logger.warning(f"[XML Import] Dropping unnamed book element #{i + 1}")

        progress(ImportProgress(PARSING, round((i + 1) / len(book_nodes) * 100)))

    return DecodedCorpus(version=version, books=books, verses=verses)
