# api/services/scripture/osis_xml.py
"""
Decoder for OSIS XML Bibles.

Two verse encodings are supported:
- Container verses: <verse osisID="Gen.1.1">In the beginning...</verse>
- Milestones: <verse sID="Gen.1.1" osisID="Gen.1.1"/>In the beginning...<verse eID="Gen.1.1"/>

For milestones the text is rebuilt from the sibling nodes that follow the
start marker, up to the matching end marker or the next verse start.
"""

import logging
from typing import Callable, Optional

from .canon import OSIS_BOOK_NAMES, name_from_filename, resolve_version_code
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


def _version_from_header(root: Node, filename: Optional[str], size: int) -> Version:
    work = root.find("work")
    fallback = name_from_filename(filename) or "Bible"

    name = None
    if work is not None:
        name = work.attr("title")
        if not name:
            title = work.find("title")
            name = title.text_content().strip() if title is not None else None
    if not name or name.strip().lower() == "bible":
        name = fallback

    explicit = work.attr("abbreviation", "identifier") if work is not None else None
    if not explicit:
        osis_text = root if root.name == "osistext" else root.find("osisText")
        if osis_text is not None:
            explicit = osis_text.attr("osisIDWork")

    return Version(
        id=version_id_from_name(name),
        name=normalize_space(name),
        code=resolve_version_code(explicit, filename, name),
        size_bytes=size,
    )


def find_book_divs(root: Node) -> list:
    """
    Locate book containers: <div type="book">, else any <div osisID="Gen">
    whose ID is a bare, known OSIS book abbreviation.
    """
    divs = root.find_all("div")
    books = [d for d in divs if d.attr("type") == "book"]
    if books:
        return books
    return [
        d for d in divs
        if d.attr("osisID") and "." not in d.attr("osisID") and d.attr("osisID") in OSIS_BOOK_NAMES
    ]


def is_verse_start(node: Node) -> bool:
    return node.is_element and node.name == "verse" and (node.has_attr("osisID") or node.has_attr("sID"))


def milestone_text(start: Node) -> str:
    """
    Rebuild the text of a milestone verse from the siblings after its start
    marker. Stops at the end marker whose eID matches the start's sID, or at
    the next verse start, whichever comes first.
    """
    sid = start.attr("sID")
    collected = []
    state = "scanning"
    siblings = start.following_siblings()

    while state == "scanning":
        node = next(siblings, None)
        if node is None:
            state = "done"
        elif not node.is_element:
            collected.append(node.text)
        elif is_verse_start(node) or (sid and node.attr("eID") == sid):
            state = "done"
        else:
            collected.append(node.text_content())

    return "".join(collected)


def _verse_text(element: Node) -> str:
    text = element.text_content()
    if not text.strip() and element.has_attr("sID"):
        text = milestone_text(element)
    return normalize_space(text)


def _split_osis_id(osis_id: str):
    """'Gen.1.1' -> (1, 1); anything without book.chapter.verse -> None"""
    # osisID may hold several space-separated IDs; the first one anchors the verse
    parts = osis_id.split()[0].split(".") if osis_id.strip() else []
    if len(parts) < 3:
        return None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None


def decode_osis_xml(
    root: Node,
    filename: Optional[str] = None,
    on_progress: Optional[Callable[[ImportProgress], None]] = None,
    size: int = 0,
) -> DecodedCorpus:
    """
    Decode an OSIS document tree into canonical records.

    Raises:
        UnsupportedDialect: If no book containers are found
    """
    progress = on_progress or (lambda p: None)
    progress(ImportProgress(PARSING, 0))

    version = _version_from_header(root, filename, size)

    book_divs = find_book_divs(root)
    logger.info(f"[OSIS Import] Found {len(book_divs)} books in OSIS file")
    if not book_divs:
        raise UnsupportedDialect("OSIS document contains no book divisions")

    books = []
    verses = []

    for i, book_div in enumerate(book_divs):
        abbreviation = (book_div.attr("osisID") or "").split(".")[0]
        book_name = OSIS_BOOK_NAMES.get(abbreviation, abbreviation)
        book_id = book_id_from_name(book_name)
        max_chapter = 0

        verse_elements = book_div.find_all("verse")
        logger.debug(f"[OSIS Import] Book {book_name} ({abbreviation}): found {len(verse_elements)} verse markers")

        for element in verse_elements:
            location = _split_osis_id(element.attr("osisID", "sID") or "")
            if location is None:
                # End markers and malformed IDs
                continue
            chapter_num, verse_num = location
            max_chapter = max(max_chapter, chapter_num)

            text = _verse_text(element)
            if text:
                verses.append(Verse(
                    version=version.id,
                    book_id=book_id,
                    book_name=book_name,
                    chapter=chapter_num,
                    verse=verse_num,
                    text=text,
                ))

        books.append(Book(
            version=version.id,
            id=book_id,
            name=book_name,
            abbreviation=abbreviation,
            chapter_count=max_chapter,
        ))

        progress(ImportProgress(PARSING, round((i + 1) / len(book_divs) * 100)))

    return DecodedCorpus(version=version, books=books, verses=verses)
