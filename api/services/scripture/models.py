# api/services/scripture/models.py
"""
Canonical record shapes shared by the decoders, the importer and the
reference layer.

Every decoder converges on Version / Book / Verse before anything is written,
and the parser hands back a ParsedReference that lookup consumes directly.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Optional

from .errors import ErrorKind


# Suggestion types
BOOK = "book"
CHAPTER = "chapter"
VERSE = "verse"
VERSION = "version"

# Import phases, in the order a caller sees them
DOWNLOADING = "downloading"
UNZIPPING = "unzipping"
PARSING = "parsing"
IMPORTING = "importing"


def version_id_from_name(name: str) -> str:
    """'King James Version' -> 'king-james-version'"""
    return re.sub(r"\s+", "-", name.strip().lower())


def book_id_from_name(name: str) -> str:
    """'1 Thessalonians' -> '1thessal' (lowercased, no spaces, 8 chars max)."""
    return re.sub(r"\s+", "", name.lower())[:8]


@dataclass
class Version:
    """
    One imported translation.

    Attributes:
        id: Stable identifier; re-importing the same id replaces the version
        name: Display name (e.g., "New King James Version")
        code: Short display token (e.g., "NKJV")
        last_updated: Epoch seconds of the import
        size_bytes: Size of the decoded source document
        extra: Pass-through metadata from the source document
    """
    id: str
    name: str
    code: str
    last_updated: float = field(default_factory=time.time)
    size_bytes: int = 0
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "last_updated": self.last_updated,
            "size_bytes": self.size_bytes,
            **({"extra": self.extra} if self.extra else {}),
        }


@dataclass
class Book:
    """A book of one version. `chapter_count` is the highest chapter seen while decoding."""
    version: str
    id: str
    name: str
    abbreviation: str = ""
    chapter_count: int = 0

    @property
    def pk(self) -> str:
        return f"{self.version}|{self.id}"

    def to_dict(self) -> dict:
        return {
            "pk": self.pk,
            "version": self.version,
            "id": self.id,
            "name": self.name,
            "abbreviation": self.abbreviation,
            "chapter_count": self.chapter_count,
        }


@dataclass
class Verse:
    """A single verse, unique within its version by (book_id, chapter, verse)."""
    version: str
    book_id: str
    book_name: str
    chapter: int
    verse: int
    text: str
    extra: dict = field(default_factory=dict)

    @property
    def pk(self) -> str:
        return f"{self.version}|{self.book_id}|{self.chapter}|{self.verse}"

    def to_dict(self) -> dict:
        return {
            "pk": self.pk,
            "version": self.version,
            "book_id": self.book_id,
            "book_name": self.book_name,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
            **self.extra,
        }


@dataclass
class DecodedCorpus:
    """The output of any dialect decoder: one version and its records."""
    version: Version
    books: list
    verses: list


@dataclass
class ImportProgress:
    """Progress event emitted at each phase boundary and per import batch."""
    phase: str
    percent: int

    def to_dict(self) -> dict:
        return {"phase": self.phase, "percent": self.percent}


@dataclass
class ParsedReference:
    """
    A possibly incomplete scripture reference.

    Components that have not been typed yet are None; `errors` only records
    components that were typed but are out of range or unresolved.
    """
    book: Optional[Book] = None
    chapter: Optional[int] = None
    verse_start: Optional[int] = None
    verse_end: Optional[int] = None
    version_code: Optional[str] = None
    errors: list = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True when a lookup can be attempted."""
        return self.book is not None and self.chapter is not None and not self.errors

    @property
    def normalized(self) -> str:
        """Return normalized reference string, e.g. '1 John 1:9-10 NKJV'."""
        if self.book is None:
            return ""
        ref = self.book.name
        if self.chapter is not None:
            ref += f" {self.chapter}"
            if self.verse_start is not None:
                ref += f":{self.verse_start}"
                if self.verse_end is not None:
                    ref += f"-{self.verse_end}"
        if self.version_code:
            ref += f" {self.version_code}"
        return ref

    def to_dict(self) -> dict:
        return {
            "book": self.book.to_dict() if self.book else None,
            "chapter": self.chapter,
            "verse_start": self.verse_start,
            "verse_end": self.verse_end,
            "version_code": self.version_code,
            "errors": [e.value if isinstance(e, ErrorKind) else e for e in self.errors],
            "normalized": self.normalized,
        }


@dataclass
class Suggestion:
    """An autocomplete candidate of type book, chapter, verse or version."""
    text: str
    type: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"text": self.text, "type": self.type}
        if self.description:
            result["description"] = self.description
        return result
