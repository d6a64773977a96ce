# api/services/scripture/canon.py
"""
Static lookup tables for decoding Bible sources.

- CANONICAL_BOOKS: the 66-book Protestant ordering, used when a simple XML
  source only numbers its books
- OSIS_BOOK_NAMES: OSIS book abbreviation -> full name
- KNOWN_VERSION_CODES: version codes recognised inside filenames
"""

import re
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Optional


CANONICAL_BOOKS = (
    # Old Testament
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy",
    "Joshua", "Judges", "Ruth", "1 Samuel", "2 Samuel",
    "1 Kings", "2 Kings", "1 Chronicles", "2 Chronicles", "Ezra",
    "Nehemiah", "Esther", "Job", "Psalms", "Proverbs",
    "Ecclesiastes", "Song of Solomon", "Isaiah", "Jeremiah", "Lamentations",
    "Ezekiel", "Daniel", "Hosea", "Joel", "Amos",
    "Obadiah", "Jonah", "Micah", "Nahum", "Habakkuk",
    "Zephaniah", "Haggai", "Zechariah", "Malachi",
    # New Testament
    "Matthew", "Mark", "Luke", "John", "Acts",
    "Romans", "1 Corinthians", "2 Corinthians", "Galatians", "Ephesians",
    "Philippians", "Colossians", "1 Thessalonians", "2 Thessalonians", "1 Timothy",
    "2 Timothy", "Titus", "Philemon", "Hebrews", "James",
    "1 Peter", "2 Peter", "1 John", "2 John", "3 John",
    "Jude", "Revelation",
)

OSIS_BOOK_NAMES = MappingProxyType({
    # Old Testament
    "Gen": "Genesis", "Exod": "Exodus", "Lev": "Leviticus", "Num": "Numbers",
    "Deut": "Deuteronomy", "Josh": "Joshua", "Judg": "Judges", "Ruth": "Ruth",
    "1Sam": "1 Samuel", "2Sam": "2 Samuel", "1Kgs": "1 Kings", "2Kgs": "2 Kings",
    "1Chr": "1 Chronicles", "2Chr": "2 Chronicles", "Ezra": "Ezra", "Neh": "Nehemiah",
    "Esth": "Esther", "Job": "Job", "Ps": "Psalms", "Prov": "Proverbs",
    "Eccl": "Ecclesiastes", "Song": "Song of Solomon", "Isa": "Isaiah",
    "Jer": "Jeremiah", "Lam": "Lamentations", "Ezek": "Ezekiel", "Dan": "Daniel",
    "Hos": "Hosea", "Joel": "Joel", "Amos": "Amos", "Obad": "Obadiah",
    "Jonah": "Jonah", "Mic": "Micah", "Nah": "Nahum", "Hab": "Habakkuk",
    "Zeph": "Zephaniah", "Hag": "Haggai", "Zech": "Zechariah", "Mal": "Malachi",

    # New Testament
    "Matt": "Matthew", "Mark": "Mark", "Luke": "Luke", "John": "John",
    "Acts": "Acts", "Rom": "Romans", "1Cor": "1 Corinthians", "2Cor": "2 Corinthians",
    "Gal": "Galatians", "Eph": "Ephesians", "Phil": "Philippians", "Col": "Colossians",
    "1Thess": "1 Thessalonians", "2Thess": "2 Thessalonians", "1Tim": "1 Timothy",
    "2Tim": "2 Timothy", "Titus": "Titus", "Phlm": "Philemon", "Heb": "Hebrews",
    "Jas": "James", "1Pet": "1 Peter", "2Pet": "2 Peter", "1John": "1 John",
    "2John": "2 John", "3John": "3 John", "Jude": "Jude", "Rev": "Revelation",
})

KNOWN_VERSION_CODES = (
    # Specific editions
    "NRSVCE", "NRSVUE", "NRSVA", "NRSV", "NKJV", "TNIV", "AMPC", "HCSB",
    "NIrV", "NABRE", "RSVCE", "NASB1995", "NASB95",

    # Base versions
    "KJV", "NIV", "ESV", "NASB", "NLT", "RSV", "AMP", "MSG", "CSB", "NCV",
    "GNT", "GNB", "CEV", "TPT",

    # Modern paraphrases
    "VOICE", "TLB", "PHILLIPS", "MOUNCE",

    # Study & literal versions
    "NET", "ISV", "LEB", "LSB", "WEB", "ASV", "YLT", "DARBY", "AKJV", "KJ21",
    "RV", "ERV", "BBE", "WYC",

    # Catholic & apocrypha versions
    "DRA", "DRB", "CPDV", "NAB", "NCB", "JB", "NJB",

    # Other popular versions
    "GW", "JUB", "MEV", "NOG", "TLV", "CEB", "CJB", "OJB", "EHV", "GNV",
    "ICB", "NLV", "NEB", "REB", "TEV", "NTE",

    # International versions
    "BSB", "BLB", "BRG", "EASY", "EXB",
)

# Longest codes first so "NRSVA" wins over "NRSV" and "RSV"
_CODES_BY_SPECIFICITY = tuple(
    code.upper() for code in sorted(KNOWN_VERSION_CODES, key=len, reverse=True)
)


def file_stem(filename: Optional[str]) -> str:
    """'downloads/NRSVA_bible.xml' -> 'NRSVA_bible'"""
    if not filename:
        return ""
    return PurePosixPath(filename.replace("\\", "/")).name.split(".")[0]


def name_from_filename(filename: Optional[str]) -> str:
    """'King_James-Version.xml' -> 'King James Version'"""
    return re.sub(r"[_-]", " ", file_stem(filename)).strip()


def match_known_code(filename: Optional[str]) -> Optional[str]:
    """Return the most specific known version code contained in the filename."""
    upper = file_stem(filename).upper()
    if not upper:
        return None
    for code in _CODES_BY_SPECIFICITY:
        if code in upper:
            return code
    return None


def resolve_version_code(explicit: Optional[str], filename: Optional[str], name: str) -> str:
    """
    Pick the display code for a version.

    Resolution order: explicit metadata, a known code inside the filename,
    a short (2-5 character) filename used verbatim, then the first three
    characters of the version name.
    """
    if explicit and explicit.strip():
        return explicit.strip().upper()

    found = match_known_code(filename)
    if found:
        return found

    stem = file_stem(filename)
    if 2 <= len(stem) <= 5:
        return stem.upper()

    return name.strip().upper()[:3]
