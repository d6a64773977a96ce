# api/services/scripture/book_resolver.py
"""
Prefix matching of book names, ids and abbreviations.

The parser, the suggestion engine and the keystroke validator all decide
"is this a valid partial book?" through these two functions.
"""


def _starts(value, query: str) -> bool:
    return bool(value) and value.lower().startswith(query)


def match_books(query: str, books: list) -> list:
    """
    Return every book whose name, id or abbreviation starts with `query`
    (case-insensitive), in store order, duplicates included.
    """
    q = query.lower()
    return [
        b for b in books
        if _starts(b.name, q) or _starts(b.id, q) or _starts(b.abbreviation, q)
    ]


def resolve_books(query: str, books: list) -> list:
    """
    Return the matching books ranked for display.

    Books whose name starts with the query come first, then the rest
    alphabetically by name. Books sharing a name (one per imported version)
    collapse to the first.
    """
    q = query.lower()
    ranked = sorted(
        match_books(query, books),
        key=lambda b: (not b.name.lower().startswith(q), b.name.lower()),
    )

    seen = set()
    unique = []
    for book in ranked:
        if book.name not in seen:
            seen.add(book.name)
            unique.append(book)
    return unique
