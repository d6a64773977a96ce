# api/services/scripture/input_validator.py
"""
Per-keystroke acceptance for the reference input box.

validate_keystroke is a pure function of (old, new) plus the corpus lists.
It never raises; an invalid keystroke is rejected and the caller keeps
the old value.
"""

import re
from dataclasses import dataclass

from .autocomplete import get_smart_transform
from .book_resolver import match_books, resolve_books
from .reference_parser import is_number, split_reference

ACCEPT = "accept"
REJECT = "reject"
COMPLETE = "complete"

_ALLOWED = re.compile(r"[A-Za-z0-9\s:.-]*")
_VERSE_CHARS = re.compile(r"[0-9-]*")


@dataclass
class KeystrokeDecision:
    """Outcome of one keystroke; `value` is what the input should now show."""
    action: str
    value: str

    @property
    def accepted(self) -> bool:
        return self.action != REJECT

    def to_dict(self) -> dict:
        return {"action": self.action, "value": self.value}


def _tail_ok(tail: list, candidates: list, versions: list) -> bool:
    if len(tail) > 2:
        return False

    chapter_str, _, verse_str = tail[0].partition(":")
    if chapter_str:
        if not is_number(chapter_str) or int(chapter_str) == 0:
            return False
        max_chapters = max((b.chapter_count for b in candidates), default=0)
        if max_chapters > 0 and int(chapter_str) > max_chapters:
            return False

    if not _VERSE_CHARS.fullmatch(verse_str):
        return False

    if len(tail) == 2:
        partial = tail[1].upper()
        if not any(v.code.upper().startswith(partial) for v in versions):
            return False

    return True


def validate_keystroke(old: str, new: str, books: list, versions: list) -> KeystrokeDecision:
    """
    Decide whether the edit old -> new is allowed.

    Args:
        old: Value before the keystroke
        new: Candidate value after the keystroke
        books: Known Book records
        versions: Known Version records

    Returns:
        KeystrokeDecision: accept (value is the possibly transformed input),
        complete (value carries an inline-completed book name) or
        reject (value is `old`)
    """
    if len(new) < len(old):
        return KeystrokeDecision(ACCEPT, new)

    value = get_smart_transform(new)
    rejected = KeystrokeDecision(REJECT, old)

    if not _ALLOWED.fullmatch(value):
        return rejected

    phrase, tail = split_reference(value)
    if not phrase:
        return KeystrokeDecision(ACCEPT, value)

    query = phrase.replace(".", "")
    candidates = match_books(query, books)
    if not candidates:
        return rejected

    if tail and not _tail_ok(tail, candidates, versions):
        return rejected

    # Inline completion once the typed phrase names exactly one book
    if len(new) > len(old) and not tail and not value.endswith(" "):
        names = {b.name for b in resolve_books(query, books)}
        if len(names) == 1:
            completed = f"{names.pop()} "
            if len(completed) > len(value):
                return KeystrokeDecision(COMPLETE, completed)

    return KeystrokeDecision(ACCEPT, value)
