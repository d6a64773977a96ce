# api/tests/test_autocomplete.py
"""
Tests for autocomplete.py - suggestion phases and the smart transform.
"""

import os
import sys

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.scripture.autocomplete import get_smart_transform, get_suggestions
from services.scripture.models import Version

from test_reference_parser import BOOKS


VERSIONS = [
    Version(id="nkjv", name="New King James Version", code="NKJV"),
    Version(id="kjv", name="King James Version", code="KJV"),
    Version(id="niv", name="New International Version", code="NIV"),
]


def texts(suggestions) -> list:
    return [s.text for s in suggestions]


def test_smart_transform():
    """Test "Book Chapter " -> "Book Chapter:"."""
    print("\n=== Testing smart transform ===")

    assert get_smart_transform("Matthew 3 ") == "Matthew 3:"
    assert get_smart_transform("1 John 1 ") == "1 John 1:"
    assert get_smart_transform("Song of Solomon 2 ") == "Song of Solomon 2:"
    print("✓ Trailing space after chapter becomes a colon")

    assert get_smart_transform("Matthew 3") == "Matthew 3"
    assert get_smart_transform("Matthew ") == "Matthew "
    assert get_smart_transform("John 3:16 ") == "John 3:16 "
    print("✓ Other input left untouched")

    print("Smart transform: All tests passed!")


def test_book_phase():
    """Test suggestions while the book name is being typed."""
    print("\n=== Testing book phase ===")

    suggestions = get_suggestions("Mat", BOOKS, [])
    assert texts(suggestions) == ["Matthew"]
    assert suggestions[0].type == "book"
    print("✓ Mat -> Matthew")

    assert texts(get_suggestions("Apoc", BOOKS, [])) == ["Apocalypse of Baruch", "Revelation"]
    print("✓ Name-prefix matches before other matches")

    assert texts(get_suggestions("J", BOOKS, [])) == ["Job", "Joel", "John", "Jonah", "Joshua"]
    print("✓ At most five books")

    assert get_suggestions("", BOOKS, VERSIONS) == []
    assert get_suggestions("   ", BOOKS, VERSIONS) == []
    print("✓ Empty input suggests nothing")

    assert get_suggestions("Hezekiah", BOOKS, VERSIONS) == []
    print("✓ Unknown book suggests nothing")

    print("Book phase: All tests passed!")


def test_chapter_phase():
    """Test chapter suggestions."""
    print("\n=== Testing chapter phase ===")

    suggestions = get_suggestions("Matthew ", BOOKS, VERSIONS)
    assert texts(suggestions) == ["Matthew 1"]
    assert suggestions[0].type == "chapter"
    print("✓ Finished book name suggests chapter 1")

    assert texts(get_suggestions("Matthew 2", BOOKS, VERSIONS)) == [
        "Matthew 2", "Matthew 20", "Matthew 21", "Matthew 22", "Matthew 23",
    ]
    print("✓ Typed chapter extended by one digit")

    assert texts(get_suggestions("Mark 1", BOOKS, VERSIONS)) == [
        "Mark 1", "Mark 10", "Mark 11", "Mark 12", "Mark 13",
    ]
    assert texts(get_suggestions("Joel 3", BOOKS, VERSIONS)) == ["Joel 3"]
    print("✓ Chapters limited to the book's chapter count")

    assert texts(get_suggestions("Mat 5", BOOKS, VERSIONS))[0] == "Matthew 5"
    print("✓ Abbreviated book expanded")

    print("Chapter phase: All tests passed!")


def test_verse_phase():
    """Test verse suggestions."""
    print("\n=== Testing verse phase ===")

    suggestions = get_suggestions("Matthew 3:", BOOKS, VERSIONS)
    assert texts(suggestions) == [f"Matthew 3:{n}" for n in range(1, 6)]
    assert suggestions[0].type == "verse"
    print("✓ Colon suggests verses from 1")

    assert texts(get_suggestions("Matthew 3:4", BOOKS, VERSIONS)) == [
        f"Matthew 3:{n}" for n in range(4, 9)
    ]
    print("✓ Typed verse starts the window")

    assert texts(get_suggestions("Matthew 3 ", BOOKS, VERSIONS))[0] == "Matthew 3:1"
    print("✓ Smart transform applied before dispatch")

    assert get_suggestions("Matthew 3:4-", BOOKS, VERSIONS) == []
    print("✓ Range hyphen suppresses suggestions")

    print("Verse phase: All tests passed!")


def test_version_phase():
    """Test version suggestions after the reference."""
    print("\n=== Testing version phase ===")

    suggestions = get_suggestions("John 3:16 ", BOOKS, VERSIONS)
    assert texts(suggestions) == ["John 3:16 NKJV", "John 3:16 KJV", "John 3:16 NIV"]
    assert suggestions[0].type == "version"
    assert suggestions[0].description == "New King James Version"
    print("✓ Trailing space lists every version")

    assert texts(get_suggestions("John 3:16 n", BOOKS, VERSIONS)) == ["John 3:16 NKJV", "John 3:16 NIV"]
    assert texts(get_suggestions("Mat 5:3 KJ", BOOKS, VERSIONS)) == ["Mat 5:3 KJV"]
    print("✓ Version code prefix filter keeps typed text")

    assert get_suggestions("John 3:16 ESV", BOOKS, VERSIONS) == []
    print("✓ Unknown code suggests nothing")

    assert suggestions[0].to_dict() == {
        "text": "John 3:16 NKJV",
        "type": "version",
        "description": "New King James Version",
    }
    print("✓ Suggestion serialization")

    print("Version phase: All tests passed!")


def test_edge_inputs():
    """Test inputs at the phase boundaries."""
    print("\n=== Testing edge inputs ===")

    assert get_suggestions("John \u00b2", BOOKS, VERSIONS) == []
    assert get_suggestions("John \u00b2:1", BOOKS, VERSIONS) == []
    assert texts(get_suggestions("John 3:\u00b2", BOOKS, VERSIONS))[0] == "John 3:1"
    print("✓ Superscript digits are not chapter or verse numbers")

    assert texts(get_suggestions("Mark 0", BOOKS, VERSIONS)) == [
        "Mark 1", "Mark 2", "Mark 3", "Mark 4", "Mark 5",
    ]
    print("✓ Chapter zero skipped before the suggestion limit")

    suggestions = get_suggestions("1 ", BOOKS, VERSIONS)
    assert texts(suggestions) == ["1 John"]
    assert suggestions[0].type == "book"
    print("✓ Lone numeric prefix stays in the book phase")

    print("Edge inputs: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Autocomplete Test Suite")
    print("=" * 60)

    test_smart_transform()
    test_book_phase()
    test_chapter_phase()
    test_verse_phase()
    test_version_phase()
    test_edge_inputs()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
