# api/services/scripture/__init__.py
"""
Scripture corpus and reference services for Lectern.

This package provides:
- ScriptureService: Unified interface for import, lookup and typing support
- ScriptureStorage: Directory structure and configuration management
- CorpusStore: SQLite store for versions, books and verses
- CorpusImporter: Zip/JSON/XML module import with progress reporting
- decode_corpus: Format detection and decoding into canonical records
- parse_reference: Parse typed references against the known books
- get_suggestions / get_smart_transform: Autocomplete for reference input
- validate_keystroke: Per-keystroke acceptance for reference input
"""

from .storage import ScriptureStorage
from .store import CorpusStore
from .errors import (
    ScriptureImportError,
    DecodeFailure,
    UnsupportedDialect,
    EmptyCorpus,
    DownloadError,
    ImportWriteError,
    ErrorKind,
)
from .models import (
    Version,
    Book,
    Verse,
    DecodedCorpus,
    ImportProgress,
    ParsedReference,
    Suggestion,
)
from .canon import resolve_version_code
from .detector import decode_corpus
from .importer import CorpusImporter
from .book_resolver import match_books, resolve_books
from .reference_parser import parse_reference, split_reference
from .autocomplete import get_suggestions, get_smart_transform
from .input_validator import KeystrokeDecision, validate_keystroke
from .scripture_service import ScriptureService

__all__ = [
    # Unified Service (primary interface)
    "ScriptureService",
    # Storage
    "ScriptureStorage",
    "CorpusStore",
    # Ingestion
    "CorpusImporter",
    "decode_corpus",
    "resolve_version_code",
    "ScriptureImportError",
    "DecodeFailure",
    "UnsupportedDialect",
    "EmptyCorpus",
    "DownloadError",
    "ImportWriteError",
    # Records
    "Version",
    "Book",
    "Verse",
    "DecodedCorpus",
    "ImportProgress",
    # Reference layer
    "ParsedReference",
    "ErrorKind",
    "Suggestion",
    "KeystrokeDecision",
    "match_books",
    "resolve_books",
    "parse_reference",
    "split_reference",
    "get_suggestions",
    "get_smart_transform",
    "validate_keystroke",
]
