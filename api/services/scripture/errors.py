# api/services/scripture/errors.py
"""
Exceptions raised by the scripture ingestion pipeline, and the error kinds
recorded (never raised) by the reference parser.
"""

from enum import Enum


class ScriptureImportError(Exception):
    """Base exception for corpus import operations."""
    pass


class DecodeFailure(ScriptureImportError):
    """Raised when an archive is corrupt, has no JSON/XML entry, or a document is malformed."""
    pass


class UnsupportedDialect(ScriptureImportError):
    """Raised when an XML document yields no books under either dialect."""
    pass


class EmptyCorpus(ScriptureImportError):
    """Raised when decoding succeeded but produced zero verses."""
    pass


class DownloadError(ScriptureImportError):
    """Raised when fetching a module over the network fails."""
    pass


class ImportWriteError(ScriptureImportError):
    """Raised when the store fails while a decoded version is being written."""
    pass


class ErrorKind(str, Enum):
    """Problems a parsed reference can carry in its `errors` list."""

    REFERENCE_UNRESOLVED = "reference_unresolved"
    RANGE_OUT_OF_BOUNDS = "range_out_of_bounds"
    INVALID_NUMBER = "invalid_number"
    UNEXPECTED_TOKEN = "unexpected_token"
