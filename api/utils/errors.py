# api/utils/errors.py
"""
Standardized API error responses.

All errors follow the format: {"error": "error_code", "detail": "optional message"}

Error codes should be:
- snake_case
- machine-parseable (no spaces or special chars)
"""

from flask import jsonify
from typing import Optional

from services.scripture.errors import (
    DecodeFailure,
    DownloadError,
    EmptyCorpus,
    UnsupportedDialect,
)


# -----------------------------------------------------------------------------
# Standard HTTP Error Responses
# -----------------------------------------------------------------------------

def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# Not Found (404)
def not_found(resource: str = "resource", detail: str = None):
    """Requested resource does not exist."""
    return error_response("not_found", 404, detail or f"{resource} not found")


# Validation (400)
def missing_field(field: str):
    """Required field is missing."""
    return error_response(f"{field}_required", 400, f"Missing required field: {field}")


# Unprocessable (422)
def unprocessable(code: str, detail: str = None, **extra):
    """Request was well-formed but its content could not be used."""
    return error_response(code, 422, detail, **extra)


# Upstream (502)
def bad_gateway(code: str, detail: str = None, **extra):
    """A remote resource needed for the request failed."""
    return error_response(code, 502, detail, **extra)


# Server Error (500)
def server_error(code: str = "internal_error", detail: str = None, **extra):
    """Internal server error."""
    return error_response(code, 500, detail, **extra)


# -----------------------------------------------------------------------------
# Domain-Specific Errors
# -----------------------------------------------------------------------------

def import_failed(exc: Exception, **extra):
    """
    Map a scripture import exception onto a response.

    Decode problems are the uploader's content (422), download problems are
    upstream (502), anything else is ours (500).
    """
    if isinstance(exc, DecodeFailure):
        return unprocessable("decode_failure", str(exc), **extra)
    if isinstance(exc, UnsupportedDialect):
        return unprocessable("unsupported_dialect", str(exc), **extra)
    if isinstance(exc, EmptyCorpus):
        return unprocessable("empty_corpus", str(exc), **extra)
    if isinstance(exc, DownloadError):
        return bad_gateway("download_failed", str(exc), **extra)
    return server_error("import_failed", str(exc), **extra)
