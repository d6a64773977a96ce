# routes/scripture_api.py
"""
API endpoints for scripture import, lookup and reference input support.

Provides access to:
- Reference parsing, autocomplete and per-keystroke validation
- Verse lookup against imported versions
- Bible module import (upload or URL) and removal
"""

import logging

from flask import Blueprint, request, jsonify

from services.scripture import ScriptureService, ScriptureImportError
from utils.errors import import_failed, missing_field, not_found, server_error

logger = logging.getLogger(__name__)

scripture_bp = Blueprint("scripture_api", __name__, url_prefix="/api/scripture")

# Lazily initialized service instance
_service = None


def get_service() -> ScriptureService:
    """Get or create ScriptureService instance."""
    global _service
    if _service is None:
        _service = ScriptureService()
    return _service


# =============================================================================
# Reference Input Endpoints
# =============================================================================

@scripture_bp.get("/parse")
def parse_reference():
    """
    Parse a typed reference.

    Query params:
        ref: Reference string (required) e.g., "1 John 1:9-10 NKJV"

    Returns:
        {
            "ref": "1 John 1:9-10 NKJV",
            "parsed": {"book": {...}, "chapter": 1, "verse_start": 9, ..., "errors": []}
        }
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_field("ref")

    try:
        parsed = get_service().parse(ref)
        return jsonify({"ref": ref, "parsed": parsed.to_dict()})
    except Exception as e:
        return server_error("parse_failed", str(e))


@scripture_bp.get("/suggest")
def suggest():
    """
    Autocomplete suggestions for the current input.

    Query params:
        q: Raw input, trailing spaces significant (may be empty)
    """
    text = request.args.get("q", "")

    try:
        suggestions = get_service().suggest(text)
        return jsonify({"q": text, "suggestions": [s.to_dict() for s in suggestions]})
    except Exception as e:
        return server_error("suggest_failed", str(e))


@scripture_bp.get("/transform")
def transform():
    """Rewrite "Book Chapter " into "Book Chapter:"."""
    text = request.args.get("q", "")
    return jsonify({"q": text, "value": get_service().transform(text)})


@scripture_bp.post("/validate")
def validate():
    """
    Decide whether a keystroke is accepted.

    Request body:
        {
            "old": "Matthew 2",
            "new": "Matthew 29"
        }

    Returns:
        {
            "action": "reject",
            "value": "Matthew 2"
        }
    """
    data = request.json or {}
    if "new" not in data:
        return missing_field("new")

    try:
        decision = get_service().validate(data.get("old") or "", data["new"])
        return jsonify(decision.to_dict())
    except Exception as e:
        return server_error("validate_failed", str(e))


# =============================================================================
# Lookup Endpoints
# =============================================================================

@scripture_bp.get("/lookup")
def lookup():
    """
    Look up the verses a reference points at.

    Query params:
        ref: Reference string (required)
        version: Version code or id (optional, defaults to configured version)

    Returns:
        {
            "ref": "John 3:16",
            "parsed": {...},
            "verses": [{"book_id": "john", "chapter": 3, "verse": 16, "text": "..."}]
        }
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_field("ref")

    version = request.args.get("version")

    try:
        service = get_service()
        if version and service.store.find_version(version) is None:
            return not_found("version", f"Version not found: {version}")

        parsed = service.parse(ref)
        verses = service.lookup(parsed, version)
        return jsonify({
            "ref": ref,
            "parsed": parsed.to_dict(),
            "verses": [v.to_dict() for v in verses],
        })
    except Exception as e:
        return server_error("lookup_failed", str(e))


@scripture_bp.get("/versions")
def list_versions():
    """
    List imported versions.

    Returns:
        {
            "versions": [{"id": "new-king-james-version", "code": "NKJV", ...}]
        }
    """
    try:
        return jsonify({"versions": [v.to_dict() for v in get_service().versions()]})
    except Exception as e:
        return server_error("list_versions_failed", str(e))


@scripture_bp.get("/books")
def list_books():
    """
    List books, optionally for one version.

    Query params:
        version: Version code or id (optional)
    """
    version = request.args.get("version")

    try:
        service = get_service()
        version_id = None
        if version:
            found = service.store.find_version(version)
            if found is None:
                return not_found("version", f"Version not found: {version}")
            version_id = found.id
        return jsonify({"books": [b.to_dict() for b in service.books(version_id)]})
    except Exception as e:
        return server_error("list_books_failed", str(e))


# =============================================================================
# Import Endpoints
# =============================================================================

@scripture_bp.post("/import")
def import_module():
    """
    Import an uploaded Bible module.

    Accepts either a multipart upload in field "file", or the raw module as
    the request body with the name in ?filename=.

    Returns:
        {
            "success": true,
            "version": {...},
            "progress": [{"phase": "unzipping", "percent": 0}, ...]
        }
    """
    upload = request.files.get("file")
    if upload is not None:
        raw = upload.read()
        filename = upload.filename
    else:
        raw = request.get_data()
        filename = request.args.get("filename")

    if not raw:
        return missing_field("file")

    events = []
    try:
        version = get_service().import_bytes(raw, filename=filename, on_progress=events.append)
    except ScriptureImportError as e:
        logger.warning(f"Import of {filename or 'upload'} failed: {e}")
        return import_failed(e, progress=[p.to_dict() for p in events])
    except Exception as e:
        logger.error(f"Unexpected import error for {filename or 'upload'}: {e}")
        return server_error("import_failed", str(e))

    return jsonify({
        "success": True,
        "version": version.to_dict(),
        "progress": [p.to_dict() for p in events],
    })


@scripture_bp.post("/import/url")
def import_from_url():
    """
    Download and import a Bible module.

    Request body:
        {
            "url": "https://example.org/bibles/KJV.zip"
        }
    """
    data = request.json or {}
    url = data.get("url")
    if not url:
        return missing_field("url")

    events = []
    try:
        version = get_service().import_url(url, on_progress=events.append)
    except ScriptureImportError as e:
        logger.warning(f"Import from {url} failed: {e}")
        return import_failed(e, progress=[p.to_dict() for p in events])
    except Exception as e:
        logger.error(f"Unexpected import error for {url}: {e}")
        return server_error("import_failed", str(e))

    return jsonify({
        "success": True,
        "version": version.to_dict(),
        "progress": [p.to_dict() for p in events],
    })


@scripture_bp.delete("/versions/<version_id>")
def remove_version(version_id: str):
    """
    Remove an imported version with all its books and verses.

    Returns:
        {
            "success": true,
            "version": "kjv"
        }
    """
    try:
        if get_service().remove_version(version_id):
            return jsonify({"success": True, "version": version_id})
        return not_found("version", f"Version {version_id} not installed")
    except Exception as e:
        return server_error("remove_failed", str(e))
