# api/tests/test_scripture_api.py
"""
Tests for the /api/scripture blueprint, run against a temporary store.
"""

import io
import json
import os
import sys
import tempfile
from pathlib import Path

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import routes.scripture_api as scripture_api
from server import app
from services.scripture import CorpusStore, ScriptureService, ScriptureStorage


KJV_DOCUMENT = json.dumps({
    "version": {"id": "kjv", "name": "King James Version", "code": "KJV"},
    "books": [{"id": "gen", "name": "Genesis", "abbreviation": "Gen", "chapters": 50}],
    "verses": [
        {"bookId": "gen", "chapter": 1, "verse": 1, "text": "In the beginning God created the heaven and the earth."},
        {"bookId": "gen", "chapter": 1, "verse": 2, "text": "And the earth was without form, and void."},
        {"bookId": "gen", "chapter": 1, "verse": 3, "text": "And God said, Let there be light."},
    ],
}).encode()


def make_client(tmpdir: str):
    """Point the blueprint at a fresh service under tmpdir."""
    storage = ScriptureStorage(tmpdir)
    store = CorpusStore(Path(tmpdir) / "scripture.db")
    scripture_api._service = ScriptureService(storage=storage, store=store)
    app.config["TESTING"] = True
    return app.test_client(), store


def test_import_endpoints():
    """Test uploads and their error responses."""
    print("\n=== Testing import endpoints ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        client, store = make_client(tmpdir)

        resp = client.post(
            "/api/scripture/import",
            data=KJV_DOCUMENT,
            query_string={"filename": "kjv.json"},
        )
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["version"]["code"] == "KJV"
        assert body["progress"][0] == {"phase": "unzipping", "percent": 0}
        assert body["progress"][-1] == {"phase": "importing", "percent": 100}
        print("✓ Raw body import with progress events")

        resp = client.post(
            "/api/scripture/import",
            data={"file": (io.BytesIO(KJV_DOCUMENT), "kjv.json")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        assert store.count_verses("kjv") == 3
        print("✓ Multipart upload replaces the version")

        resp = client.post("/api/scripture/import", data=b"{broken", query_string={"filename": "x.json"})
        assert resp.status_code == 422
        assert resp.get_json()["error"] == "decode_failure"
        assert "progress" in resp.get_json()
        print("✓ Malformed module returns 422")

        resp = client.post("/api/scripture/import", data=b"<html><body/></html>")
        assert resp.status_code == 422
        assert resp.get_json()["error"] == "unsupported_dialect"
        print("✓ Unrecognised XML returns 422")

        resp = client.post("/api/scripture/import", data=b"")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "file_required"
        print("✓ Empty upload returns 400")

        resp = client.post("/api/scripture/import/url", json={"url": "http://127.0.0.1:9/kjv.json"})
        assert resp.status_code == 502
        assert resp.get_json()["error"] == "download_failed"
        print("✓ Failed download returns 502")

        resp = client.post("/api/scripture/import/url", json={})
        assert resp.status_code == 400
        print("✓ Missing url returns 400")

    print("Import endpoints: All tests passed!")


def test_listing_and_lookup():
    """Test versions, books and lookup."""
    print("\n=== Testing listing and lookup ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = make_client(tmpdir)
        client.post("/api/scripture/import", data=KJV_DOCUMENT, query_string={"filename": "kjv.json"})

        versions = client.get("/api/scripture/versions").get_json()["versions"]
        assert [v["id"] for v in versions] == ["kjv"]
        print("✓ Versions listed")

        books = client.get("/api/scripture/books", query_string={"version": "KJV"}).get_json()["books"]
        assert [b["name"] for b in books] == ["Genesis"]
        assert client.get("/api/scripture/books", query_string={"version": "ESV"}).status_code == 404
        print("✓ Books listed by version code; unknown version 404")

        resp = client.get("/api/scripture/lookup", query_string={"ref": "Gen 1:2-3"})
        assert resp.status_code == 200
        verses = resp.get_json()["verses"]
        assert [v["verse"] for v in verses] == [2, 3]
        print("✓ Lookup falls back to the only imported version")

        resp = client.get("/api/scripture/lookup", query_string={"ref": "Gen 1:1", "version": "kjv"})
        assert resp.get_json()["verses"][0]["text"].startswith("In the beginning")
        print("✓ Lookup with explicit version")

        resp = client.get("/api/scripture/lookup", query_string={"ref": "Gen 1:1", "version": "ESV"})
        assert resp.status_code == 404
        print("✓ Lookup in unknown version returns 404")

        resp = client.get("/api/scripture/lookup", query_string={"ref": "Gen 51:1"})
        body = resp.get_json()
        assert body["verses"] == []
        assert body["parsed"]["errors"] == ["range_out_of_bounds"]
        print("✓ Out-of-range reference returns no verses and its errors")

        assert client.get("/api/scripture/lookup").status_code == 400
        print("✓ Missing ref returns 400")

        assert client.delete("/api/scripture/versions/kjv").status_code == 200
        assert client.delete("/api/scripture/versions/kjv").status_code == 404
        assert client.get("/api/scripture/versions").get_json()["versions"] == []
        print("✓ Version removed, second removal 404")

    print("Listing and lookup: All tests passed!")


def test_reference_input_endpoints():
    """Test parse, suggest, transform and validate."""
    print("\n=== Testing reference input endpoints ===")

    with tempfile.TemporaryDirectory() as tmpdir:
        client, _ = make_client(tmpdir)
        client.post("/api/scripture/import", data=KJV_DOCUMENT, query_string={"filename": "kjv.json"})

        parsed = client.get("/api/scripture/parse", query_string={"ref": "Gen 1:1 KJV"}).get_json()["parsed"]
        assert parsed["book"]["name"] == "Genesis"
        assert parsed["chapter"] == 1 and parsed["verse_start"] == 1
        assert parsed["version_code"] == "KJV"
        assert parsed["normalized"] == "Genesis 1:1 KJV"
        print("✓ Parse")

        assert client.get("/api/scripture/parse").status_code == 400
        print("✓ Parse without ref returns 400")

        suggestions = client.get("/api/scripture/suggest", query_string={"q": "Ge"}).get_json()["suggestions"]
        assert suggestions == [{"text": "Genesis", "type": "book"}]
        suggestions = client.get("/api/scripture/suggest", query_string={"q": "Gen 1:1 "}).get_json()["suggestions"]
        assert suggestions == [{"text": "Gen 1:1 KJV", "type": "version", "description": "King James Version"}]
        print("✓ Suggest")

        value = client.get("/api/scripture/transform", query_string={"q": "Genesis 1 "}).get_json()["value"]
        assert value == "Genesis 1:"
        print("✓ Transform")

        decision = client.post("/api/scripture/validate", json={"old": "Genesis 5", "new": "Genesis 51"}).get_json()
        assert decision == {"action": "reject", "value": "Genesis 5"}
        decision = client.post("/api/scripture/validate", json={"old": "Genesis 5", "new": "Genesis 50"}).get_json()
        assert decision == {"action": "accept", "value": "Genesis 50"}
        decision = client.post("/api/scripture/validate", json={"old": "Ge", "new": "Gen"}).get_json()
        assert decision == {"action": "complete", "value": "Genesis "}
        print("✓ Validate")

        assert client.post("/api/scripture/validate", json={"old": "Ge"}).status_code == 400
        print("✓ Validate without new value returns 400")

    print("Reference input endpoints: All tests passed!")


def main():
    """Run all tests."""
    print("=" * 60)
    print("Scripture API Test Suite")
    print("=" * 60)

    test_import_endpoints()
    test_listing_and_lookup()
    test_reference_input_endpoints()

    print("\n" + "=" * 60)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
