#!/usr/bin/env python3
"""
Import Bible modules into the scripture store.

Accepts a zip holding one JSON or XML document, or a bare JSON, OSIS or
simple XML file. Run from the api directory.

Usage:
    python -m scripts.import_bible --file PATH [PATH ...]
    python -m scripts.import_bible --url URL
    python -m scripts.import_bible --list
    python -m scripts.import_bible --remove ID
    python -m scripts.import_bible --parse "1 John 1:9-10 NKJV"

Examples:
    # Import a local module
    cd api && python -m scripts.import_bible --file ~/bibles/NKJV.zip

    # Download and import
    cd api && python -m scripts.import_bible --url https://example.org/KJV.xml

    # Look a reference up against the imported versions
    cd api && python -m scripts.import_bible --parse "John 3:16"
"""

import argparse
import logging
import sys
import os
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

from services.scripture import ScriptureService, ScriptureImportError


def print_progress(event):
    """Print import progress bar."""
    bar_length = 30
    filled = int(bar_length * event.percent / 100)
    bar = "=" * filled + "-" * (bar_length - filled)
    print(f"\r    {event.phase:12} [{bar}] {event.percent:3d}%", end="", flush=True)


def _finish_progress():
    print("\r" + " " * 60 + "\r", end="")  # Clear progress bar


def show_versions(service: ScriptureService):
    versions = service.versions()
    print(f"Imported versions: {len(versions)}")
    for version in versions:
        books = len(service.books(version.id))
        verses = service.store.count_verses(version.id)
        print(f"  - {version.code:8} {version.name} [{version.id}]")
        print(f"      {books} books, {verses} verses")


def show_reference(service: ScriptureService, text: str) -> int:
    parsed = service.parse(text)
    if parsed.errors:
        print(f"{text}: {', '.join(e.value for e in parsed.errors)}")
        return 1

    print(parsed.normalized)
    for verse in service.lookup(parsed):
        print(f"  {verse.chapter}:{verse.verse} {verse.text}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Import Bible modules for Lectern",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scripts.import_bible --file NKJV.zip     # Import a local module
  python -m scripts.import_bible --url URL           # Download and import
  python -m scripts.import_bible --list              # List imported versions
  python -m scripts.import_bible --remove kjv        # Remove a version
  python -m scripts.import_bible --parse "Gen 1:1"   # Parse and look up
        """
    )
    parser.add_argument(
        "--file",
        nargs="+",
        metavar="PATH",
        help="Module files to import (.zip, .json, .xml)"
    )
    parser.add_argument(
        "--url",
        nargs="+",
        metavar="URL",
        help="Module URLs to download and import"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List imported versions and exit"
    )
    parser.add_argument(
        "--remove",
        nargs="+",
        metavar="ID",
        help="Remove versions by id"
    )
    parser.add_argument(
        "--parse",
        metavar="REF",
        help="Parse a reference and print the verses it points at"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )
    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    service = ScriptureService()
    print(f"Scripture storage: {service.storage.base_path}")
    print(f"Database: {service.storage.db_path}")
    print()

    # Handle --list
    if args.list:
        show_versions(service)
        return 0

    # Handle --parse
    if args.parse:
        return show_reference(service, args.parse)

    # Handle --remove
    if args.remove:
        print("Removing versions:")
        for version_id in args.remove:
            print(f"  {version_id}: ", end="", flush=True)
            if service.remove_version(version_id):
                print("removed")
            else:
                print("not installed")
        return 0

    sources = [("file", p) for p in args.file or []] + [("url", u) for u in args.url or []]
    if not sources:
        parser.print_help()
        return 1

    print(f"Importing {len(sources)} module(s):")
    print("-" * 40)

    success_count = 0
    fail_count = 0

    for kind, source in sources:
        print(f"  {source}:")
        try:
            if kind == "file":
                path = Path(source).expanduser()
                version = service.import_bytes(
                    path.read_bytes(), filename=path.name, on_progress=print_progress
                )
            else:
                version = service.import_url(source, on_progress=print_progress)
            _finish_progress()
            verses = service.store.count_verses(version.id)
            print(f"    ✓ {version.code} {version.name} ({verses} verses)")
            success_count += 1
        except (ScriptureImportError, OSError) as e:
            _finish_progress()
            print(f"    ✗ failed - {e}")
            fail_count += 1

    # Summary
    print("-" * 40)
    print(f"Imported: {success_count}, Failed: {fail_count}")

    return 0 if fail_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
