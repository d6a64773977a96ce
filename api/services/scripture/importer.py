# api/services/scripture/importer.py
"""
Corpus importer: decodes Bible modules and commits them to the store.

A version is replaced wholesale on re-import: its books and verses are
deleted, the version record is written, books are bulk-inserted and verses
follow in fixed-size batches, each reporting progress.
"""

import logging
import math
from pathlib import Path, PurePosixPath
from typing import Callable, Optional
from urllib.parse import urlparse

import requests

from .detector import decode_corpus
from .errors import DownloadError, ImportWriteError
from .models import DOWNLOADING, IMPORTING, DecodedCorpus, ImportProgress, Version

logger = logging.getLogger(__name__)

BATCH_SIZE = 500


def dedupe_corpus(corpus: DecodedCorpus) -> DecodedCorpus:
    """
    Collapse books and verses sharing a primary key to their first
    occurrence, and lift each book's chapter count to cover its verses.
    """
    books = {}
    for book in corpus.books:
        if book.pk in books:
            logger.warning(f"Duplicate book {book.pk} dropped")
            continue
        books[book.pk] = book

    verses = {}
    dropped = 0
    for verse in corpus.verses:
        if verse.pk in verses:
            dropped += 1
            continue
        verses[verse.pk] = verse
        book = books.get(f"{verse.version}|{verse.book_id}")
        if book is not None and verse.chapter > book.chapter_count:
            book.chapter_count = verse.chapter

    if dropped:
        logger.warning(f"Dropped {dropped} duplicate verses from {corpus.version.id}")

    return DecodedCorpus(
        version=corpus.version,
        books=list(books.values()),
        verses=list(verses.values()),
    )


class CorpusImporter:
    """
    Imports Bible modules into a CorpusStore.

    Usage:
        importer = CorpusImporter(store)

        # From bytes already in hand (upload, local file)
        version = importer.import_corpus(data, on_progress=print, filename="NKJV.zip")

        # Fetch and import
        version = importer.import_from_url("https://example.org/bibles/KJV.zip")

    Imports for the same version id must not run concurrently; the
    delete-then-insert sequence is not isolated against itself.
    """

    def __init__(self, store, batch_size: int = BATCH_SIZE, download_timeout: int = 60):
        self.store = store
        self.batch_size = batch_size
        self._download_timeout = download_timeout

    def import_corpus(
        self,
        raw: bytes,
        on_progress: Optional[Callable[[ImportProgress], None]] = None,
        filename: Optional[str] = None,
    ) -> Version:
        """
        Decode raw module bytes and write them to the store.

        Args:
            raw: Zip archive, JSON or XML bytes
            on_progress: Optional callable receiving ImportProgress events
            filename: Optional filename hint used for naming the version

        Returns:
            The imported Version

        Raises:
            DecodeFailure, UnsupportedDialect, EmptyCorpus: Before any store write
            ImportWriteError: If the store fails during the write phase
        """
        corpus = decode_corpus(raw, filename, on_progress)
        return self.commit(corpus, on_progress)

    def commit(
        self,
        corpus: DecodedCorpus,
        on_progress: Optional[Callable[[ImportProgress], None]] = None,
    ) -> Version:
        """Write one decoded version, replacing anything stored under its id."""
        progress = on_progress or (lambda p: None)
        corpus = dedupe_corpus(corpus)
        version = corpus.version
        total_batches = math.ceil(len(corpus.verses) / self.batch_size)

        logger.info(
            f"Importing {version.id} ({version.code}): "
            f"{len(corpus.books)} books, {len(corpus.verses)} verses in {total_batches} batches"
        )

        try:
            with self.store.transaction():
                self.store.delete_books_by_version(version.id)
                self.store.delete_verses_by_version(version.id)
                self.store.put_version(version)

                if corpus.books:
                    self.store.bulk_insert_books(corpus.books)

                for i in range(total_batches):
                    batch = corpus.verses[i * self.batch_size:(i + 1) * self.batch_size]
                    self.store.bulk_insert_verses(batch)
                    progress(ImportProgress(IMPORTING, round((i + 1) / total_batches * 100)))
        except Exception as e:
            logger.error(f"Import of {version.id} failed: {e}")
            raise ImportWriteError(f"Failed to write {version.id}: {e}")

        logger.info(f"Successfully imported {version.id}")
        return version

    def import_from_url(
        self,
        url: str,
        on_progress: Optional[Callable[[ImportProgress], None]] = None,
        save_dir: Optional[Path] = None,
    ) -> Version:
        """
        Download a module and import it.

        Args:
            url: Module URL (zip, JSON or XML)
            on_progress: Optional callable receiving ImportProgress events
            save_dir: If given, the downloaded file is kept there

        Raises:
            DownloadError: If the download fails
        """
        progress = on_progress or (lambda p: None)
        progress(ImportProgress(DOWNLOADING, 0))

        logger.info(f"Downloading Bible module from {url}")
        try:
            raw = self._download(url, progress)
        except requests.RequestException as e:
            raise DownloadError(f"Failed to download {url}: {e}")
        progress(ImportProgress(DOWNLOADING, 100))

        filename = PurePosixPath(urlparse(url).path).name or None
        if save_dir is not None and filename:
            (Path(save_dir) / filename).write_bytes(raw)
            logger.debug(f"Saved {filename} to {save_dir}")
        return self.import_corpus(raw, on_progress, filename=filename)

    def _download(self, url: str, progress: Callable[[ImportProgress], None]) -> bytes:
        """Download a file with optional progress reporting."""
        with requests.get(url, stream=True, timeout=self._download_timeout) as response:
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))
            downloaded = 0
            chunks = []

            for chunk in response.iter_content(chunk_size=8192):
                chunks.append(chunk)
                downloaded += len(chunk)
                if total_size:
                    progress(ImportProgress(DOWNLOADING, round(downloaded / total_size * 100)))

        return b"".join(chunks)
