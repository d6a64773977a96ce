# api/services/scripture/scripture_service.py
"""
Scripture service: one entry point over storage, import and the
reference layer.

Routes and the import CLI talk to this class only; the pure functions in
reference_parser, autocomplete and input_validator are fed the current
book and version lists from the store on every call.
"""

import logging
from typing import Callable, Optional, Union

from .autocomplete import get_smart_transform, get_suggestions
from .importer import CorpusImporter
from .input_validator import KeystrokeDecision, validate_keystroke
from .models import ImportProgress, ParsedReference, Version
from .reference_parser import parse_reference
from .storage import ScriptureStorage
from .store import CorpusStore

logger = logging.getLogger(__name__)


class ScriptureService:
    """
    Unified service for importing Bibles and working with references.

    Usage:
        service = ScriptureService()

        # Import a module
        version = service.import_bytes(data, filename="NKJV.zip")

        # Typing support
        service.suggest("Mat")             # [Suggestion("Matthew", "book"), ...]
        service.validate("Matthew 2", "Matthew 29")

        # Lookup
        verses = service.lookup("John 3:16 NKJV")
    """

    def __init__(self, storage: Optional[ScriptureStorage] = None, store: Optional[CorpusStore] = None):
        self.storage = storage or ScriptureStorage()
        self.store = store or CorpusStore(self.storage.db_path)
        self.importer = CorpusImporter(
            self.store,
            batch_size=self.storage.get_batch_size(),
            download_timeout=self.storage.get_download_timeout(),
        )

    # -------------------------------------------------------------------------
    # Corpus listing
    # -------------------------------------------------------------------------

    def books(self, version_id: Optional[str] = None) -> list:
        return self.store.list_books(version_id)

    def versions(self) -> list:
        return self.store.list_versions()

    # -------------------------------------------------------------------------
    # Reference layer
    # -------------------------------------------------------------------------

    def parse(self, text: str) -> ParsedReference:
        return parse_reference(text, self.books())

    def suggest(self, text: str) -> list:
        return get_suggestions(text, self.books(), self.versions())

    def transform(self, text: str) -> str:
        return get_smart_transform(text)

    def validate(self, old: str, new: str) -> KeystrokeDecision:
        return validate_keystroke(old, new, self.books(), self.versions())

    def lookup(
        self,
        ref: Union[str, ParsedReference],
        version_code: Optional[str] = None,
    ) -> list:
        """
        Return the verses a reference points at.

        The version is taken from `version_code`, then from a code typed in
        the reference itself, then the configured default, then the first
        stored version.

        Args:
            ref: Reference text or an already parsed reference
            version_code: Optional version code or id

        Returns:
            List of Verse; empty when the reference is incomplete or carries errors
        """
        parsed = self.parse(ref) if isinstance(ref, str) else ref
        if not parsed.is_complete:
            logger.debug(f"Skipping lookup of incomplete reference: {parsed.errors}")
            return []

        code = version_code or parsed.version_code or self._default_version_code()
        if not code:
            return []
        return self.store.lookup_reference(parsed, code)

    def _default_version_code(self) -> Optional[str]:
        default = self.storage.get_default_version()
        if default and self.store.find_version(default):
            return default
        versions = self.versions()
        return versions[0].code if versions else None

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def import_bytes(
        self,
        raw: bytes,
        filename: Optional[str] = None,
        on_progress: Optional[Callable[[ImportProgress], None]] = None,
    ) -> Version:
        return self.importer.import_corpus(raw, on_progress, filename=filename)

    def import_url(
        self,
        url: str,
        on_progress: Optional[Callable[[ImportProgress], None]] = None,
    ) -> Version:
        return self.importer.import_from_url(url, on_progress, save_dir=self.storage.downloads_path)

    def remove_version(self, version_id: str) -> bool:
        return self.store.remove_version(version_id)
