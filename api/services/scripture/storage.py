# api/services/scripture/storage.py
"""
Scripture storage management.

Provides directory structure management and configuration persistence for
the scripture corpus. The base path can be configured via environment
variable to support moving the corpus to other storage.
"""

import os
import json
from pathlib import Path


class ScriptureStorage:
    """
    Manages the scripture storage directory structure and configuration.

    Directory structure:
        {LECTERN_SCRIPTURE_PATH}/
        ├── downloads/
        ├── scripture.db
        └── config.json
    """

    def __init__(self, base_path=None):
        self.base_path = Path(base_path or os.getenv(
            "LECTERN_SCRIPTURE_PATH",
            "/home/lectern/data/scripture"
        ))
        self._ensure_structure()

    def _ensure_structure(self):
        """Create directory structure if it doesn't exist."""
        self.downloads_path.mkdir(parents=True, exist_ok=True)

        # Initialize config if missing
        config_path = self.base_path / "config.json"
        if not config_path.exists():
            self._write_config(self._default_config())

    def _default_config(self) -> dict:
        """Return default configuration values."""
        return {
            "default_version": os.getenv("DEFAULT_BIBLE_VERSION", "NKJV"),
            "import_batch_size": 500,
            "download_timeout": 60,
        }

    @property
    def downloads_path(self) -> Path:
        """Where fetched modules are kept before import."""
        return self.base_path / "downloads"

    @property
    def db_path(self) -> Path:
        """SQLite corpus file."""
        return Path(os.getenv("LECTERN_SCRIPTURE_DB", str(self.base_path / "scripture.db")))

    def get_config(self) -> dict:
        """Load and return current configuration, filling in missing keys with defaults."""
        config_path = self.base_path / "config.json"
        with open(config_path) as f:
            return {**self._default_config(), **json.load(f)}

    def _write_config(self, config: dict):
        """Write configuration to disk."""
        config_path = self.base_path / "config.json"
        with open(config_path, "w") as f:
            json.dump(config, f, indent=2)

    def update_config(self, **kwargs):
        """Update configuration with provided key-value pairs."""
        config = self.get_config()
        config.update(kwargs)
        self._write_config(config)

    def get_default_version(self) -> str:
        return self.get_config().get("default_version", "NKJV")

    def get_batch_size(self) -> int:
        return int(self.get_config().get("import_batch_size", 500))

    def get_download_timeout(self) -> int:
        return int(self.get_config().get("download_timeout", 60))
