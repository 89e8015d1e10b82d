"""File persistence for the response cache.

The whole store is written as one JSON document:

    {"entries": {"<key>": {"location": ..., "data": ..., "cached_at": ...}}}

Writes go to a temporary file in the same directory which is then renamed
over the target with os.replace, so readers only ever see the previous or
the new complete document.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict

from weathercli.domain.models.common import CacheKey
from weathercli.domain.models.errors import (
    CacheFileNotFoundError,
    CachePersistenceError,
    CorruptCacheError,
)
from weathercli.infrastructure.cache.entry_store import CacheEntry

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class CacheFile:
    """Loads and saves the entry mapping at a fixed path. Holds no other state."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[CacheKey, CacheEntry]:
        """Reads the cache file.

        Returns:
            The persisted entries keyed by normalized location.

        Raises:
            CacheFileNotFoundError: If no cache file exists yet.
            CachePersistenceError: If the file exists but cannot be read.
            CorruptCacheError: If the content cannot be deserialized.
        """
        try:
            raw_text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CacheFileNotFoundError(f"No cache file at {self.path}") from e
        except OSError as e:
            raise CachePersistenceError(f"Failed to read cache file {self.path}: {e}") from e

        try:
            document = json.loads(raw_text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptCacheError(f"Cache file {self.path} is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise CorruptCacheError(f"Cache file {self.path} does not contain an object")
        raw_entries = document.get("entries")
        if raw_entries is None:
            return {}
        if not isinstance(raw_entries, dict):
            raise CorruptCacheError(f"Cache file {self.path} has a malformed 'entries' field")

        entries: Dict[CacheKey, CacheEntry] = {}
        for key, raw_entry in raw_entries.items():
            try:
                entries[CacheKey(key)] = CacheEntry.from_dict(raw_entry)
            except (KeyError, TypeError, ValueError) as e:
                raise CorruptCacheError(f"Cache entry {key!r} in {self.path} is malformed: {e}") from e

        logger.debug(f"Loaded {len(entries)} cache entries from {self.path}")
        return entries

    def save(self, entries: Dict[CacheKey, CacheEntry]) -> None:
        """Atomically replaces the cache file with the given entries.

        Raises:
            CachePersistenceError: If the directory, temporary file or rename fails.
                The previous cache file, if any, is left untouched.
        """
        document = {"entries": {key: entry.to_dict() for key, entry in entries.items()}}
        try:
            payload = json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CachePersistenceError(f"Failed to serialize cache: {e}") from e

        directory = self.path.parent
        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise CachePersistenceError(f"Failed to create cache directory {directory}: {e}") from e

        try:
            # mkstemp creates the file with owner-only permissions
            fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        except OSError as e:
            raise CachePersistenceError(f"Failed to create temporary cache file in {directory}: {e}") from e

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, FILE_MODE)
            os.replace(temp_path, self.path)
        except OSError as e:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError as unlink_err:
                logger.warning(f"Failed to remove temporary cache file {temp_path}: {unlink_err}")
            raise CachePersistenceError(f"Failed to write cache file {self.path}: {e}") from e

        logger.debug(f"Saved {len(entries)} cache entries to {self.path}")
