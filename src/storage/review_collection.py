"""
Review Collection - durable object collection for review records.

JSON-file backed store with ordered queries, point lookups, change
tracking and atomic saves. Pass no path to get an in-memory collection.
"""

import json
import os
import shutil
import logging
from typing import Dict, List, Optional
from datetime import datetime, timezone

import config.settings as settings
from src.models.review import ReviewRecord

logger = logging.getLogger(__name__)

SORT_KEYS = ("review_date", "created_at", "updated_at", "rating", "title")


class ReviewCollection:
    """
    Holds every ReviewRecord keyed by id.

    Mutations (insert, delete, in-place record updates) are buffered in
    memory until save() writes them to disk. has_changes reports whether
    the in-memory state differs from the last saved state.
    """

    def __init__(self, path: Optional[str] = None):
        """
        Initialize collection. The file is read lazily on first access.

        Args:
            path: Path to the JSON store file, or None for in-memory only
        """
        self.path = path
        self.version = settings.STORE_VERSION
        self.last_updated: Optional[str] = None
        self._records: Dict[str, ReviewRecord] = {}  # id -> ReviewRecord
        self._saved_snapshot: List[dict] = []
        self._loaded = path is None

    @classmethod
    def in_memory(cls) -> "ReviewCollection":
        return cls(path=None)

    @property
    def is_in_memory(self) -> bool:
        return self.path is None

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        if os.path.exists(self.path):
            self._load()
        else:
            logger.info(f"No existing store found at {self.path}, starting empty")

        self._saved_snapshot = self._snapshot()
        self._loaded = True

    def _load(self) -> None:
        """Load records from disk, falling back to the backup file."""
        try:
            self._read_file(self.path)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load review store {self.path}: {e}")
            self._restore_from_backup(e)

    def _read_file(self, path: str) -> None:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self.version = data.get("version", settings.STORE_VERSION)
        self.last_updated = data.get("last_updated")

        records = {}
        for review_data in data.get("reviews", []):
            record = ReviewRecord.from_dict(review_data)
            records[record.id] = record

        self._records = records
        logger.info(f"Loaded {len(self._records)} reviews from {path}")

    def _restore_from_backup(self, original_error: Exception) -> None:
        """Restore the store file from its backup, or re-raise the load error."""
        backup_path = f"{self.path}.backup"
        if not os.path.exists(backup_path):
            logger.error("No backup file found for review store")
            raise original_error

        logger.warning(f"Attempting to restore from backup: {backup_path}")
        self._read_file(backup_path)
        shutil.copy(backup_path, self.path)
        logger.info("Successfully restored review store from backup")

    def _snapshot(self) -> List[dict]:
        return [record.to_dict() for record in self._records.values()]

    @property
    def has_changes(self) -> bool:
        """True if in-memory records differ from the last save."""
        if not self._loaded:
            return False
        return self._snapshot() != self._saved_snapshot

    def insert(self, record: ReviewRecord) -> None:
        """
        Add a record to the collection.

        Raises:
            ValueError: If a record with the same id already exists
        """
        self._ensure_loaded()
        if record.id in self._records:
            raise ValueError(f"Review already exists: {record.id}")
        self._records[record.id] = record
        logger.debug(f"Inserted review {record.id}")

    def delete(self, record: ReviewRecord) -> None:
        """
        Remove a record from the collection.

        Raises:
            ValueError: If the record is not in the collection
        """
        self._ensure_loaded()
        if record.id not in self._records:
            raise ValueError(f"Review not found: {record.id}")
        del self._records[record.id]
        logger.debug(f"Deleted review {record.id}")

    def get(self, review_id: str) -> Optional[ReviewRecord]:
        """Retrieve record by id. Returns None if not found."""
        self._ensure_loaded()
        return self._records.get(review_id)

    def query(self, sort_key: str = "review_date", descending: bool = True) -> List[ReviewRecord]:
        """
        Return all records ordered by sort_key.

        Raises:
            ValueError: If sort_key is not a sortable record field
        """
        if sort_key not in SORT_KEYS:
            raise ValueError(f"Invalid sort key: {sort_key}. Must be one of {SORT_KEYS}")

        self._ensure_loaded()
        records = list(self._records.values())
        records.sort(key=lambda r: getattr(r, sort_key), reverse=descending)
        return records

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._records)

    def save(self) -> None:
        """
        Persist collection to disk with atomic write pattern.
        Creates backup before write.
        """
        self._ensure_loaded()
        self.last_updated = datetime.now(timezone.utc).isoformat()
        snapshot = self._snapshot()

        if self.is_in_memory:
            self._saved_snapshot = snapshot
            return

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        if os.path.exists(self.path):
            backup_path = f"{self.path}.backup"
            shutil.copy(self.path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        data = {
            "version": self.version,
            "last_updated": self.last_updated,
            "reviews": snapshot
        }

        # Atomic write: write to temp file, then rename
        temp_path = f"{self.path}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.path)
            self._saved_snapshot = snapshot
            logger.info(f"Review store saved: {len(snapshot)} reviews")

        except Exception as e:
            logger.error(f"Failed to save review store: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
