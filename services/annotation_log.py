"""
Persistent annotation log.

Append-only sequence of finalized AnnotationRecords, stored as one JSON
file named after a versioned storage key. The whole sequence is rewritten
on every change.
"""

import json
import logging
import os
import tempfile
from typing import List, Optional, Tuple

from models.annotation import AnnotationRecord
from utils.validation import validate_storage_key

logger = logging.getLogger(__name__)

# Bump the version suffix whenever the AnnotationRecord schema changes.
STORAGE_KEY = "bdi_annotations_v2"


class AnnotationLog:
    """
    Durable, append-only list of annotation records.

    Attributes:
        storage_dir: Directory holding the durable file
        storage_key: Versioned key; the file is <storage_dir>/<storage_key>.json
        load_warning: Message describing why stored data was discarded, if it was
    """

    def __init__(self, storage_dir: str, storage_key: str = STORAGE_KEY):
        """
        Raises:
            ValueError: If storage_key has no version suffix
        """
        is_valid, error_msg = validate_storage_key(storage_key)
        if not is_valid:
            raise ValueError(error_msg)

        self.storage_dir = storage_dir
        self.storage_key = storage_key
        self.load_warning: Optional[str] = None
        self._records: List[AnnotationRecord] = []

    @property
    def storage_path(self) -> str:
        return os.path.join(self.storage_dir, f"{self.storage_key}.json")

    @property
    def records(self) -> Tuple[AnnotationRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def latest(self) -> Optional[AnnotationRecord]:
        """Most recently appended record, or None."""
        return self._records[-1] if self._records else None

    def load(self) -> Tuple[AnnotationRecord, ...]:
        """
        Restore records from durable storage.

        A missing file gives an empty log. Unreadable or malformed data also
        gives an empty log, with a warning logged and kept in load_warning.

        Returns:
            The restored records
        """
        self.load_warning = None
        self._records = []

        if not os.path.exists(self.storage_path):
            return self.records

        try:
            with open(self.storage_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError(f"expected a list of records, got {type(data).__name__}")
            records = [AnnotationRecord.from_dict(item) for item in data]
        except (OSError, ValueError) as e:
            self.load_warning = f"Failed to parse saved annotations: {e}"
            logger.warning("%s (%s)", self.load_warning, self.storage_path)
            return self.records

        self._records = records
        logger.info("Restored %d saved annotations from %s", len(records), self.storage_path)
        return self.records

    def append(self, record: AnnotationRecord):
        """
        Append a record and persist the full sequence.

        The in-memory log only changes after the write succeeded.

        Raises:
            OSError: If the durable file cannot be written
        """
        updated = self._records + [record]
        self._persist(updated)
        self._records = updated

    def clear(self):
        """Remove every record, in memory and on disk."""
        if os.path.exists(self.storage_path):
            os.remove(self.storage_path)
        self._records = []
        self.load_warning = None

    def _persist(self, records: List[AnnotationRecord]):
        os.makedirs(self.storage_dir, exist_ok=True)
        payload = [record.to_dict() for record in records]

        fd, tmp_path = tempfile.mkstemp(
            dir=self.storage_dir, prefix=f".{self.storage_key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
            os.replace(tmp_path, self.storage_path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
