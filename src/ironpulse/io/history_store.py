"""
JSONL-based history storage for finished workouts.

Handles reading, appending and managing the workout history file.
"""

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from ..core.config import HISTORY_FILE_NAME
from ..core.engine.config_loader import get_data_dir
from ..core.errors import StoreError
from ..core.models import HistoryRecord
from .serializers import ValidationError, json_line_to_record, record_to_json_line

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Manages workout history stored in JSONL format.

    The history file contains one HistoryRecord per line, in the order the
    records were appended.  load() returns them newest first by completion
    timestamp, whatever the file order.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.

        Raises:
            StoreError: If the file cannot be created
        """
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            if not self.history_path.exists():
                self.history_path.touch()
        except OSError as e:
            raise StoreError(f"Cannot create {self.history_path}: {e}", self.history_path) from e

    def load(self) -> list[HistoryRecord]:
        """
        Load all records from the history file.

        A missing file is an empty history.

        Returns:
            List of HistoryRecord, newest first (ties list the last appended first)

        Raises:
            StoreError: If the file cannot be read
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            return []

        records: list[HistoryRecord] = []

        try:
            with open(self.history_path, "r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(json_line_to_record(line))
                    except ValidationError as e:
                        raise ValidationError(
                            f"Error parsing line {line_num} in {self.history_path}: {e}"
                        ) from e
        except UnicodeDecodeError as e:
            raise ValidationError(f"{self.history_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StoreError(f"Cannot read {self.history_path}: {e}", self.history_path) from e

        # Stable sort: reverse file order first so equal timestamps stay newest-appended first
        records.reverse()
        records.sort(key=lambda r: r.date, reverse=True)
        return records

    def append(self, record: HistoryRecord) -> None:
        """
        Append a record to the history file.

        The record counts as saved only once this returns; the line is
        flushed and fsynced before returning.

        Args:
            record: Record to append

        Raises:
            StoreError: If the record could not be written
        """
        line = record_to_json_line(record) + "\n"
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_path, "a", encoding="utf-8") as f:
                f.write(line)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise StoreError(
                f"Cannot append record {record.id} to {self.history_path}: {e}",
                self.history_path,
            ) from e
        logger.info("Appended record %s to %s", record.id, self.history_path)

    def get_latest_record(self) -> HistoryRecord | None:
        """
        Get the most recent record.

        Returns:
            Latest HistoryRecord or None if no history
        """
        records = self.load()
        return records[0] if records else None

    def delete_record(self, record_id: str) -> HistoryRecord:
        """
        Delete the record with the given id.

        Args:
            record_id: Identity of the record to delete

        Returns:
            The deleted record

        Raises:
            KeyError: If no record has that id
            StoreError: If the file cannot be rewritten
        """
        records = self.load()
        for i, record in enumerate(records):
            if record.id == record_id:
                del records[i]
                # Keep the on-disk order oldest first
                self._write_records(list(reversed(records)))
                return record
        raise KeyError(f"No history record with id {record_id!r}")

    def _write_records(self, records: list[HistoryRecord]) -> None:
        """
        Atomically replace the history file with the given records.

        Args:
            records: Records to write, in file order
        """
        payload = "".join(record_to_json_line(r) + "\n" for r in records)
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "w", dir=self.history_path.parent, delete=False, encoding="utf-8"
            ) as tmp:
                tmp.write(payload)
                temp_path = Path(tmp.name)
            temp_path.replace(self.history_path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.history_path}: {e}", self.history_path) from e

    def clear(self) -> None:
        """
        Clear all history (dangerous - use with caution).
        """
        if self.history_path.exists():
            self._write_records([])


def get_default_history_path() -> Path:
    """
    Get the default history file path.

    Returns:
        <data dir>/history.jsonl
    """
    return get_data_dir() / HISTORY_FILE_NAME
