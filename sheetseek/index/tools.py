"""In-memory index of spreadsheet files and their modification times.

The FileIndex is created once per application and shared by every request.
Each single-key read or write is serialized by a lock; a whole rebuild is
not a transaction, so two concurrent rebuilds interleave their per-file
updates and the last write for a file wins.

Records of files removed from disk are never dropped.
"""

import threading
from pathlib import Path

from sheetseek.dependencies import is_spreadsheet, logger, walk_directory
from sheetseek.index.models import FileRecord


class FileIndex:
    """Thread-safe mapping from file name to FileRecord."""

    def __init__(self) -> None:
        self._records: dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, filename: object) -> bool:
        with self._lock:
            return filename in self._records

    def get(self, filename: str) -> FileRecord | None:
        """Return the record for a file name, if any."""
        with self._lock:
            return self._records.get(filename)

    def put(self, record: FileRecord) -> None:
        """Insert or overwrite the record for record.filename."""
        with self._lock:
            self._records[record.filename] = record

    def snapshot(self) -> dict[str, FileRecord]:
        """Return a copy of the whole mapping."""
        with self._lock:
            return dict(self._records)

    def _refresh(self, record: FileRecord) -> FileRecord | None:
        """Store record if it is new or newer than the indexed one.

        Returns:
            The record indexed before this call, or None for a new file
        """
        with self._lock:
            previous = self._records.get(record.filename)
            if previous is None or record.last_updated > previous.last_updated:
                self._records[record.filename] = record
            return previous

    def rebuild(self, directory: Path | str, extension: str = ".xlsx") -> dict[str, FileRecord]:
        """Index every spreadsheet file below a directory.

        Args:
            directory: Directory to walk recursively
            extension: Spreadsheet file extension, compared case-insensitively

        Returns:
            Snapshot of the full index after the walk

        Raises:
            DirectoryWalkError: If the directory cannot be walked at all
        """
        for entry in walk_directory(directory):
            if entry.is_dir or not is_spreadsheet(entry.name, extension):
                continue
            self.put(FileRecord(filename=entry.name, last_updated=entry.modified))
            logger.info("file_indexed", extra={"file": entry.name})

        return self.snapshot()

    def detect_changes(self, directory: Path | str, extension: str = ".xlsx") -> list[FileRecord]:
        """Find spreadsheet files that are new or modified since last seen.

        New and modified files are written to the index as they are found.

        Args:
            directory: Directory to walk recursively
            extension: Spreadsheet file extension, compared case-insensitively

        Returns:
            Records of new or updated files, in walk order

        Raises:
            DirectoryWalkError: If the directory cannot be walked at all
        """
        changed: list[FileRecord] = []

        for entry in walk_directory(directory):
            if entry.is_dir or not is_spreadsheet(entry.name, extension):
                continue

            record = FileRecord(filename=entry.name, last_updated=entry.modified)
            previous = self._refresh(record)

            if previous is None:
                logger.info("new_file_found", extra={"file": entry.name})
                changed.append(record)
            elif record.last_updated > previous.last_updated:
                logger.info(
                    "file_updated",
                    extra={
                        "file": entry.name,
                        "previous": previous.last_updated.isoformat(),
                        "current": record.last_updated.isoformat(),
                    },
                )
                changed.append(record)

        return changed
