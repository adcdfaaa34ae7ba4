"""Shared dependencies: structured logger, directory walker and workbook reader."""

import json
import logging
import os
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request, status
from openpyxl import load_workbook

from sheetseek.config import get_settings
from sheetseek.models import ErrorDetail, ErrorResponse

if TYPE_CHECKING:
    from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook

# Attributes every LogRecord has; anything else came in through `extra=`.
_RESERVED_LOG_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }
        data.update(
            {k: v for k, v in vars(record).items() if k not in _RESERVED_LOG_ATTRS}
        )
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""
    settings = get_settings()
    logger = logging.getLogger("sheetseek")
    logger.setLevel(getattr(logging, settings.log_level.upper()))
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger


logger = setup_logging()


class SheetSeekError(Exception):
    """Base exception for indexing and search operations."""

    pass


class DirectoryWalkError(SheetSeekError):
    """Raised when a directory walk cannot begin at all."""

    pass


class WorkbookOpenError(SheetSeekError):
    """Raised when a spreadsheet file cannot be opened."""

    pass


class SheetReadError(SheetSeekError):
    """Raised when the rows of a single sheet cannot be read."""

    pass


class EmptyQueryError(SheetSeekError, ValueError):
    """Raised when a search is requested with an empty query."""

    pass


# =============================================================================
# Directory Walker
# =============================================================================


@dataclass(frozen=True)
class DirectoryEntry:
    """One filesystem entry produced by walk_directory."""

    path: Path
    name: str
    is_dir: bool
    modified: datetime


def is_spreadsheet(name: str, extension: str = ".xlsx") -> bool:
    """Check whether a file name carries the spreadsheet extension.

    Examples:
        >>> is_spreadsheet("Report.XLSX")
        True
        >>> is_spreadsheet("notes.txt")
        False
    """
    return name.lower().endswith(extension.lower())


def _list_directory(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def _walk_entries(dir_entries: list[os.DirEntry]) -> Iterator[DirectoryEntry]:
    for dir_entry in dir_entries:
        try:
            is_dir = dir_entry.is_dir(follow_symlinks=False)
            stat = dir_entry.stat(follow_symlinks=False)
        except OSError as e:
            logger.warning(
                "walk_entry_error", extra={"path": dir_entry.path, "error": str(e)}
            )
            continue

        yield DirectoryEntry(
            path=Path(dir_entry.path),
            name=dir_entry.name,
            is_dir=is_dir,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
        )
        if not is_dir:
            continue
        try:
            children = _list_directory(Path(dir_entry.path))
        except OSError as e:
            logger.warning(
                "walk_entry_error", extra={"path": dir_entry.path, "error": str(e)}
            )
            continue
        yield from _walk_entries(children)


def walk_directory(root: Path | str) -> Iterator[DirectoryEntry]:
    """Lazily walk every entry below a root directory.

    Entries are produced in lexical order within each directory, and a
    directory's contents follow right after the directory itself. Errors
    on individual entries are logged and the entry is skipped.

    Args:
        root: Directory to walk

    Yields:
        DirectoryEntry for each file and subdirectory

    Raises:
        DirectoryWalkError: If the root cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise DirectoryWalkError(f"Not a directory: {root}")
    try:
        dir_entries = _list_directory(root)
    except OSError as e:
        raise DirectoryWalkError(f"Cannot read directory {root}: {e}") from e

    yield from _walk_entries(dir_entries)


# =============================================================================
# Workbook Reader
# =============================================================================


def cell_text(value: Any) -> str:
    """Render a raw cell value as the text shown in a spreadsheet.

    Examples:
        >>> cell_text(None)
        ''
        >>> cell_text(3.0)
        '3'
        >>> cell_text(True)
        'TRUE'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


@dataclass
class Workbook:
    """Read-only view over an opened spreadsheet file."""

    path: Path
    book: "OpenpyxlWorkbook"

    @property
    def sheet_names(self) -> list[str]:
        """Sheet names in workbook order."""
        return list(self.book.sheetnames)

    def rows(self, sheet_name: str) -> list[list[str]]:
        """Read all rows of a sheet as lists of cell text.

        Args:
            sheet_name: Name of the sheet to read

        Returns:
            Rows in order, each a list of cell text in column order

        Raises:
            SheetReadError: If the sheet cannot be read
        """
        try:
            sheet = self.book[sheet_name]
            return [
                [cell_text(value) for value in row]
                for row in sheet.iter_rows(values_only=True)
            ]
        except Exception as e:
            raise SheetReadError(
                f"Cannot read sheet {sheet_name!r} in {self.path.name}: {e}"
            ) from e


@contextmanager
def open_workbook(path: Path | str) -> Iterator[Workbook]:
    """Open a spreadsheet file and close it when the block exits.

    Raises:
        WorkbookOpenError: If the file is unreadable or not a spreadsheet
    """
    path = Path(path)
    try:
        book = load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise WorkbookOpenError(f"Cannot open {path}: {e}") from e
    try:
        yield Workbook(path=path, book=book)
    finally:
        book.close()


# =============================================================================
# FastAPI Dependency Providers
# =============================================================================


def get_trace_id(request: Request) -> str:
    """Trace id from the X-Trace-Id header, or a fresh one."""
    return request.headers.get("X-Trace-Id", str(uuid.uuid4()))


def walk_failed(error: DirectoryWalkError, trace_id: str) -> HTTPException:
    """Log a walk-level failure and build the matching 500 response."""
    logger.error("directory_walk_failed", extra={"trace_id": trace_id, "error": str(error)})
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=ErrorResponse(
            error=ErrorDetail(
                message=f"Error while scanning directory: {error}",
                code="directory_walk_failed",
            )
        ).model_dump(),
    )
