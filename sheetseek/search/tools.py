"""Cell-level text search across spreadsheet files.

Every search walks the directory from scratch, opens each spreadsheet
file in turn and compares the query against every cell of every sheet.
Results keep the walk order of files and, within a file, the
sheet -> row -> column order of the cells.

Example:
    search_directory(Path("./xlsx_files"), "apple")
    # [MatchRecord(filename='fruit.xlsx', sheet='Sheet1', cell='A1', content='apple'), ...]
"""

from collections.abc import Callable
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any

from openpyxl.utils import get_column_letter

from sheetseek.dependencies import (
    EmptyQueryError,
    SheetReadError,
    SheetSeekError,
    Workbook,
    is_spreadsheet,
    logger,
    open_workbook,
    walk_directory,
)
from sheetseek.search.models import MatchRecord

WorkbookOpener = Callable[[Path], AbstractContextManager[Workbook]]

# Last column of a worksheet is XFD.
MAX_COLUMNS = 16384


# =============================================================================
# Helper Functions
# =============================================================================


def cell_coordinate(row: int, column: int) -> str:
    """Format 0-based row and column indices as a cell coordinate.

    Falls back to the R1C1 form when the indices cannot be expressed
    as a column letter and row number.

    Args:
        row: 0-based row index
        column: 0-based column index

    Returns:
        Coordinate string

    Examples:
        >>> cell_coordinate(0, 0)
        'A1'
        >>> cell_coordinate(6, 1)
        'B7'
        >>> cell_coordinate(0, 20000)
        'R1C20001'
    """
    try:
        if row < 0 or not 0 <= column < MAX_COLUMNS:
            raise ValueError(f"Invalid cell index ({row}, {column})")
        return f"{get_column_letter(column + 1)}{row + 1}"
    except ValueError:
        return f"R{row + 1}C{column + 1}"


def cell_matches(cell: Any, query: str) -> bool:
    """Case-insensitive substring test; non-text and empty cells never match."""
    if not isinstance(cell, str) or not cell:
        return False
    return query.lower() in cell.lower()


# =============================================================================
# Search Operations
# =============================================================================


def search_in_file(
    path: Path | str,
    query: str,
    opener: WorkbookOpener = open_workbook,
) -> list[MatchRecord]:
    """Find every cell of a spreadsheet file that contains the query.

    A sheet whose rows cannot be read is logged and skipped; the other
    sheets of the file are still searched.

    Args:
        path: Path to the spreadsheet file
        query: Text to look for
        opener: Context manager factory returning an open Workbook

    Returns:
        Matches in sheet, row, column order

    Raises:
        WorkbookOpenError: If the file cannot be opened
    """
    path = Path(path)
    results: list[MatchRecord] = []

    with opener(path) as workbook:
        for sheet_name in workbook.sheet_names:
            logger.debug("scanning_sheet", extra={"path": str(path), "sheet": sheet_name})
            try:
                rows = workbook.rows(sheet_name)
            except SheetReadError as e:
                logger.warning(
                    "sheet_read_error",
                    extra={"path": str(path), "sheet": sheet_name, "error": str(e)},
                )
                continue

            for row_index, row in enumerate(rows):
                for col_index, cell in enumerate(row):
                    if not cell_matches(cell, query):
                        continue
                    coordinate = cell_coordinate(row_index, col_index)
                    results.append(
                        MatchRecord(
                            filename=path.name,
                            sheet=sheet_name,
                            cell=coordinate,
                            content=cell,
                        )
                    )
                    logger.debug(
                        "match_found",
                        extra={"path": str(path), "sheet": sheet_name, "cell": coordinate},
                    )

    return results


def search_directory(
    directory: Path | str,
    query: str,
    extension: str = ".xlsx",
    opener: WorkbookOpener = open_workbook,
) -> list[MatchRecord]:
    """Search every spreadsheet file below a directory.

    Files that cannot be opened are logged and skipped, so the result may
    be partial. An empty list means nothing matched.

    Args:
        directory: Directory to walk recursively
        query: Text to look for, must not be empty
        extension: Spreadsheet file extension, compared case-insensitively
        opener: Context manager factory returning an open Workbook

    Returns:
        Matches in file walk order, then per-file order

    Raises:
        EmptyQueryError: If query is empty
        DirectoryWalkError: If the directory cannot be walked at all
    """
    if not query:
        raise EmptyQueryError("Search text is empty")

    logger.info("search_started", extra={"query": query, "directory": str(directory)})
    results: list[MatchRecord] = []

    for entry in walk_directory(directory):
        if entry.is_dir or not is_spreadsheet(entry.name, extension):
            continue
        logger.debug("scanning_file", extra={"path": str(entry.path)})
        try:
            results.extend(search_in_file(entry.path, query, opener=opener))
        except SheetSeekError as e:
            logger.warning(
                "file_search_error", extra={"path": str(entry.path), "error": str(e)}
            )

    logger.info("search_completed", extra={"query": query, "total": len(results)})
    return results
