"""Shared pytest fixtures."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables before importing app modules
load_dotenv()

# Set test defaults if not provided
if not os.environ.get("XLSX_DIR"):
    os.environ["XLSX_DIR"] = "/tmp/test-xlsx-files"

from fastapi.testclient import TestClient  # noqa: E402
from openpyxl import Workbook  # noqa: E402

from sheetseek.config import Settings, get_settings  # noqa: E402
from sheetseek.index import FileIndex  # noqa: E402
from sheetseek.main import create_app  # noqa: E402

SheetData = dict[str, list[list[object]]]


def write_workbook(path: Path, sheets: SheetData) -> Path:
    """Write an .xlsx file with the given sheets and rows."""
    path.parent.mkdir(parents=True, exist_ok=True)
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def xlsx_dir(tmp_path: Path) -> Path:
    """Create an empty spreadsheet directory."""
    directory = tmp_path / "xlsx_files"
    directory.mkdir()
    return directory


@pytest.fixture
def make_workbook(xlsx_dir: Path) -> Callable[..., Path]:
    """Factory writing workbooks relative to xlsx_dir."""

    def _make(name: str, sheets: SheetData) -> Path:
        return write_workbook(xlsx_dir / name, sheets)

    return _make


@pytest.fixture
def file_index() -> FileIndex:
    """Create an empty FileIndex."""
    return FileIndex()


@pytest.fixture
def client(xlsx_dir: Path) -> TestClient:
    """Create a FastAPI test client serving xlsx_dir."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: Settings(xlsx_dir=xlsx_dir)
    return TestClient(app)
