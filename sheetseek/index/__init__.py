"""File index feature."""

from sheetseek.index.models import FileRecord
from sheetseek.index.tools import FileIndex

__all__ = ["FileIndex", "FileRecord"]
