"""Cell-level text search feature."""

from sheetseek.search.models import MatchRecord
from sheetseek.search.tools import search_directory, search_in_file

__all__ = ["MatchRecord", "search_directory", "search_in_file"]
