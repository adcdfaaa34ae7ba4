"""Pydantic models for search results.

This module defines the match records returned by the search endpoint.
Models follow the same pattern as index/models.py.
"""

from pydantic import BaseModel, Field


class MatchRecord(BaseModel):
    """A single matching cell.

    Attributes:
        filename: Base name of the spreadsheet file
        sheet: Name of the sheet holding the cell
        cell: Cell coordinate such as 'B7', or 'R7C2' when it cannot be formatted
        content: Original text of the cell
    """

    filename: str = Field(..., description="Base name of the file")
    sheet: str = Field(..., description="Sheet name")
    cell: str = Field(..., description="Cell coordinate")
    content: str = Field(..., description="Cell text")
