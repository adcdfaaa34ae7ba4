"""Pydantic models for the file index.

This module defines the records tracked by the FileIndex and the response
bodies of the index endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FileRecord(BaseModel):
    """One tracked spreadsheet file.

    Attributes:
        filename: Base name of the file, unique within the index
        last_updated: Modification time observed when the file was indexed
    """

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="Base name of the file")
    last_updated: datetime = Field(..., description="Last observed modification time")


class IndexResponse(BaseModel):
    """Response of a full index rebuild."""

    message: str = "All files indexed"
    files: dict[str, FileRecord] = Field(default_factory=dict)


class ChangesResponse(BaseModel):
    """Response of a change check, listing new and updated files."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Checked for new files"
    new_files: list[FileRecord] = Field(default_factory=list, alias="newFiles")
