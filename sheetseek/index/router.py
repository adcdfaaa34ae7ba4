"""FastAPI router for the /index and /check-new endpoints."""

from fastapi import APIRouter, Depends, Request

from sheetseek.config import Settings, get_settings
from sheetseek.dependencies import (
    DirectoryWalkError,
    get_trace_id,
    logger,
    walk_failed,
)
from sheetseek.index.models import ChangesResponse, IndexResponse
from sheetseek.index.tools import FileIndex

router = APIRouter(tags=["index"])


def get_file_index(request: Request) -> FileIndex:
    """FastAPI dependency provider for the application's FileIndex."""
    return request.app.state.file_index


@router.get("/index", response_model=IndexResponse)
def rebuild_index(
    settings: Settings = Depends(get_settings),
    file_index: FileIndex = Depends(get_file_index),
    trace_id: str = Depends(get_trace_id),
) -> IndexResponse:
    """Index every spreadsheet file in the configured directory."""
    logger.info("index_rebuild_started", extra={"trace_id": trace_id})
    try:
        files = file_index.rebuild(settings.xlsx_dir, settings.spreadsheet_extension)
    except DirectoryWalkError as e:
        raise walk_failed(e, trace_id) from e
    return IndexResponse(files=files)


@router.get("/check-new", response_model=ChangesResponse)
def check_for_changes(
    settings: Settings = Depends(get_settings),
    file_index: FileIndex = Depends(get_file_index),
    trace_id: str = Depends(get_trace_id),
) -> ChangesResponse:
    """Report spreadsheet files that are new or changed since last seen."""
    logger.info("change_check_started", extra={"trace_id": trace_id})
    try:
        new_files = file_index.detect_changes(settings.xlsx_dir, settings.spreadsheet_extension)
    except DirectoryWalkError as e:
        raise walk_failed(e, trace_id) from e
    return ChangesResponse(new_files=new_files)
