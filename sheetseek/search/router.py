"""FastAPI router for the /search endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from sheetseek.config import Settings, get_settings
from sheetseek.dependencies import DirectoryWalkError, get_trace_id, logger, walk_failed
from sheetseek.models import ErrorDetail, ErrorResponse
from sheetseek.search.models import MatchRecord
from sheetseek.search.tools import search_directory

router = APIRouter(tags=["search"])


@router.get("/search", response_model=list[MatchRecord])
def search_text(
    text: str = Query(default="", description="Text to search for"),
    settings: Settings = Depends(get_settings),
    trace_id: str = Depends(get_trace_id),
) -> list[MatchRecord]:
    """Search all spreadsheet cells for the given text.

    Args:
        text: Query text, matched case-insensitively as a substring
        settings: Application settings
        trace_id: Request trace id

    Returns:
        Matching cells, possibly an empty list

    Raises:
        HTTPException: 400 for an empty query, 500 if the directory cannot be walked
    """
    if not text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error=ErrorDetail(
                    message="Search text not specified.",
                    type="invalid_request_error",
                    code="empty_query",
                )
            ).model_dump(),
        )

    logger.info("search_request_received", extra={"trace_id": trace_id, "query": text})
    try:
        return search_directory(settings.xlsx_dir, text, settings.spreadsheet_extension)
    except DirectoryWalkError as e:
        raise walk_failed(e, trace_id) from e
