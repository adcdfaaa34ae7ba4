"""Shared Pydantic models for error responses."""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Error information returned to the client."""

    message: str
    type: str = "server_error"
    code: str | None = None


class ErrorResponse(BaseModel):
    """Error envelope used as the detail of HTTP errors."""

    error: ErrorDetail
