"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    slots: dict[str, Optional[dict]]


class SourceInfo(BaseModel):
    name: str
    label: str
    kind: str
    header_offset: int
    currency_conversion: bool
    has_default_file: bool


class SourcesResponse(BaseModel):
    sources: list[SourceInfo]


class NotesResponse(BaseModel):
    success: bool
    data: list[dict[str, str]]
    total: int
    message: str = ""
    source: Optional[str] = None
    version: Optional[int] = None
    uploaded_at: Optional[str] = None
    needs_upload: bool = False


class ClearResponse(BaseModel):
    success: bool
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: str = ""


class AdsResponse(BaseModel):
    """Ad pipeline result; ``data`` is None until the first upload."""
    success: bool
    data: Optional[dict[str, Any]] = None
    row_count: int = 0
    message: str = ""
    filename: Optional[str] = None
    source: Optional[str] = None
    version: Optional[int] = None
    uploaded_at: Optional[str] = None
    needs_upload: bool = False


# Documented failure bodies for upload/fetch routers
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 404, 500)}
