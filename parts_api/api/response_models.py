"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    rows_loaded: int
    source: Optional[str] = None
    loaded_at: Optional[str] = None


class PartsPageResponse(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    data: list[dict[str, Any]]


class PartsLookupResponse(BaseModel):
    total: int
    data: list[dict[str, Any]]


class ReloadResponse(BaseModel):
    status: str
    rows: int


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
