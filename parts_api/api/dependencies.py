"""
FastAPI dependencies — DataStore access, filter and paging parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query, Request

from parts_api.config import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from parts_api.data.query import parse_int_param
from parts_api.data.schemas import PartsFilter
from parts_api.data.store import DataStore


# ---------------------------------------------------------------------------
# Store (owned by the app, installed during startup)
# ---------------------------------------------------------------------------

def get_store_or_empty(request: Request) -> DataStore:
    """Return the store even if nothing has been loaded (for reload/health)."""
    store: DataStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(503, "Server not initialized yet")
    return store


def get_store(request: Request) -> DataStore:
    store = get_store_or_empty(request)
    if not store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return store


# ---------------------------------------------------------------------------
# Query params
# ---------------------------------------------------------------------------

def parse_parts_filter(
    name: Optional[str] = Query(None, description="Partial, case-insensitive part name"),
    sn: Optional[str] = Query(None, description="Serial number (exact or contains)"),
    search: Optional[str] = Query(None, description="Matches name or serial"),
) -> PartsFilter:
    return PartsFilter(name=name, sn=sn, search=search)


def parse_paging(
    page: Optional[str] = Query(None, description="1-based page number"),
    page_size: Optional[str] = Query(None, description=f"Rows per page (default {DEFAULT_PAGE_SIZE})"),
) -> tuple[int, int]:
    """Page/page_size from raw strings; junk falls back to the defaults."""
    p = parse_int_param(page, DEFAULT_PAGE)
    ps = parse_int_param(page_size, DEFAULT_PAGE_SIZE)
    if ps < 1:
        ps = DEFAULT_PAGE_SIZE
    return max(1, p), ps
