"""
Parts endpoints: filtered/sorted/paginated listing and serial lookup.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from parts_api.api.dependencies import get_store, parse_paging, parse_parts_filter
from parts_api.api.response_models import ErrorResponse, PartsLookupResponse, PartsPageResponse
from parts_api.data.query import lookup_serial, run_query
from parts_api.data.schemas import PartsFilter
from parts_api.data.store import DataStore
from parts_api.errors import QueryError

router = APIRouter(prefix="/spare-parts", tags=["parts"])


def _internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": "internal_server_error"})


@router.get("", response_model=PartsPageResponse, responses={500: {"model": ErrorResponse}})
def list_parts(
    store: DataStore = Depends(get_store),
    filters: PartsFilter = Depends(parse_parts_filter),
    paging: tuple[int, int] = Depends(parse_paging),
    sort: Optional[str] = Query(None, description="Field to sort by, '-' prefix for descending"),
):
    """Filter, sort (whole result set), then paginate."""
    page, page_size = paging
    snapshot = store.snapshot()
    try:
        result = run_query(snapshot, filters, sort=sort, page=page, page_size=page_size)
    except QueryError as exc:
        print(f"  API error: {exc}")
        return _internal_error()
    return result.to_dict()


@router.get("/{serial:path}", response_model=PartsLookupResponse, responses={400: {"model": ErrorResponse}})
def fetch_part(serial: str, store: DataStore = Depends(get_store)):
    """Exact serial lookup via the index, falling back to a contains match."""
    if not serial:
        # "/spare-parts/" reaches this route with an empty path segment
        return JSONResponse(status_code=400, content={"error": "missing id"})

    found = lookup_serial(store.snapshot(), serial)
    return {"total": len(found), "data": [r.to_dict() for r in found]}
