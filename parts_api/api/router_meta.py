"""
Meta endpoints: liveness/row count and manual reload of the parts file.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from parts_api.data.store import DataStore
from parts_api.api.dependencies import get_store_or_empty
from parts_api.api.response_models import ErrorResponse, HealthResponse, ReloadResponse
from parts_api.errors import IngestionError

router = APIRouter(tags=["meta"])


@router.get("/", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    snapshot = store.snapshot()
    return HealthResponse(
        status="ok",
        rows_loaded=len(snapshot),
        source=snapshot.source,
        loaded_at=snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
    )


@router.post("/reload", response_model=ReloadResponse, responses={500: {"model": ErrorResponse}})
def reload_data(store: DataStore = Depends(get_store_or_empty)):
    """Re-read the parts file and swap in the new dataset.

    Runs in the threadpool; queries keep reading the previous snapshot
    until the new one is installed. On failure the previous one stays.
    Unprotected: put it behind auth before exposing it publicly.
    """
    try:
        snapshot = store.load()
    except IngestionError as exc:
        print(f"  Reload failed: {exc}")
        return JSONResponse(status_code=500, content={"error": "reload_failed", "message": str(exc)})
    return ReloadResponse(status="reloaded", rows=len(snapshot))
