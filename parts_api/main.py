"""
Spare Parts API — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parts_api.config import PARTS_FILE
from parts_api.data.store import DataStore
from parts_api.api.rate_limit import RateLimiter, rate_limit_middleware
from parts_api.api.router_meta import router as meta_router
from parts_api.api.router_parts import router as parts_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the parts file before serving. A failed load aborts startup."""
    store: DataStore = app.state.store
    print(f"  PARTS_FILE = {store.source}")
    print(f"  PARTS_FILE exists = {store.source.exists()}")
    try:
        store.load()
    except Exception as exc:
        print(f"Failed to load parts file at startup: {exc}")
        raise

    print(f"\nSpare Parts API ready — {store.row_count():,} rows")
    print("Endpoints: GET /spare-parts , GET /spare-parts/{id} , POST /reload\n")
    yield


def create_app(
    store: DataStore | None = None,
    source: Path | None = None,
    limiter: RateLimiter | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Spare Parts API",
        description="In-memory spare parts lookup — filtering, sorting, pagination, serial lookup",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store or DataStore(source or PARTS_FILE)

    # CORS is added last so it wraps the limiter and 429s carry CORS headers
    app.middleware("http")(rate_limit_middleware(limiter or RateLimiter()))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(parts_router)

    return app


app = create_app()
