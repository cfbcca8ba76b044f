"""Shared fixtures and helpers for tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from parts_api.api.rate_limit import RateLimiter
from parts_api.data.normalize import normalize_row
from parts_api.data.store import build_snapshot
from parts_api.main import create_app


PISTONS_CSV = (
    "name,price,sn\n"
    "Piston A,$12.50,ABC-1\n"
    "Piston B,9,ABC-2\n"
)

CATALOG_CSV = (
    "name,price,sn,brand\n"
    "Piston A,$12.50,ABC-1,Acme\n"
    "Piston B,9,ABC-2,bosch\n"
    "Oil Filter,\"$1,299.00\",ABC-10,Acme\n"
    "Gasket,n/a,XYZ-7,Delta\n"
    "Piston Ring,4.75,abc-1,acme\n"
    "Spark Plug,2.10,ABC-1,Champion\n"
)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@pytest.fixture
def write_parts(tmp_path):
    """Write text to a parts file in tmp_path and return its path."""
    def _write(text: str, name: str = "LE.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def pistons_file(write_parts):
    return write_parts(PISTONS_CSV)


@pytest.fixture
def catalog_file(write_parts):
    return write_parts(CATALOG_CSV)


# ---------------------------------------------------------------------------
# In-memory data
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog_rows():
    return [
        {"name": "Piston A", "price": "$12.50", "sn": "ABC-1", "brand": "Acme"},
        {"name": "Piston B", "price": "9", "sn": "ABC-2", "brand": "bosch"},
        {"name": "Oil Filter", "price": "$1,299.00", "sn": "ABC-10", "brand": "Acme"},
        {"name": "Gasket", "price": "n/a", "sn": "XYZ-7", "brand": "Delta"},
        {"name": "Piston Ring", "price": "4.75", "sn": "abc-1", "brand": "acme"},
        {"name": "Spark Plug", "price": "2.10", "sn": "ABC-1", "brand": "Champion"},
    ]


@pytest.fixture
def catalog_snapshot(catalog_rows):
    return build_snapshot([normalize_row(r) for r in catalog_rows], source="memory")


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def make_client():
    """Build a TestClient for a fresh app reading `source`. Not started yet."""
    def _make(source, max_requests: int = 10_000) -> TestClient:
        app = create_app(source=source, limiter=RateLimiter(max_requests=max_requests, window=60))
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client, pistons_file):
    with make_client(pistons_file) as c:
        yield c


@pytest.fixture
def catalog_client(make_client, catalog_file):
    with make_client(catalog_file) as c:
        yield c
