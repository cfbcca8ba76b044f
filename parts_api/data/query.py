"""
Query engine — filter → sort → paginate over one snapshot.

Pure computation: no I/O, no mutation of the snapshot. Callers fetch the
snapshot once and pass it in, so a reload mid-request can't tear a result.
"""
from __future__ import annotations

import math
import re
from functools import cmp_to_key
from typing import Any, Optional, Sequence

from parts_api.config import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, SORT_KEY_MAP
from parts_api.data.schemas import Page, PartsFilter, Record, Snapshot
from parts_api.errors import QueryError

_INT_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Parameter parsing
# ---------------------------------------------------------------------------

def parse_int_param(value: Any, default: int) -> int:
    """Lenient integer parsing for query-string values.

    Uses the leading integer of the text ("2abc" → 2). Missing,
    non-numeric and zero values fall back to `default`.
    """
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value or default
    m = _INT_PREFIX_RE.match(str(value))
    if not m:
        return default
    return int(m.group(1)) or default


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def _matches(record: Record, name_lc: str | None, sn_lc: str | None, search_lc: str | None) -> bool:
    serial_lc = record.serial.lower()
    if name_lc and name_lc not in record.search_name:
        return False
    if sn_lc and sn_lc not in serial_lc:
        return False
    if search_lc and search_lc not in record.search_name and search_lc not in serial_lc:
        return False
    return True


def filter_records(snapshot: Snapshot, filters: PartsFilter | None = None) -> list[Record]:
    """Records passing every supplied criterion, in snapshot order.

    When `sn` is the only criterion and equals an index key exactly
    (case-sensitive), the indexed records are returned without a scan.
    Otherwise `sn` is a case-insensitive substring match, so "abc-1" misses
    the index but still finds "ABC-1" and "ABC-10" through the scan.
    """
    if filters is None or filters.is_empty:
        return list(snapshot.records)

    if filters.serial_only and snapshot.has_serial(filters.sn):
        return snapshot.by_serial(filters.sn)

    name_lc = filters.name.lower() if filters.name else None
    sn_lc = filters.sn.lower() if filters.sn else None
    search_lc = filters.search.lower() if filters.search else None

    return [r for r in snapshot.records if _matches(r, name_lc, sn_lc, search_lc)]


def lookup_serial(snapshot: Snapshot, serial: str) -> list[Record]:
    """Exact serial hit from the index, else case-insensitive substring scan."""
    if snapshot.has_serial(serial):
        return snapshot.by_serial(serial)
    needle = serial.lower()
    return [r for r in snapshot.records if needle in r.serial.lower()]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).lower()


def compare_values(a: Any, b: Any) -> int:
    """Numeric compare when both are numbers, else lowercased string compare."""
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    sa, sb = _as_text(a), _as_text(b)
    return (sa > sb) - (sa < sb)


def resolve_sort(sort: str) -> tuple[str, bool]:
    """Split "-price" into ("_price", True). Unknown keys pass through."""
    desc = sort.startswith("-")
    key = sort[1:] if desc else sort
    return SORT_KEY_MAP.get(key, key), desc


def sort_records(records: Sequence[Record], sort: Optional[str] = None) -> list[Record]:
    """Sort the full result set by one field; equal keys keep their order."""
    if not sort:
        return list(records)
    key, desc = resolve_sort(sort)
    sign = -1 if desc else 1

    def _cmp(a: Record, b: Record) -> int:
        return sign * compare_values(a.value(key), b.value(key))

    return sorted(records, key=cmp_to_key(_cmp))


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def paginate(records: Sequence[Record], page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice one 1-based page; out-of-range pages clamp to the nearest valid one."""
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    total = len(records)
    total_pages = max(1, math.ceil(total / page_size))
    page = max(1, min(page, total_pages))
    start = (page - 1) * page_size
    end = min(start + page_size, total)
    return Page(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        data=list(records[start:end]),
    )


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------

def run_query(
    snapshot: Snapshot,
    filters: PartsFilter | None = None,
    sort: Optional[str] = None,
    page: int = DEFAULT_PAGE,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """Filter, sort the whole filtered set, then cut one page."""
    try:
        matched = filter_records(snapshot, filters)
        if sort:
            matched = sort_records(matched, sort)
        return paginate(matched, page, page_size)
    except Exception as exc:
        raise QueryError(f"Query failed: {exc}") from exc
