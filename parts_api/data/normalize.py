"""
Row normalization: trimming, price parsing, searchable name, serial resolution.
"""
from __future__ import annotations

import math
import re
from typing import Any, Mapping, Sequence

from parts_api.config import SERIAL_CANDIDATES
from parts_api.data.schemas import Record

# Everything except ASCII digits, the decimal point and a minus sign
_PRICE_JUNK_RE = re.compile(r"[^0-9.\-]")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def clean_value(value: Any) -> str:
    """Trimmed string form of a raw cell; None becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip()


def parse_price(text: str) -> float | None:
    """Parse a price like "$1,299.50" or "-12" into a float.

    Currency symbols, thousands separators and any other characters are
    stripped first. Returns None when nothing numeric is left or the
    result is not a finite number.
    """
    cleaned = _PRICE_JUNK_RE.sub("", text or "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def resolve_serial(
    fields: Mapping[str, str],
    candidates: Sequence[str] = SERIAL_CANDIDATES,
) -> str:
    """Pick the serial number for a row.

    The first candidate header with a non-empty value wins. Otherwise the
    value of the first column is used, or "" for an empty row.
    """
    for cand in candidates:
        if fields.get(cand):
            return fields[cand].strip()
    for first_value in fields.values():
        return (first_value or "").strip()
    return ""


# ---------------------------------------------------------------------------
# Row normalization
# ---------------------------------------------------------------------------

def normalize_row(
    raw: Mapping[Any, Any],
    serial_candidates: Sequence[str] = SERIAL_CANDIDATES,
) -> Record:
    """Turn one raw header→value row into a Record."""
    fields: dict[str, str] = {}
    for key, value in raw.items():
        fields[clean_value(key)] = clean_value(value)

    price = parse_price(fields["price"]) if "price" in fields else None
    search_name = fields["name"].lower() if "name" in fields else ""

    return Record(
        fields=fields,
        price=price,
        search_name=search_name,
        serial=resolve_serial(fields, serial_candidates),
    )
