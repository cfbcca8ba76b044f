"""
Record, snapshot, filter and page schemas for the in-memory parts dataset.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Record:
    """One normalized source row plus its derived search/sort fields."""
    fields: Mapping[str, str]
    price: Optional[float] = None
    search_name: str = ""
    serial: str = ""

    def __post_init__(self) -> None:
        # Read-only view so a record can't be patched after it is installed
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: original columns plus `_price`, `_name`, `_sn`."""
        out: dict[str, Any] = dict(self.fields)
        out["_price"] = self.price
        out["_name"] = self.search_name
        out["_sn"] = self.serial
        return out

    def value(self, key: str) -> Any:
        """Look up a wire field by name; None when the record has no such field."""
        if key == "_price":
            return self.price
        if key == "_name":
            return self.search_name
        if key == "_sn":
            return self.serial
        return self.fields.get(key)


@dataclass(frozen=True)
class Snapshot:
    """A complete dataset: records in source order plus the serial index.

    `index` maps each distinct non-empty serial to the positions of every
    record carrying it, in row order. Duplicate serials are kept.
    """
    records: tuple[Record, ...] = ()
    index: Mapping[str, tuple[int, ...]] = field(default_factory=dict)
    source: Optional[str] = None
    loaded_at: Optional[dt.datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))
        object.__setattr__(self, "index", MappingProxyType(dict(self.index)))

    def __len__(self) -> int:
        return len(self.records)

    def has_serial(self, serial: str) -> bool:
        return serial in self.index

    def by_serial(self, serial: str) -> list[Record]:
        """Records whose serial equals `serial` exactly (case-sensitive)."""
        return [self.records[i] for i in self.index.get(serial, ())]


@dataclass
class PartsFilter:
    """Filter criteria for a parts query. Empty strings count as not supplied."""
    name: Optional[str] = None
    sn: Optional[str] = None
    search: Optional[str] = None

    def __post_init__(self) -> None:
        self.name = self.name or None
        self.sn = self.sn or None
        self.search = self.search or None

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.sn or self.search)

    @property
    def serial_only(self) -> bool:
        """True when `sn` is the only criterion given."""
        return bool(self.sn) and not self.name and not self.search


@dataclass
class Page:
    """One page of query results plus paging metadata."""
    page: int
    page_size: int
    total: int
    total_pages: int
    data: list[Record] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total": self.total,
            "total_pages": self.total_pages,
            "data": [r.to_dict() for r in self.data],
        }
