"""
DataStore — the single active in-memory parts snapshot.

Loaded once at startup, queried on every request, replaced wholesale on reload.
A new snapshot is always built off to the side and installed with one
reference swap, so readers see either the old dataset or the new one.
"""
from __future__ import annotations

import datetime as dt
import threading
from pathlib import Path
from typing import Iterable, Optional

from parts_api.config import PARTS_FILE
from parts_api.data.loader import read_records
from parts_api.data.schemas import Record, Snapshot
from parts_api.errors import IngestionError


def build_snapshot(records: Iterable[Record], source: Optional[str] = None) -> Snapshot:
    """Build a snapshot and its serial index from scratch."""
    rows = tuple(records)
    index: dict[str, list[int]] = {}
    for pos, record in enumerate(rows):
        if record.serial:
            index.setdefault(record.serial, []).append(pos)
    return Snapshot(
        records=rows,
        index={sn: tuple(positions) for sn, positions in index.items()},
        source=source,
        loaded_at=dt.datetime.now(dt.timezone.utc),
    )


class DataStore:
    """Owns the active Snapshot and swaps it atomically."""

    def __init__(self, source: Path = PARTS_FILE) -> None:
        self.source = Path(source)
        self._snapshot = Snapshot()
        self._loaded = False
        self._swap_lock = threading.Lock()
        self._reload_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def replace(self, records: Iterable[Record], source: Optional[str] = None) -> Snapshot:
        """Install a brand-new snapshot built from `records`.

        All-or-nothing: if building fails the previous snapshot stays active.
        """
        try:
            snapshot = build_snapshot(records, source)
        except Exception as exc:
            raise IngestionError(f"Could not build snapshot: {exc}") from exc

        with self._swap_lock:
            self._snapshot = snapshot
            self._loaded = True
        return snapshot

    def load(self, source: Path | None = None) -> Snapshot:
        """Read the source file end to end and install the result.

        Concurrent loads run one at a time. Raises IngestionError (or
        SourceNotFoundError) without touching the active snapshot.
        """
        path = Path(source) if source is not None else self.source
        with self._reload_lock:
            print(f"Loading parts from {path}...")
            records = read_records(path)
            snapshot = self.replace(records, source=str(path))
            self.source = path
        print(f"  Loaded {len(snapshot):,} rows into memory ({len(snapshot.index):,} distinct serials)")
        return snapshot

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """The currently installed snapshot. Take it once per request."""
        with self._swap_lock:
            return self._snapshot

    def find_by_serial_exact(self, serial: str) -> list[Record]:
        """Records whose serial matches exactly; empty list when absent."""
        return self.snapshot().by_serial(serial)

    def row_count(self) -> int:
        return len(self.snapshot())
