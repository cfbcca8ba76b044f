"""
Streaming ingestion of the delimited parts export into normalized records.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Sequence

import pandas as pd

from parts_api.config import (
    PARTS_FILE, PARTS_DELIMITER, PARTS_ENCODING, INGEST_CHUNK_ROWS, SERIAL_CANDIDATES,
)
from parts_api.data.normalize import normalize_row
from parts_api.data.schemas import Record
from parts_api.errors import IngestionError, RowDecodeError, SourceNotFoundError


# ---------------------------------------------------------------------------
# Raw row stream
# ---------------------------------------------------------------------------

def _cell(value: Any) -> str:
    """Raw cell as a string; missing cells from short rows become ""."""
    if isinstance(value, str):
        return value
    if value is None or pd.isna(value):
        return ""
    return str(value)


def iter_raw_rows(
    path: Path = PARTS_FILE,
    delimiter: str = PARTS_DELIMITER,
    encoding: str = PARTS_ENCODING,
    chunk_rows: int = INGEST_CHUNK_ROWS,
    skipped: list[list[str]] | None = None,
) -> Iterator[dict[str, str]]:
    """Yield header→value dicts for every well-formed row, in file order.

    The file is read in chunks of `chunk_rows` so the whole export never
    sits in a DataFrame at once. Lines with more fields than the header are
    logged, appended to `skipped` (when given) and dropped.
    """
    path = Path(path)
    if not path.exists():
        raise SourceNotFoundError(f"Parts file not found at {path}")

    def _on_bad_line(bad_line: list[str]) -> None:
        print(f"  Warning: skipping malformed row ({len(bad_line)} fields): {bad_line[:3]}...")
        if skipped is not None:
            skipped.append(bad_line)
        return None

    try:
        reader = pd.read_csv(
            path,
            sep=delimiter,
            encoding=encoding,
            # object dtype skips type inference so "007" stays "007"
            dtype=object,
            keep_default_na=False,
            na_filter=False,
            engine="python",
            on_bad_lines=_on_bad_line,
            chunksize=chunk_rows,
        )
    except pd.errors.EmptyDataError:
        return
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, ValueError) as exc:
        raise IngestionError(f"Could not open {path}: {exc}") from exc

    try:
        with reader:
            for chunk in reader:
                for row in chunk.to_dict("records"):
                    yield {str(k): _cell(v) for k, v in row.items()}
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise IngestionError(f"Failed reading {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Normalized records
# ---------------------------------------------------------------------------

def read_records(
    path: Path = PARTS_FILE,
    delimiter: str = PARTS_DELIMITER,
    encoding: str = PARTS_ENCODING,
    chunk_rows: int = INGEST_CHUNK_ROWS,
    serial_candidates: Sequence[str] = SERIAL_CANDIDATES,
) -> list[Record]:
    """Read and normalize the whole source file.

    Rows that can't be decoded or normalized are logged and skipped.
    Source-level failures raise IngestionError / SourceNotFoundError.
    """
    records: list[Record] = []
    malformed: list[list[str]] = []
    failed = 0

    rows = iter_raw_rows(path, delimiter, encoding, chunk_rows, skipped=malformed)
    for row_no, raw in enumerate(rows, start=1):
        try:
            records.append(normalize_row(raw, serial_candidates))
        except Exception as exc:
            failed += 1
            err = RowDecodeError(f"data row {row_no}: {exc}")
            print(f"  Warning: skipping row: {err}")

    skipped = len(malformed) + failed
    if skipped:
        print(f"  Read {len(records):,} rows from {Path(path).name} ({skipped:,} skipped)")
    else:
        print(f"  Read {len(records):,} rows from {Path(path).name}")
    return records
