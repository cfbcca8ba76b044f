"""Parts ingestion, normalization, and in-memory query engine."""
from .loader import iter_raw_rows, read_records
from .store import DataStore, build_snapshot
from .schemas import Page, PartsFilter, Record, Snapshot
from .normalize import normalize_row, parse_price, resolve_serial
from .query import run_query, filter_records, sort_records, paginate, lookup_serial
