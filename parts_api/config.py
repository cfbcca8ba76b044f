"""
Spare Parts API — Configuration: source file, parsing, query defaults, limits.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Source file, override with PARTS_FILE env var for deployment
# ---------------------------------------------------------------------------
PARTS_FILE = Path(os.environ.get("PARTS_FILE", str(Path.cwd() / "LE.txt")))
PARTS_DELIMITER = os.environ.get("PARTS_DELIMITER", ",")
PARTS_ENCODING = os.environ.get("PARTS_ENCODING", "utf-8")

# Rows handed to the normalizer per read_csv chunk
INGEST_CHUNK_ROWS = int(os.environ.get("INGEST_CHUNK_ROWS", "10000"))

# ---------------------------------------------------------------------------
# Serial number resolution (order matters: first non-empty match wins,
# otherwise the first column of the row is used)
# ---------------------------------------------------------------------------
SERIAL_CANDIDATES = ["serial_number", "sn", "serial", "part_number", "partno"]

# ---------------------------------------------------------------------------
# Query defaults
# ---------------------------------------------------------------------------
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 30

# Logical sort keys → record wire fields. Unknown keys are used verbatim.
SORT_KEY_MAP = {
    "price": "_price",
    "name": "name",
    "sn": "_sn",
    "serial": "_sn",
}

# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
PORT = int(os.environ.get("PORT", "3300"))

# Fixed-window rate limit per client address
RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "60"))
RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "100"))
