#!/usr/bin/env python3
"""
Spare Parts API CLI — Entry point for the API server and one-off queries.

USAGE:
  python -m parts_api.cli serve                                  # Start API server
  python -m parts_api.cli serve --port 3300

  python -m parts_api.cli query --search piston                  # Filter + paginate
  python -m parts_api.cli query --name pump --sort -price --page 2 --page-size 10

  python -m parts_api.cli lookup ABC-1                           # Serial lookup
  python -m parts_api.cli check                                  # Load stats only
  python -m parts_api.cli check --file ./exports/LE.txt
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from parts_api.config import PARTS_FILE, PORT
from parts_api.data.query import lookup_serial, run_query
from parts_api.data.schemas import PartsFilter
from parts_api.data.store import DataStore
from parts_api.errors import IngestionError, QueryError


def _load(args) -> DataStore:
    store = DataStore(Path(args.file))
    try:
        store.load()
    except IngestionError as exc:
        print(f"  Load failed: {exc}", file=sys.stderr)
        sys.exit(1)
    return store


def cmd_query(args):
    """Run one query against the file and print the JSON page."""
    store = _load(args)
    filters = PartsFilter(name=args.name, sn=args.sn, search=args.search)
    try:
        result = run_query(store.snapshot(), filters, sort=args.sort, page=args.page, page_size=args.page_size)
    except QueryError as exc:
        print(f"  Query failed: {exc}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


def cmd_lookup(args):
    """Exact serial lookup, falling back to a contains match."""
    store = _load(args)
    found = lookup_serial(store.snapshot(), args.serial)
    print(json.dumps({"total": len(found), "data": [r.to_dict() for r in found]}, indent=2, ensure_ascii=False))


def cmd_check(args):
    """Load the file and report row / serial statistics."""
    store = _load(args)
    snapshot = store.snapshot()
    no_serial = sum(1 for r in snapshot.records if not r.serial)
    no_price = sum(1 for r in snapshot.records if r.price is None)
    dupes = {sn: len(pos) for sn, pos in snapshot.index.items() if len(pos) > 1}

    print("\n" + "=" * 70)
    print("  SPARE PARTS — SOURCE CHECK")
    print("=" * 70)
    print(f"  File:              {snapshot.source}")
    print(f"  Rows:              {len(snapshot):,}")
    print(f"  Distinct serials:  {len(snapshot.index):,}")
    print(f"  Duplicate serials: {len(dupes):,}")
    print(f"  Rows w/o serial:   {no_serial:,}")
    print(f"  Rows w/o price:    {no_price:,}")
    for sn, count in sorted(dupes.items(), key=lambda kv: kv[1], reverse=True)[:10]:
        print(f"    {sn[:40]:<42}{count:>6} rows")
    print("=" * 70 + "\n")


def cmd_serve(args):
    """Start the API server."""
    import os
    import uvicorn
    source = Path(args.file).resolve()
    print(f"\nStarting Spare Parts API on port {args.port}...")
    if args.reload:
        # The reloader re-imports parts_api.main in a child process, which reads config from env
        os.environ["PARTS_FILE"] = str(source)
        uvicorn.run("parts_api.main:app", host="0.0.0.0", port=args.port, reload=True,
                    timeout_keep_alive=65)
        return

    from parts_api.main import create_app
    uvicorn.run(create_app(source=source), host="0.0.0.0", port=args.port, timeout_keep_alive=65)


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Spare Parts API — in-memory parts lookup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    def _add_file(p):
        p.add_argument("--file", default=str(PARTS_FILE), help=f"Parts file (default {PARTS_FILE})")

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=PORT, help=f"Port (default {PORT})")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    _add_file(serve_parser)
    serve_parser.set_defaults(func=cmd_serve)

    # query subcommand
    query_parser = subparsers.add_parser("query", help="Filter, sort and paginate parts")
    query_parser.add_argument("--name", help="Partial, case-insensitive name")
    query_parser.add_argument("--sn", help="Serial number (exact or contains)")
    query_parser.add_argument("--search", help="Matches name or serial")
    query_parser.add_argument("--sort", help="Sort field, '-' prefix for descending")
    query_parser.add_argument("--page", type=int, default=1, help="1-based page")
    query_parser.add_argument("--page-size", type=int, default=30, help="Rows per page (default 30)")
    _add_file(query_parser)
    query_parser.set_defaults(func=cmd_query)

    # lookup subcommand
    lookup_parser = subparsers.add_parser("lookup", help="Look up parts by serial")
    lookup_parser.add_argument("serial", help="Serial number")
    _add_file(lookup_parser)
    lookup_parser.set_defaults(func=cmd_lookup)

    # check subcommand
    check_parser = subparsers.add_parser("check", help="Load the file and print stats")
    _add_file(check_parser)
    check_parser.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
