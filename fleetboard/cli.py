#!/usr/bin/env python3
"""
Fleetboard CLI — fetch, summarize and export the sheet-backed dashboards.

USAGE:
  python -m fleetboard.cli fetch inquiry                    # Fetch + map, print a preview
  python -m fleetboard.cli fetch shipment --url <csv-url>   # Override the source URL

  python -m fleetboard.cli stats inquiry                    # Today/yesterday window stats
  python -m fleetboard.cli stats inquiry --at 2026-02-19    # Window around another day
  python -m fleetboard.cli stats shipment --all             # Stats over every record

  python -m fleetboard.cli export inquiry                   # CSV into FLEETBOARD_EXPORT_DIR
  python -m fleetboard.cli export shipment --format xlsx --output ./report.xlsx

  python -m fleetboard.cli watch inquiry --cycles 3         # Run the refresh loop, print each cycle

  python -m fleetboard.cli serve                            # Start API server
  python -m fleetboard.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import json
import os
import sys
from pathlib import Path

from fleetboard.analytics.common import sanitize_for_json
from fleetboard.analytics.dashboard import compute_stats
from fleetboard.analytics.window import select_window
from fleetboard.config import Settings
from fleetboard.data.datasets import get_dataset
from fleetboard.data.export import export_filename, write_records_csv
from fleetboard.data.loader import SheetIngestor
from fleetboard.data.scheduler import RefreshScheduler
from fleetboard.data.store import DataStore, RefreshStatus, Snapshot
from fleetboard.errors import FleetboardError
from fleetboard.logging_config import setup_logging
from fleetboard.reports.dashboard_report import generate_excel
from fleetboard.session import AccessGate


def _ingestor(args, settings: Settings) -> SheetIngestor:
    dataset = get_dataset(args.dataset)
    url = getattr(args, "url", None) or settings.source_url(dataset.name)
    return SheetIngestor(dataset, url, timeout=settings.http_timeout)


def _reference(value: str | None) -> dt.date | None:
    if value is None:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value} (expected YYYY-MM-DD)")


def cmd_fetch(args, settings: Settings):
    """Fetch one sheet and print a preview of the mapped records."""
    ingestor = _ingestor(args, settings)
    records = ingestor.fetch_records()
    print(f"\n  {ingestor.dataset.title}: {len(records):,} records\n")
    for record in records[:args.limit]:
        print("  " + json.dumps(record.to_dict(), default=str))
    if len(records) > args.limit:
        print(f"  ... {len(records) - args.limit:,} more")
    print()


def cmd_stats(args, settings: Settings):
    """Print stats for the reporting window (or every record with --all) as JSON."""
    ingestor = _ingestor(args, settings)
    records = ingestor.fetch_records()
    subset = records if args.all else select_window(records, args.at)
    stats = compute_stats(subset, ingestor.dataset)
    print(json.dumps(sanitize_for_json(stats), indent=2))


def cmd_export(args, settings: Settings):
    """Write the current RecordSet to CSV or a styled workbook."""
    ingestor = _ingestor(args, settings)
    records = ingestor.fetch_records()
    dataset = ingestor.dataset
    out = Path(args.output) if args.output else settings.export_dir / export_filename(dataset, args.format)
    if args.format == "xlsx":
        out.parent.mkdir(parents=True, exist_ok=True)
        path = generate_excel(records, dataset, out)
    else:
        path = write_records_csv(records, dataset, out)
    print(f"\n  {len(records):,} records written to {path}\n")


def _print_snapshot(name: str, snap: Snapshot) -> None:
    stamp = f"{dt.datetime.now():%H:%M:%S}"
    if snap.status is RefreshStatus.READY:
        print(f"  [{stamp}] {name}: {len(snap.records):,} records")
    elif snap.status is RefreshStatus.FAILED:
        print(f"  [{stamp}] {name}: refresh failed ({snap.error}); keeping {len(snap.records):,} records")


async def _watch(ingestor: SheetIngestor, settings: Settings, cycles: int | None) -> None:
    store = DataStore(ingestor.dataset)
    scheduler = RefreshScheduler(ingestor, store, interval=settings.refresh_interval(ingestor.dataset.name))
    finished = asyncio.Event()
    completed = 0

    def on_snapshot(snap: Snapshot) -> None:
        nonlocal completed
        if snap.loading:
            return
        _print_snapshot(ingestor.dataset.name, snap)
        completed += 1
        if cycles is not None and completed >= cycles:
            finished.set()

    store.subscribe(on_snapshot)
    scheduler.start(AccessGate(settings.passcode).login(settings.passcode))
    try:
        await finished.wait()
    finally:
        await scheduler.aclose()


def cmd_watch(args, settings: Settings):
    """Run the refresh lifecycle in the foreground until --cycles completes or Ctrl-C."""
    ingestor = _ingestor(args, settings)
    print(f"\n  Watching {ingestor.dataset.title} every "
          f"{settings.refresh_interval(ingestor.dataset.name):g}s (Ctrl-C to stop)\n")
    try:
        asyncio.run(_watch(ingestor, settings, args.cycles))
    except KeyboardInterrupt:
        print("\n  Stopped.\n")


def cmd_serve(args, settings: Settings):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Fleetboard API on port {args.port}...")
    uvicorn.run("fleetboard.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleetboard — live inquiry and shipping dashboards from published sheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # fetch subcommand
    fetch_parser = subparsers.add_parser("fetch", help="Fetch and map one sheet")
    fetch_parser.add_argument("dataset", help="inquiry | shipment")
    fetch_parser.add_argument("--url", help="Override the published CSV URL")
    fetch_parser.add_argument("--limit", type=int, default=5, help="Records to preview (default 5)")
    fetch_parser.set_defaults(func=cmd_fetch)

    # stats subcommand
    stats_parser = subparsers.add_parser("stats", help="Print dashboard stats")
    stats_parser.add_argument("dataset", help="inquiry | shipment")
    stats_parser.add_argument("--url", help="Override the published CSV URL")
    stats_parser.add_argument("--at", type=_reference, help="Reference day YYYY-MM-DD (default today)")
    stats_parser.add_argument("--all", action="store_true", help="Ignore the reporting window")
    stats_parser.set_defaults(func=cmd_stats)

    # export subcommand
    export_parser = subparsers.add_parser("export", help="Export records to CSV or XLSX")
    export_parser.add_argument("dataset", help="inquiry | shipment")
    export_parser.add_argument("--url", help="Override the published CSV URL")
    export_parser.add_argument("--format", choices=["csv", "xlsx"], default="csv", help="File format (default csv)")
    export_parser.add_argument("--output", help="Output file (default: export dir, dated name)")
    export_parser.set_defaults(func=cmd_export)

    # watch subcommand
    watch_parser = subparsers.add_parser("watch", help="Run the refresh loop in the foreground")
    watch_parser.add_argument("dataset", help="inquiry | shipment")
    watch_parser.add_argument("--url", help="Override the published CSV URL")
    watch_parser.add_argument("--cycles", type=int, help="Stop after N completed cycles")
    watch_parser.set_defaults(func=cmd_watch)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = Settings.from_env()
        setup_logging(settings.log_level)
        args.func(args, settings)
    except FleetboardError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
