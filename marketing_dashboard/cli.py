#!/usr/bin/env python3
"""
Marketing Dashboard CLI — process exports offline or start the API server.

USAGE:
  python -m marketing_dashboard.cli sources                               # List configured sources
  python -m marketing_dashboard.cli process ads.csv --source xiaowang     # Ad export → summary
  python -m marketing_dashboard.cli process ads.csv --source lifecar --output lifecar.json
  python -m marketing_dashboard.cli notes notes.xlsx --account lifecar    # Filtered notes

  python -m marketing_dashboard.cli serve                                 # Start API server
  python -m marketing_dashboard.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from marketing_dashboard.analytics.pipeline import run_pipeline
from marketing_dashboard.config import NOTE_ACCOUNTS, SOURCES
from marketing_dashboard.data.reader import load_rows
from marketing_dashboard.errors import DashboardError


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")


def _run(path: Path, source_name: str):
    config = SOURCES[source_name]
    rows = load_rows(path.read_bytes(), path.name, config)
    return run_pipeline(rows, config)


def cmd_sources(args):
    """List configured sources."""
    print(f"\nSOURCES ({len(SOURCES)}):\n")
    for name, c in SOURCES.items():
        conv = "RMB→AUD" if c.currency_conversion else ""
        print(f"  {name:<16}{c.kind:<7}header row {int(c.header_offset) + 1}  {conv}")
    print()


def cmd_process(args):
    """Process an ad export and print the summary."""
    print("\n" + "=" * 70)
    print("  MARKETING DASHBOARD — AD EXPORT")
    print("=" * 70)

    result = _run(Path(args.file), args.source)
    s = result["summary"]
    print(f"\n  Rows: {result['total_rows']}  |  Days: {len(result['daily_data'])}  |  Currency: {result['currency']}")
    print(f"  Cost: {s['total_cost']:,.2f}  |  Impressions: {s['total_impressions']:,}  |  Clicks: {s['total_clicks']:,}")
    print(f"  CTR: {s['avg_click_rate']:.2f}%  |  Conversions: {s['total_conversions']:,}"
          f"  |  Cost/conversion: {s['avg_conversion_cost']:,.2f}")

    if result["daily_data"]:
        first, last = result["daily_data"][0]["date"], result["daily_data"][-1]["date"]
        print(f"  Date range: {first} to {last}")

    if args.output:
        _write_json(Path(args.output), result)
        print(f"\n  Saved to: {args.output}")
    print()


def cmd_notes(args):
    """Filter and project a notes export."""
    notes = _run(Path(args.file), NOTE_ACCOUNTS[args.account])
    print(f"\nNOTES ({len(notes)}):\n")
    for i, n in enumerate(notes, 1):
        print(f"{i:<4}{n['publish_time'][:19]:<21}{n['type'][:8]:<10}{n['name'][:40]}")
        if i >= 50:
            break
    if args.output:
        _write_json(Path(args.output), notes)
        print(f"\n  Saved to: {args.output}")
    print()


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Marketing Dashboard API on port {args.port}...")
    uvicorn.run("marketing_dashboard.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Marketing Dashboard — ad and notes export processing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    sources_parser = subparsers.add_parser("sources", help="List configured sources")
    sources_parser.set_defaults(func=cmd_sources)

    ad_sources = [name for name, c in SOURCES.items() if c.kind == "ads"]
    process_parser = subparsers.add_parser("process", help="Process an ad export")
    process_parser.add_argument("file", help="CSV or Excel export")
    process_parser.add_argument("--source", choices=ad_sources, default="xiaowang", help="Source config")
    process_parser.add_argument("--output", help="Write the full result as JSON")
    process_parser.set_defaults(func=cmd_process)

    notes_parser = subparsers.add_parser("notes", help="Filter a notes export")
    notes_parser.add_argument("file", help="CSV or Excel export")
    notes_parser.add_argument("--account", choices=list(NOTE_ACCOUNTS), default="lifecar", help="Notes account")
    notes_parser.add_argument("--output", help="Write the notes as JSON")
    notes_parser.set_defaults(func=cmd_notes)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except DashboardError as exc:
        print(f"  Error: {exc.message} {exc.details}".rstrip(), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
