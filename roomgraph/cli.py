from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from roomgraph.graph.store import GraphStore
from roomgraph.io.export import GraphFormatError, read_json, summarize, write_csv
from roomgraph.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _load(file: str) -> tuple[Optional[GraphStore], int]:
    path = Path(file).expanduser().resolve()
    if not path.exists():
        print(f"[ERROR] File not found: {path}")
        print("        Provide a valid path to a floor plan .json file.")
        return None, 2
    if not path.is_file():
        print(f"[ERROR] Not a file: {path}")
        return None, 2
    try:
        return read_json(path), 0
    except GraphFormatError as exc:
        print(f"[ERROR] Failed to read floor plan: {exc}")
        return None, 3


def _cmd_detect(args: argparse.Namespace) -> int:
    graph, rc = _load(args.file)
    if graph is None:
        return rc
    graph.detect_all_surfaces()
    summary = summarize(graph)
    if args.json:
        print(json.dumps(summary, indent=2))
        return 0

    print("Room detection")
    print(f"  File: {Path(args.file).expanduser().resolve()}")
    print(f"  Vertices: {summary['vertices']}  Edges: {summary['edges']}")
    print(f"  Rooms: {len(summary['surfaces'])}")
    for s in summary["surfaces"]:
        print(f"    {s['id']:>4}  {s['name']:<20} area={s['area']:g}  edges={s['edges']}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    graph, rc = _load(args.file)
    if graph is None:
        return rc
    issues = graph.validate()
    if not issues:
        print("OK: no issues found")
        return 0
    print(f"Found {len(issues)} issue(s):")
    for msg in issues:
        print(f"  - {msg}")
    return 3


def _cmd_export_csv(args: argparse.Namespace) -> int:
    graph, rc = _load(args.file)
    if graph is None:
        return rc
    if args.pixels_per_mm <= 0:
        print(f"[ERROR] --pixels-per-mm must be positive, got {args.pixels_per_mm}")
        return 3
    graph.detect_all_surfaces()
    walls, rooms = write_csv(graph, Path(args.out), pixels_per_mm=args.pixels_per_mm)
    print(f"Saved: {walls}")
    print(f"Saved: {rooms}")
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="roomgraph")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    p.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = p.add_subparsers(dest="cmd", required=True)

    d = sub.add_parser("detect", help="Detect rooms in a floor plan JSON file and list them.")
    d.add_argument("file", help="Path to floor plan .json")
    d.add_argument("--json", action="store_true", help="Print the summary as JSON")
    d.set_defaults(func=_cmd_detect)

    v = sub.add_parser("validate", help="Check a floor plan for dangling references.")
    v.add_argument("file", help="Path to floor plan .json")
    v.set_defaults(func=_cmd_validate)

    e = sub.add_parser("export-csv", help="Write walls.csv and rooms.csv for a floor plan.")
    e.add_argument("file", help="Path to floor plan .json")
    e.add_argument("--out", default="out", help="Output directory (default: out)")
    e.add_argument("--pixels-per-mm", type=float, default=0.1, help="Drawing scale (default: 0.1)")
    e.set_defaults(func=_cmd_export_csv)

    args = p.parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    logger.debug("Running %s", args.cmd)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
