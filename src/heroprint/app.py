from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from heroprint.controllers.extract_controller import ExtractController
from heroprint.core.managers.config_manager import config_manager
from heroprint.core.utils.configure_logging import configure_logger
from heroprint.dom.builder import SnapshotBuilder
from heroprint.dom.core import Viewport
from heroprint.engine import extract_snapshot
from heroprint.errors import SnapshotError, ExtractionFailure

logger = logging.getLogger(__name__)


def _parse_viewport(value: str) -> Viewport:
    """'1440x900' -> Viewport(width=1440, height=900)"""
    try:
        width, height = value.lower().split("x", 1)
        return Viewport(width=float(width), height=float(height))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid viewport '{value}', expected WIDTHxHEIGHT: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="heroprint", description="Fingerprint the hero region of rendered pages.")
    parser.add_argument("--log-level", help="Overrides debug.level from settings.json (e.g. DEBUG).")
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Fingerprint a single snapshot (.json or .html).")
    p_extract.add_argument("file", type=Path)
    p_extract.add_argument("--viewport", type=_parse_viewport, help="Viewport as WIDTHxHEIGHT (e.g. 1440x900).")
    p_extract.add_argument("--indent", type=int, default=2, help="JSON indentation (default 2).")

    p_batch = sub.add_parser("batch", help="Fingerprint every snapshot in a directory.")
    p_batch.add_argument("directory", type=Path)
    p_batch.add_argument("--output", "-o", type=Path, help="Export file (.csv, .json or .xlsx).")
    p_batch.add_argument("--workers", type=int, help="Worker processes (default from settings.json).")
    p_batch.add_argument("--viewport", type=_parse_viewport, help="Viewport as WIDTHxHEIGHT.")
    return parser


def handle_extract(args: argparse.Namespace) -> int:
    try:
        snapshot = SnapshotBuilder(args.viewport).load(args.file)
        fingerprint = extract_snapshot(snapshot)
    except (SnapshotError, ExtractionFailure) as e:
        logger.error(f"Could not fingerprint {args.file}: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(fingerprint.model_dump_json(indent=args.indent or None))
    return 0


def handle_batch(args: argparse.Namespace) -> int:
    controller = ExtractController(workers=args.workers, viewport=args.viewport)
    try:
        paths = controller.discover(args.directory)
    except FileNotFoundError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if not paths:
        print("No snapshots found.")
        return 0

    print(f"🚀 Fingerprinting {len(paths)} snapshots using {controller.workers} workers...")
    pbar = tqdm(total=len(paths), desc="Fingerprinting", unit="page")

    def progress_update(current, total):
        pbar.n = current
        pbar.refresh()

    summary = controller.run_batch(paths, progress_callback=progress_update)
    pbar.close()

    print(f"\n✅ {summary['succeeded']} fingerprinted, {summary['failed']} failed "
          f"in {summary['duration']:.2f}s")
    for error in controller.errors:
        print(f"   ⚠️  {error['path']}: {error['error']}")

    if args.output:
        try:
            out = controller.export(args.output)
        except (ValueError, PermissionError) as e:
            print(f"❌ Export failed: {e}", file=sys.stderr)
            return 1
        print(f"💾 Results written to {out}")

    return 0 if not summary["failed"] else 2


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logger(
        args.log_level or config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("debug.module_levels"),
        silenced_loggers=config_manager.get_nested("debug.silenced_loggers"),
    )

    if args.command == "extract":
        return handle_extract(args)
    return handle_batch(args)


if __name__ == "__main__":
    sys.exit(main())
