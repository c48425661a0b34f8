"""
Client-side transfer commands: CSV export/import and a text summary.

Usage:
    python -m healthtrack export ~/healthtrack-backup
    python -m healthtrack import ~/healthtrack-backup/healthtrack_weights.csv
    python -m healthtrack summary --on 2026-03-01

Talks to the REST API at HEALTHTRACK_API_BASE_URL when it is up, otherwise
reads and writes the local JSON store (HEALTHTRACK_LOCAL_STORE_PATH).
"""
import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from healthtrack.analysis.units import InvalidMeasurementError
from healthtrack.config import get_settings
from healthtrack.reports.digest import format_daily_digest
from healthtrack.store.cache import HealthDataStore, open_repository
from healthtrack.store.csv_io import export_csv, import_csv

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="healthtrack", description="HealthTrack data tools")
    sub = parser.add_subparsers(dest="command", required=True)

    p_export = sub.add_parser("export", help="write all data as CSV files")
    p_export.add_argument("out_dir", type=Path)

    p_import = sub.add_parser("import", help="replace one collection from an exported CSV")
    p_import.add_argument("files", type=Path, nargs="+")

    p_summary = sub.add_parser("summary", help="print the daily summary")
    p_summary.add_argument("--on", type=date.fromisoformat, default=None,
                           help="date (YYYY-MM-DD), default today")
    return parser


def run(argv: Optional[List[str]] = None, store: Optional[HealthDataStore] = None) -> int:
    """
    Run one transfer command.

    Args:
        argv: command-line arguments (without the program name).
        store: store to use; defaults to one opened from Settings.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    if store is None:
        store = HealthDataStore(open_repository(get_settings()))

    if args.command == "export":
        for path in export_csv(store.snapshot(), args.out_dir):
            print(path)
        return 0

    if args.command == "import":
        failed = 0
        for path in args.files:
            result = import_csv(store, path)
            print(f"{path.name}: {result.message}")
            failed += not result.success
        return 1 if failed else 0

    try:
        print(format_daily_digest(store.summary(args.on)))
    except InvalidMeasurementError as exc:
        logger.error("Cannot build summary: %s", exc)
        return 1
    return 0


def main() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    sys.exit(run())
