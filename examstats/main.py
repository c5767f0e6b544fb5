from __future__ import annotations

"""CLI entry point for ExamStats."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from analytics.export import attempts_csv, export_csv
from analytics.prepare import prepare_attempts
from storage.schema import Scope
from storage.store import ParquetStore

from . import __version__
from .config.config import load_config, validate_config
from .engine import report_from_store, unique_attempts
from .explain import enable as enable_explain
from .stats.summary import format_summary


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="examstats", description="Exam grading and analytics reports")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    sub = p.add_subparsers(dest="command")

    r = sub.add_parser("report", help="Compute a report from a Parquet snapshot")
    r.add_argument("--data-dir", type=str, required=True, help="Snapshot directory")
    r.add_argument("--config", type=str, default=None, help="Path to YAML config")
    r.add_argument("--exam-id", type=str, default=None)
    r.add_argument("--user-id", type=str, default=None)
    r.add_argument("--section-id", action="append", default=None, help="Repeatable")
    r.add_argument("--out", type=str, default=None, help="Write CSV exports here")
    r.add_argument("--explain", action="store_true", help="Trace skipped records and milestones")
    return p.parse_args(argv)


def run_report(args: argparse.Namespace) -> int:
    cfg = validate_config(load_config(args.config))
    acfg = cfg["analytics"]
    enable_explain(args.explain)

    data_dir = Path(args.data_dir)
    if not data_dir.is_dir():
        print(f"ERROR: Snapshot directory not found: {data_dir}", file=sys.stderr)
        return 2
    store = ParquetStore(data_dir)
    scope = Scope(exam_id=args.exam_id, user_id=args.user_id, section_ids=args.section_id)

    report = report_from_store(store, scope, acfg)
    print(format_summary(report))

    if args.out:
        outdir = Path(args.out)
        export_csv(report, outdir, decimals=acfg.accuracy_decimals)
        if cfg["export"].get("attempts_csv", True):
            attempts = unique_attempts(store.fetch_attempts(scope))
            df = prepare_attempts(attempts, report.attempt_summaries)
            attempts_csv(df, outdir / "attempts.csv", decimals=acfg.accuracy_decimals)
        print(f"Reports saved to: {outdir.resolve()}")
    return 0


def cli(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    if args.version:
        print(f"examstats {__version__}")
        return 0
    if args.command == "report":
        return run_report(args)
    print("Nothing to do. Try: examstats report --data-dir DIR")
    return 1


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
