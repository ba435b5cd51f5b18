"""
Faff Finder - Command Line Interface
Run faff analysis on a FIT file or a folder of FIT files from the terminal.
"""

import argparse
import logging
import os
import sys

from faff_finder.analysis import AnalysisSettings
from faff_finder.analyzer import FaffAnalyzer
from faff_finder.buckets import BUCKET_ORDER, DEFAULT_SELECTED_BUCKETS, parse_buckets
from faff_finder.constants import DEFAULT_GAP_THRESHOLD_MS
from faff_finder.export import export_breakdown_csv, export_periods_csv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="faff-finder",
        description="Find slow periods and recording gaps in ride FIT files.",
    )
    parser.add_argument("path", help="FIT file, or folder containing .fit files")
    parser.add_argument(
        "-b", "--bucket",
        dest="buckets",
        action="append",
        metavar="BUCKET",
        help="Duration bucket to report (repeatable). One of: "
             + ", ".join(b.value for b in BUCKET_ORDER) + ". Default: all.",
    )
    parser.add_argument(
        "-g", "--gap-threshold",
        type=float,
        default=DEFAULT_GAP_THRESHOLD_MS / 1000,
        metavar="SECONDS",
        help="Silence longer than this counts as a recording gap (default: %(default)s)",
    )
    parser.add_argument(
        "--no-merge",
        action="store_true",
        help="Keep nearby periods separate instead of merging them",
    )
    parser.add_argument(
        "--csv",
        metavar="DIR",
        help="Also write each file's periods and bucket breakdown as CSV into DIR",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        buckets = parse_buckets(args.buckets) if args.buckets else list(DEFAULT_SELECTED_BUCKETS)
        settings = AnalysisSettings(
            gap_threshold_ms=args.gap_threshold * 1000,
            merge_nearby=not args.no_merge,
        )
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 2

    analyzer = FaffAnalyzer(selected_buckets=buckets, settings=settings)

    if os.path.isdir(args.path):
        print(f"📂 Analyzing FIT files in: {args.path}")
        print("=" * 60)
        results = analyzer.analyze_folder(args.path)
    elif os.path.isfile(args.path):
        result = analyzer.analyze_file(args.path)
        results = [result] if result else []
    else:
        print(f"❌ Error: {args.path} is not a valid file or directory")
        return 1

    if args.csv:
        for result in results:
            if not result.periods:
                continue
            for export in (export_periods_csv, export_breakdown_csv):
                path = export(result, args.csv)
                print(f"💾 Saved {path}")

    print(f"\n✅ Processed {len(results)} file(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
