from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .aggregate import summarize
from .compare import compare_aggregates, compare_record
from .config import AnalysisConfig
from .export import STATISTICS_COLUMNS, export_rows, record_columns, statistics_rows, write_csv
from .formatting import render_comparison_table, render_recent, render_statistics_table
from .loader import (
    NoResultsFound,
    discover_sources,
    find_record,
    load_sources,
    most_recent_first,
)
from .model import ResultRecord

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def load_results(config: AnalysisConfig) -> list[ResultRecord]:
    """Load every record, warning about sources that could not be parsed."""
    sources = discover_sources(config.results_dir, config)
    records = load_sources(sources, max_workers=config.max_workers)
    skipped = len(sources) - len(records)
    if skipped:
        logger.warning("skipped %d unreadable result source(s)", skipped)
    if not records:
        raise NoResultsFound(config.results_dir)
    return records


def run_summary(config: AnalysisConfig, fmt: str) -> None:
    records = load_results(config)
    summary = summarize(records)
    labels = config.subject_labels
    print(f"Found {len(records)} benchmark result(s)")
    print("")
    print("Statistics Summary")
    print(render_statistics_table(summary, labels, fmt))
    print("")
    print("Average Comparison")
    print(render_comparison_table(compare_aggregates(summary, config.tie_epsilon), labels, fmt))
    print("")
    print("Recent Results")
    print(render_recent(most_recent_first(records, config.recent_count)))


def run_compare(config: AnalysisConfig, fmt: str, source: str | None) -> int:
    if source is None:
        record = load_results(config)[-1]
    else:
        found = find_record(config.results_dir, source, config)
        if found is None:
            print(f"Result source not found or unreadable: {source}", file=sys.stderr)
            return 1
        record = found
    print(f"Comparing {record.name} ({record.created_at.isoformat(sep=' ')})")
    print("")
    comparison = compare_record(record, config.tie_epsilon)
    print(render_comparison_table(comparison, config.subject_labels, fmt))
    return 0


def run_export(config: AnalysisConfig, output: Path | None, statistics: bool) -> None:
    records = load_results(config)
    if statistics:
        write_csv(statistics_rows(summarize(records)), output, STATISTICS_COLUMNS)
    else:
        write_csv(export_rows(records), output, record_columns())
    if output is not None:
        print(str(output))


def main(argv: list[str] | None = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--results-dir", type=Path, default=None)
    common.add_argument("--format", choices=["text", "markdown"], default="text")
    common.add_argument("--epsilon", type=float, default=None)
    common.add_argument("--jobs", type=int, default=None)
    common.add_argument("-v", "--verbose", action="store_true")

    parser = argparse.ArgumentParser(description="Container benchmark result analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    summary_cmd = sub.add_parser(
        "summary", parents=[common], help="Statistics over all discovered results"
    )
    summary_cmd.add_argument("--recent", type=int, default=None)

    compare_cmd = sub.add_parser(
        "compare", parents=[common], help="Compare Image A and Image B in one result"
    )
    compare_cmd.add_argument("source", nargs="?", default=None)

    export_cmd = sub.add_parser("export", parents=[common], help="Export results as CSV")
    export_cmd.add_argument("--output", type=Path, default=None)
    export_cmd.add_argument("--statistics", action="store_true")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        config = AnalysisConfig.from_env(
            results_dir=args.results_dir,
            tie_epsilon=args.epsilon,
            max_workers=args.jobs,
            recent_count=getattr(args, "recent", None),
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        if args.command == "summary":
            run_summary(config, args.format)
            return 0
        if args.command == "compare":
            return run_compare(config, args.format, args.source)
        if args.command == "export":
            run_export(config, args.output, args.statistics)
            return 0
    except NoResultsFound as exc:
        print(str(exc), file=sys.stderr)
        return 1

    raise AssertionError(f"unexpected command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
