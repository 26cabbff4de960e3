from __future__ import annotations

from typing import Mapping, Sequence

from .extract import extract_metric
from .model import (
    Comparison,
    ComparisonResult,
    ComparisonStatus,
    Metric,
    ResultRecord,
    SeriesSummary,
    Statistics,
    Subject,
    Winner,
)

NO_DATA_MARKER = "no data"
DEFAULT_LABELS = {Subject.A: "Image A", Subject.B: "Image B"}


def _fmt_value(value: float | None) -> str:
    return "-" if value is None else f"{value:.2f}"


def _fmt_change(value: float | None) -> str:
    return "-" if value is None else f"{value:+.2f}%"


def _fmt_stats(stats: Statistics) -> str:
    if not stats.has_data:
        return NO_DATA_MARKER
    return (
        f"Min: {stats.minimum:.2f} Avg: {stats.mean:.2f} Max: {stats.maximum:.2f} "
        f"(n={stats.sample_count})"
    )


def _fmt_winner(row: ComparisonResult, labels: Mapping[Subject, str]) -> str:
    if row.status is ComparisonStatus.NO_COMPARISON:
        return ComparisonStatus.NO_COMPARISON.value
    if row.winner is Winner.A:
        return labels[Subject.A]
    if row.winner is Winner.B:
        return labels[Subject.B]
    if row.winner is Winner.TIE:
        return "tie"
    return "-"


def _metric_title(metric_name: str) -> str:
    metric = Metric.from_name(metric_name)
    return metric.display_name if metric is not None else metric_name


def _table(header: list[str], rows: list[list[str]], fmt: str) -> str:
    if fmt == "markdown":
        lines = [
            "| " + " | ".join(header) + " |",
            "| " + " | ".join(["---"] * len(header)) + " |",
        ]
        lines.extend("| " + " | ".join(cells) + " |" for cells in rows)
        return "\n".join(lines)
    widths = [
        max([len(header[idx]), *(len(cells[idx]) for cells in rows)])
        for idx in range(len(header))
    ]
    lines = [
        " | ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(header)).rstrip(),
        "-+-".join("-" * width for width in widths),
    ]
    for cells in rows:
        lines.append(
            " | ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(cells)).rstrip()
        )
    return "\n".join(lines)


def render_statistics_table(
    summary: SeriesSummary,
    labels: Mapping[Subject, str] = DEFAULT_LABELS,
    fmt: str = "text",
) -> str:
    header = ["Metric", labels[Subject.A], labels[Subject.B]]
    rows = [
        [
            metric.display_name,
            _fmt_stats(summary.get(metric, Subject.A)),
            _fmt_stats(summary.get(metric, Subject.B)),
        ]
        for metric in Metric
    ]
    return _table(header, rows, fmt)


def render_comparison_table(
    comparison: Comparison,
    labels: Mapping[Subject, str] = DEFAULT_LABELS,
    fmt: str = "text",
) -> str:
    header = ["Metric", labels[Subject.A], labels[Subject.B], "change", "winner"]
    rows = [
        [
            _metric_title(row.metric),
            _fmt_value(row.value_a),
            _fmt_value(row.value_b),
            _fmt_change(row.percent_change),
            _fmt_winner(row, labels),
        ]
        for row in comparison.rows
    ]
    table = _table(header, rows, fmt)
    s = comparison.summary
    return (
        table
        + "\n\n"
        + f"summary: {labels[Subject.A]}={s.wins_a} {labels[Subject.B]}={s.wins_b} "
        f"tie={s.ties} no_comparison={s.no_comparison}"
    )


def render_recent(records: Sequence[ResultRecord]) -> str:
    lines = []
    for record in records:
        startup_a = extract_metric(record, Metric.STARTUP_TIME, Subject.A)
        startup_b = extract_metric(record, Metric.STARTUP_TIME, Subject.B)
        rps_a = extract_metric(record, Metric.REQUESTS_PER_SECOND, Subject.A)
        rps_b = extract_metric(record, Metric.REQUESTS_PER_SECOND, Subject.B)
        lines.append(f"{record.timestamp}:")
        lines.append(
            f"  Startup: A={_fmt_value(startup_a.value)}s, B={_fmt_value(startup_b.value)}s"
            f" | RPS: A={_fmt_value(rps_a.value)}, B={_fmt_value(rps_b.value)}"
        )
    return "\n".join(lines)
