from __future__ import annotations

import csv
import sys
from pathlib import Path
from typing import IO, Iterable, Sequence

from .extract import extract_metric
from .model import Metric, ResultRecord, SeriesSummary, Subject

STATISTICS_COLUMNS = [
    "metric",
    "subject",
    "min",
    "max",
    "mean",
    "sample_count",
    "total_records",
]


def record_columns() -> list[str]:
    columns = ["timestamp"]
    for metric in Metric:
        columns.extend(subject.key(metric) for subject in Subject)
    return columns


def record_row(record: ResultRecord) -> dict[str, str]:
    """One flat row per record; unmeasured readings become empty cells."""
    row = {"timestamp": record.timestamp}
    for metric in Metric:
        for subject in Subject:
            value = extract_metric(record, metric, subject).value
            row[subject.key(metric)] = "" if value is None else repr(value)
    return row


def export_rows(records: Iterable[ResultRecord]) -> list[dict[str, str]]:
    return [record_row(record) for record in records]


def statistics_rows(summary: SeriesSummary) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for metric in Metric:
        for subject in Subject:
            stats = summary.get(metric, subject)
            rows.append(
                {
                    "metric": metric.metric_name,
                    "subject": subject.value,
                    "min": repr(stats.minimum) if stats.has_data else "",
                    "max": repr(stats.maximum) if stats.has_data else "",
                    "mean": repr(stats.mean) if stats.has_data else "",
                    "sample_count": str(stats.sample_count),
                    "total_records": str(summary.total_records),
                }
            )
    return rows


def write_csv(
    rows: Sequence[dict[str, str]],
    destination: Path | str | None = None,
    columns: Sequence[str] | None = None,
) -> None:
    fieldnames = list(columns) if columns is not None else list(rows[0]) if rows else []
    if destination is None:
        _write_rows(sys.stdout, rows, fieldnames)
        return
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        _write_rows(fh, rows, fieldnames)


def _write_rows(fh: IO[str], rows: Sequence[dict[str, str]], fieldnames: list[str]) -> None:
    writer = csv.DictWriter(fh, fieldnames=fieldnames)
    writer.writeheader()
    writer.writerows(rows)
