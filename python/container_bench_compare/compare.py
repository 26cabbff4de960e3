from __future__ import annotations

import math
from typing import Iterable

from .extract import extract_metric
from .model import (
    Comparison,
    ComparisonResult,
    ComparisonStatus,
    ComparisonSummary,
    Metric,
    MetricValue,
    Polarity,
    ResultRecord,
    SeriesSummary,
    Statistics,
    Subject,
    Winner,
)


def percent_change(value_a: float, value_b: float) -> float | None:
    if value_a == 0.0:
        return None
    change = (value_b - value_a) / value_a * 100.0
    if not math.isfinite(change):
        return None
    return change


def pick_winner(
    value_a: float, value_b: float, polarity: Polarity | None, epsilon: float = 0.0
) -> Winner | None:
    if polarity is None:
        return None
    if abs(value_b - value_a) <= epsilon:
        return Winner.TIE
    a_smaller = value_a < value_b
    if polarity is Polarity.LOWER_IS_BETTER:
        return Winner.A if a_smaller else Winner.B
    return Winner.B if a_smaller else Winner.A


def compare(
    value_a: MetricValue,
    value_b: MetricValue,
    metric_name: str,
    epsilon: float = 0.0,
) -> ComparisonResult:
    """Compare Image A against Image B for one metric, A being the baseline.

    Either side unmeasured, or a zero baseline, gives ``NO_COMPARISON`` with
    no change and no winner. Metrics without a known polarity are compared
    but no winner is declared.
    """
    if epsilon < 0:
        raise ValueError("epsilon must be >= 0")
    a, b = value_a.value, value_b.value
    if a is None or b is None:
        return _no_comparison(metric_name, a, b)
    change = percent_change(a, b)
    if change is None:
        return _no_comparison(metric_name, a, b)

    metric = Metric.from_name(metric_name)
    polarity = metric.polarity if metric is not None else None
    return ComparisonResult(
        metric=metric_name,
        value_a=a,
        value_b=b,
        percent_change=change,
        winner=pick_winner(a, b, polarity, epsilon),
        status=ComparisonStatus.COMPARED,
    )


def compare_record(
    record: ResultRecord,
    epsilon: float = 0.0,
    metrics: Iterable[Metric] = tuple(Metric),
) -> Comparison:
    rows = [
        compare(
            extract_metric(record, metric, Subject.A),
            extract_metric(record, metric, Subject.B),
            metric.metric_name,
            epsilon,
        )
        for metric in metrics
    ]
    return build_comparison(rows)


def compare_aggregates(
    summary: SeriesSummary,
    epsilon: float = 0.0,
    metrics: Iterable[Metric] = tuple(Metric),
) -> Comparison:
    """Compare the per-subject means of an already aggregated result set."""
    rows = [
        compare(
            _mean_value(summary.get(metric, Subject.A)),
            _mean_value(summary.get(metric, Subject.B)),
            metric.metric_name,
            epsilon,
        )
        for metric in metrics
    ]
    return build_comparison(rows)


def build_comparison(rows: list[ComparisonResult]) -> Comparison:
    wins_a = wins_b = ties = no_comparison = 0
    for row in rows:
        if row.status is ComparisonStatus.NO_COMPARISON:
            no_comparison += 1
        elif row.winner is Winner.A:
            wins_a += 1
        elif row.winner is Winner.B:
            wins_b += 1
        elif row.winner is Winner.TIE:
            ties += 1
    summary = ComparisonSummary(
        wins_a=wins_a, wins_b=wins_b, ties=ties, no_comparison=no_comparison
    )
    return Comparison(rows=rows, summary=summary)


def _mean_value(statistics: Statistics) -> MetricValue:
    if not statistics.has_data:
        return MetricValue.unmeasured()
    return MetricValue.of(statistics.mean)


def _no_comparison(
    metric_name: str, value_a: float | None, value_b: float | None
) -> ComparisonResult:
    return ComparisonResult(
        metric=metric_name,
        value_a=value_a,
        value_b=value_b,
        percent_change=None,
        winner=None,
        status=ComparisonStatus.NO_COMPARISON,
    )
