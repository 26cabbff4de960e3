from __future__ import annotations

import math
from typing import Iterable, Sequence

from .extract import extract_metric
from .model import (
    NO_DATA,
    Metric,
    MetricSeries,
    MetricValue,
    ResultRecord,
    SeriesSummary,
    Statistics,
    Subject,
)


def collect_series(
    records: Sequence[ResultRecord], metric: Metric, subject: Subject
) -> MetricSeries:
    values = [extract_metric(record, metric, subject) for record in records]
    return MetricSeries(
        metric=metric,
        subject=subject,
        values=tuple(value.value for value in values if value.value is not None),
        total_records=len(records),
    )


def aggregate(values: MetricSeries | Iterable[MetricValue | float]) -> Statistics:
    """Min/max/mean over the measured entries only.

    ``sample_count`` is the number of measured entries, so callers can compare
    it with the record count to see how many readings were unusable. An input
    with nothing measured yields ``NO_DATA``.
    """
    if isinstance(values, MetricSeries):
        valid = list(values.values)
    else:
        valid = [_as_float(value) for value in values]
        valid = [value for value in valid if value is not None]
    if not valid:
        return NO_DATA
    return Statistics(
        minimum=min(valid),
        maximum=max(valid),
        mean=_mean(valid),
        sample_count=len(valid),
    )


def summarize(
    records: Sequence[ResultRecord],
    metrics: Iterable[Metric] = tuple(Metric),
) -> SeriesSummary:
    statistics: dict[tuple[Metric, Subject], Statistics] = {}
    for metric in metrics:
        for subject in Subject:
            statistics[(metric, subject)] = aggregate(
                collect_series(records, metric, subject)
            )
    return SeriesSummary(total_records=len(records), statistics=statistics)


def _as_float(value: MetricValue | float | None) -> float | None:
    if isinstance(value, MetricValue):
        return value.value
    if value is None:
        return None
    number = float(value)
    if not math.isfinite(number) or number <= 0.0:
        return None
    return number


def _mean(values: list[float]) -> float:
    # fsum is exactly rounded, so the mean does not depend on input order.
    try:
        return math.fsum(values) / len(values)
    except OverflowError:
        # The sum left the float range; average at a smaller scale instead.
        scale = max(abs(value) for value in values)
        return math.fsum(value / scale for value in values) / len(values) * scale
