from __future__ import annotations

import math
from typing import Mapping

from .model import Metric, MetricValue, ResultRecord, Subject

UNIT_SUFFIXES = ("ms", "s")
SENTINELS = frozenset({"", "0", "N/A"})


def strip_unit(raw: str) -> str:
    text = raw.strip()
    for suffix in UNIT_SUFFIXES:
        if text.endswith(suffix):
            return text[: -len(suffix)].rstrip()
    return text


def parse_value(raw: str | None) -> MetricValue:
    """Parse one raw reading such as ``73.1s`` or ``12.5ms``.

    Sentinels, unparsable text, non-finite numbers and non-positive readings
    all come back unmeasured; nothing here raises.
    """
    if raw is None:
        return MetricValue.unmeasured()
    text = strip_unit(raw)
    if text in SENTINELS:
        return MetricValue.unmeasured(raw)
    try:
        number = float(text)
    except ValueError:
        return MetricValue.unmeasured(raw)
    if not math.isfinite(number) or number <= 0.0:
        return MetricValue.unmeasured(raw)
    return MetricValue.of(number, raw)


def extract(record: ResultRecord | Mapping[str, str], metric_name: str) -> MetricValue:
    values = record.values if isinstance(record, ResultRecord) else record
    return parse_value(values.get(metric_name))


def extract_metric(
    record: ResultRecord | Mapping[str, str], metric: Metric, subject: Subject
) -> MetricValue:
    return extract(record, subject.key(metric))
