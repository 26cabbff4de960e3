from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


class Subject(Enum):
    A = "Image_A"
    B = "Image_B"

    def key(self, metric: Metric) -> str:
        return f"{self.value}_{metric.key}"


class Polarity(Enum):
    LOWER_IS_BETTER = "lower"
    HIGHER_IS_BETTER = "higher"


class Metric(Enum):
    STARTUP_TIME = ("startup_time", "startup_time", "Startup Time", "s")
    REQUESTS_PER_SECOND = (
        "requests_per_second",
        "requests_per_second",
        "Requests/Second",
        "",
    )
    TIME_PER_REQUEST = (
        "time_per_request",
        "time_per_request_ms",
        "Avg Response Time",
        "ms",
    )
    AVG_CPU_PERCENT = ("avg_cpu_percent", "avg_cpu_percent", "Avg CPU Usage", "%")
    AVG_MEMORY_MB = ("avg_memory_mb", "avg_memory_mb", "Avg Memory Usage", "MB")

    def __init__(self, metric_name: str, key: str, label: str, unit: str) -> None:
        self.metric_name = metric_name
        self.key = key
        self.label = label
        self.unit = unit

    @property
    def polarity(self) -> Polarity:
        return POLARITY[self]

    @property
    def display_name(self) -> str:
        return f"{self.label} ({self.unit})" if self.unit else self.label

    @classmethod
    def from_name(cls, name: str) -> Metric | None:
        """Resolve a polarity-table name, record key suffix or full record key."""
        for subject in Subject:
            prefix = f"{subject.value}_"
            if name.startswith(prefix):
                name = name[len(prefix) :]
                break
        for metric in cls:
            if name in (metric.metric_name, metric.key):
                return metric
        return None


POLARITY: Mapping[Metric, Polarity] = MappingProxyType(
    {
        Metric.STARTUP_TIME: Polarity.LOWER_IS_BETTER,
        Metric.REQUESTS_PER_SECOND: Polarity.HIGHER_IS_BETTER,
        Metric.TIME_PER_REQUEST: Polarity.LOWER_IS_BETTER,
        Metric.AVG_CPU_PERCENT: Polarity.LOWER_IS_BETTER,
        Metric.AVG_MEMORY_MB: Polarity.LOWER_IS_BETTER,
    }
)


@dataclass(frozen=True)
class MetricValue:
    """A parsed reading; ``value`` is None when the metric was not measured."""

    value: float | None
    raw: str | None = None

    @property
    def measured(self) -> bool:
        return self.value is not None

    @classmethod
    def of(cls, value: float, raw: str | None = None) -> MetricValue:
        return cls(value=float(value), raw=raw)

    @classmethod
    def unmeasured(cls, raw: str | None = None) -> MetricValue:
        return cls(value=None, raw=raw)


@dataclass(frozen=True)
class ResultRecord:
    name: str
    timestamp: str
    created_at: datetime
    values: Mapping[str, str]
    source: Path | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


@dataclass(frozen=True)
class MetricSeries:
    metric: Metric
    subject: Subject
    values: tuple[float, ...]
    total_records: int

    @property
    def sample_count(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class Statistics:
    minimum: float
    maximum: float
    mean: float
    sample_count: int

    @property
    def has_data(self) -> bool:
        return self.sample_count > 0


NO_DATA = Statistics(minimum=0.0, maximum=0.0, mean=0.0, sample_count=0)


@dataclass(frozen=True)
class SeriesSummary:
    total_records: int
    statistics: Mapping[tuple[Metric, Subject], Statistics] = field(
        default_factory=dict
    )

    def get(self, metric: Metric, subject: Subject) -> Statistics:
        return self.statistics.get((metric, subject), NO_DATA)


class Winner(Enum):
    A = "A"
    B = "B"
    TIE = "tie"


class ComparisonStatus(Enum):
    COMPARED = "compared"
    NO_COMPARISON = "no comparison"


@dataclass(frozen=True)
class ComparisonResult:
    metric: str
    value_a: float | None
    value_b: float | None
    percent_change: float | None
    winner: Winner | None
    status: ComparisonStatus


@dataclass(frozen=True)
class ComparisonSummary:
    wins_a: int
    wins_b: int
    ties: int
    no_comparison: int


@dataclass(frozen=True)
class Comparison:
    rows: list[ComparisonResult]
    summary: ComparisonSummary
