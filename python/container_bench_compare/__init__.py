"""Analysis of container benchmark result files."""

from .aggregate import aggregate, collect_series, summarize
from .compare import compare, compare_aggregates, compare_record
from .config import AnalysisConfig
from .extract import extract, parse_value
from .loader import NoResultsFound, load_all, load_recent
from .model import (
    NO_DATA,
    Comparison,
    ComparisonResult,
    ComparisonStatus,
    Metric,
    MetricValue,
    Polarity,
    ResultRecord,
    Statistics,
    Subject,
    Winner,
)

__all__ = [
    "NO_DATA",
    "AnalysisConfig",
    "Comparison",
    "ComparisonResult",
    "ComparisonStatus",
    "Metric",
    "MetricValue",
    "NoResultsFound",
    "Polarity",
    "ResultRecord",
    "Statistics",
    "Subject",
    "Winner",
    "aggregate",
    "collect_series",
    "compare",
    "compare_aggregates",
    "compare_record",
    "extract",
    "load_all",
    "load_recent",
    "parse_value",
    "summarize",
]
