from __future__ import annotations

from datetime import datetime

import pytest

from container_bench_compare.extract import extract, extract_metric, parse_value, strip_unit
from container_bench_compare.model import Metric, ResultRecord, Subject


def _record(**values: str) -> ResultRecord:
    return ResultRecord(
        name="benchmark_20240101_120000.txt",
        timestamp="20240101_120000",
        created_at=datetime(2024, 1, 1, 12, 0, 0),
        values=values,
    )


def test_extract_absent_key_is_unmeasured() -> None:
    value = extract(_record(), "Image_A_startup_time")
    assert value.measured is False
    assert value.value is None


@pytest.mark.parametrize("raw", ["0", "N/A", "", "  ", "0s", "0.0", "-3.5"])
def test_extract_sentinels_and_non_positive_are_unmeasured(raw: str) -> None:
    assert extract(_record(Image_A_startup_time=raw), "Image_A_startup_time").measured is False


@pytest.mark.parametrize("raw", ["fast", "12.5x", "nan", "inf", "1.2.3s"])
def test_extract_unparsable_is_unmeasured(raw: str) -> None:
    value = parse_value(raw)
    assert value.measured is False
    assert value.raw == raw


def test_extract_strips_seconds_suffix() -> None:
    value = extract(_record(Image_A_startup_time="73.1s"), "Image_A_startup_time")
    assert value.measured is True
    assert value.value == 73.1
    assert value.raw == "73.1s"


def test_extract_strips_millisecond_suffix() -> None:
    assert parse_value("12.5ms").value == 12.5
    assert parse_value(" 8.04 ms ").value == 8.04


def test_extract_plain_values_parse_as_is() -> None:
    assert parse_value("114.88").value == 114.88
    assert parse_value("256").value == 256.0


def test_strip_unit_only_removes_trailing_suffix() -> None:
    assert strip_unit("12ms") == "12"
    assert strip_unit("12s") == "12"
    assert strip_unit("s12") == "s12"
    assert strip_unit("45.2") == "45.2"


def test_extract_metric_uses_subject_qualified_key() -> None:
    record = _record(Image_A_time_per_request_ms="8.7", Image_B_time_per_request_ms="9.1")
    assert extract_metric(record, Metric.TIME_PER_REQUEST, Subject.A).value == 8.7
    assert extract_metric(record, Metric.TIME_PER_REQUEST, Subject.B).value == 9.1


def test_extract_accepts_plain_mapping() -> None:
    assert extract({"Image_B_avg_memory_mb": "312.5"}, "Image_B_avg_memory_mb").value == 312.5
