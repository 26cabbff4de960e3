from __future__ import annotations

from datetime import datetime

import pytest

from container_bench_compare.aggregate import summarize
from container_bench_compare.compare import compare_record
from container_bench_compare.formatting import (
    NO_DATA_MARKER,
    render_comparison_table,
    render_recent,
    render_statistics_table,
)
from container_bench_compare.model import ResultRecord, Subject


def _record(timestamp: str, **values: str) -> ResultRecord:
    return ResultRecord(
        name=f"benchmark_{timestamp}.txt",
        timestamp=timestamp,
        created_at=datetime.strptime(timestamp, "%Y%m%d_%H%M%S"),
        values=values,
    )


def test_statistics_table_marks_no_data_distinctly() -> None:
    records = [
        _record("20240101_120000", Image_A_startup_time="15.0s", Image_A_avg_cpu_percent="0.004"),
        _record("20240102_120000", Image_A_startup_time="14.2s"),
    ]
    out = render_statistics_table(summarize(records))

    lines = {line.split("|")[0].strip(): line for line in out.splitlines()}
    assert "Min: 14.20 Avg: 14.60 Max: 15.00 (n=2)" in lines["Startup Time (s)"]
    assert NO_DATA_MARKER in lines["Startup Time (s)"]
    assert "Min: 0.00 Avg: 0.00 Max: 0.00 (n=1)" in lines["Avg CPU Usage (%)"]
    assert lines["Avg Memory Usage (MB)"].count(NO_DATA_MARKER) == 2


def test_statistics_table_uses_configured_labels() -> None:
    out = render_statistics_table(
        summarize([_record("20240101_120000", Image_A_startup_time="1s")]),
        labels={Subject.A: "Local", Subject.B: "Docker Hub"},
    )
    assert out.splitlines()[0].split(" | ")[1].strip() == "Local"
    assert "Docker Hub" in out.splitlines()[0]


def test_comparison_table_shows_change_and_winner() -> None:
    record = _record(
        "20240101_120000",
        Image_A_startup_time="15.0s",
        Image_B_startup_time="73.1s",
        Image_A_avg_cpu_percent="N/A",
        Image_B_avg_cpu_percent="50",
    )
    out = render_comparison_table(compare_record(record))

    startup = next(line for line in out.splitlines() if line.startswith("Startup Time"))
    assert "+387.33%" in startup
    assert "Image A" in startup
    cpu = next(line for line in out.splitlines() if line.startswith("Avg CPU Usage"))
    assert "no comparison" in cpu
    assert "nan" not in out.lower()
    assert "inf" not in out.lower()
    assert "summary: Image A=1 Image B=0 tie=0 no_comparison=4" in out


def test_comparison_table_markdown() -> None:
    record = _record("20240101_120000", Image_A_startup_time="15.0s", Image_B_startup_time="14.0s")
    out = render_comparison_table(compare_record(record), fmt="markdown")
    assert out.startswith("| Metric | Image A | Image B | change | winner |")
    assert "| --- | --- | --- | --- | --- |" in out
    assert "| Startup Time (s) | 15.00 | 14.00 | -6.67% | Image B |" in out


def test_render_recent_lists_startup_and_rps() -> None:
    out = render_recent(
        [
            _record(
                "20240102_120000",
                Image_A_startup_time="15.0s",
                Image_B_startup_time="73.1s",
                Image_A_requests_per_second="114.88",
            )
        ]
    )
    assert out.splitlines() == [
        "20240102_120000:",
        "  Startup: A=15.00s, B=73.10s | RPS: A=114.88, B=-",
    ]


@pytest.mark.parametrize(
    "values",
    [
        {"Image_A_startup_time": "1e-300s", "Image_B_startup_time": "1e10s"},
        {"Image_A_avg_memory_mb": "1e308", "Image_B_avg_memory_mb": "1e-300"},
        {"Image_A_requests_per_second": "1e308", "Image_B_requests_per_second": "1e308"},
    ],
)
def test_comparison_table_never_prints_non_finite_values(values: dict[str, str]) -> None:
    out = render_comparison_table(compare_record(_record("20240101_120000", **values)))
    assert "inf" not in out.lower()
    assert "nan" not in out.lower()
