from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .model import Subject

DEFAULT_RESULTS_DIR = Path("results")
DEFAULT_SOURCE_PREFIX = "benchmark_"
DEFAULT_SOURCE_SUFFIX = ".txt"
DEFAULT_RECENT_COUNT = 5


def _default_labels() -> dict[Subject, str]:
    return {Subject.A: "Image A", Subject.B: "Image B"}


@dataclass(frozen=True)
class AnalysisConfig:
    results_dir: Path = DEFAULT_RESULTS_DIR
    source_prefix: str = DEFAULT_SOURCE_PREFIX
    source_suffix: str = DEFAULT_SOURCE_SUFFIX
    tie_epsilon: float = 0.0
    recent_count: int = DEFAULT_RECENT_COUNT
    max_workers: int = 1
    subject_labels: Mapping[Subject, str] = field(default_factory=_default_labels)

    def __post_init__(self) -> None:
        object.__setattr__(self, "results_dir", Path(self.results_dir))
        if not self.source_prefix:
            raise ValueError("source_prefix must not be empty")
        if self.tie_epsilon < 0:
            raise ValueError("tie_epsilon must be >= 0")
        if self.recent_count <= 0:
            raise ValueError("recent_count must be > 0")
        if self.max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        missing = [subject.value for subject in Subject if subject not in self.subject_labels]
        if missing:
            raise ValueError(f"subject_labels missing entries for: {', '.join(missing)}")

    def label(self, subject: Subject) -> str:
        return self.subject_labels[subject]

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides
    ) -> AnalysisConfig:
        env = os.environ if environ is None else environ
        values: dict = {}
        results_dir = env.get("RESULTS_DIR")
        if results_dir:
            values["results_dir"] = Path(results_dir)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
