from __future__ import annotations

import concurrent.futures
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from .config import AnalysisConfig
from .model import ResultRecord

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
TIMESTAMP_PATTERN = r"\d{8}_\d{6}"


class NoResultsFound(LookupError):
    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        super().__init__(f"No benchmark results found in {self.directory}")


class MalformedSource(ValueError):
    pass


def source_pattern(config: AnalysisConfig) -> re.Pattern[str]:
    return re.compile(
        rf"^{re.escape(config.source_prefix)}(?P<timestamp>{TIMESTAMP_PATTERN})"
        rf"{re.escape(config.source_suffix)}$"
    )


def parse_timestamp(token: str) -> datetime | None:
    try:
        return datetime.strptime(token, TIMESTAMP_FORMAT)
    except ValueError:
        return None


def discover_sources(
    directory: Path | str, config: AnalysisConfig | None = None
) -> list[Path]:
    """Result files below ``directory``, oldest first.

    Names that do not follow ``<prefix><YYYYMMDD_HHMMSS><suffix>`` are ignored.
    Ties on the timestamp fall back to the path, which sorts lexically.
    """
    cfg = config or AnalysisConfig()
    root = Path(directory)
    if not root.is_dir():
        return []
    pattern = source_pattern(cfg)
    found: list[tuple[str, str, Path]] = []
    for path in root.rglob(f"{cfg.source_prefix}*"):
        match = pattern.match(path.name)
        if match is None or not path.is_file():
            continue
        if parse_timestamp(match.group("timestamp")) is None:
            continue
        found.append((match.group("timestamp"), str(path), path))
    found.sort()
    return [path for _, _, path in found]


def parse_record_text(name: str, text: str, source: Path | None = None) -> ResultRecord:
    match = re.search(TIMESTAMP_PATTERN, name)
    created_at = parse_timestamp(match.group(0)) if match else None
    if match is None or created_at is None:
        raise MalformedSource(f"{name}: no YYYYMMDD_HHMMSS timestamp in name")

    values: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, _, value = stripped.partition("=")
        key = key.strip()
        if key and key not in values:
            values[key] = value.strip()
    if not values:
        raise MalformedSource(f"{name}: no metric=value lines")
    return ResultRecord(
        name=name,
        timestamp=match.group(0),
        created_at=created_at,
        values=values,
        source=source,
    )


def read_record(path: Path | str) -> ResultRecord:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedSource(f"{source}: {exc}") from exc
    return parse_record_text(source.name, text, source=source)


def load_sources(paths: Iterable[Path], max_workers: int = 1) -> list[ResultRecord]:
    """Parse each source, skipping malformed ones; input order is preserved."""
    ordered = list(paths)
    if max_workers <= 1 or len(ordered) <= 1:
        outcomes = [_try_read(path) for path in ordered]
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(_try_read, ordered))
    return [record for record in outcomes if record is not None]


def load_all(
    directory: Path | str, config: AnalysisConfig | None = None
) -> list[ResultRecord]:
    cfg = config or AnalysisConfig()
    records = load_sources(discover_sources(directory, cfg), max_workers=cfg.max_workers)
    if not records:
        raise NoResultsFound(directory)
    return records


def load_recent(
    directory: Path | str, n: int, config: AnalysisConfig | None = None
) -> list[ResultRecord]:
    """The ``n`` newest records, most recent first."""
    if n <= 0:
        raise ValueError("n must be > 0")
    return most_recent_first(load_all(directory, config), n)


def most_recent_first(records: Sequence[ResultRecord], n: int) -> list[ResultRecord]:
    """Reorder chronologically loaded records newest first, keeping at most ``n``."""
    if n <= 0:
        raise ValueError("n must be > 0")
    return list(reversed(records))[:n]


def find_record(
    directory: Path | str, selector: str, config: AnalysisConfig | None = None
) -> ResultRecord | None:
    """Resolve a compare target given as a path, a file name or a timestamp."""
    cfg = config or AnalysisConfig()
    candidate = Path(selector)
    if candidate.is_file():
        try:
            return read_record(candidate)
        except MalformedSource:
            logger.debug("selected source %s is malformed", candidate)
            return None

    pattern = source_pattern(cfg)
    for path in reversed(discover_sources(directory, cfg)):
        match = pattern.match(path.name)
        if path.name == selector or (match and match.group("timestamp") == selector):
            return _try_read(path)
    return None


def _try_read(path: Path) -> ResultRecord | None:
    try:
        return read_record(path)
    except MalformedSource as exc:
        logger.debug("skipping result source: %s", exc)
        return None
