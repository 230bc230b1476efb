"""
KovaaK's challenge report import.

Reads the "<scenario> - Challenge - <timestamp> - Report.csv" files the
trainer writes after each run and turns each one into a BenchmarkEntry.

Only the summary block of the report is used:

    Score:,1234.5
    Hit Count:,80
    Miss Count:,20

Files that do not match the naming convention, cannot be read, or lack a
numeric score / hit count / miss count are skipped. Only a missing or
unlistable directory is an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union

from aimtracker.models import DEFAULT_DIFFICULTY, BenchmarkEntry
from aimtracker.stats import round_one_decimal

logger = logging.getLogger(__name__)


REPORT_EXTENSION = ".csv"
CHALLENGE_DELIMITER = " - Challenge - "

_SCENARIO_RE = re.compile(r"^(.*?) - Challenge - ")
_DATE_RE = re.compile(r"(\d{4}\.\d{2}\.\d{2})")
_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX_RE = re.compile(r"^[+-]?\d+")

SCORE_LABEL = "score:"
HIT_COUNT_LABEL = "hit count:"
MISS_COUNT_LABEL = "miss count:"


class KovaaksImportError(Exception):
    """Directory-level import failure."""

    def __init__(self, stats_dir: Union[str, Path], message: str):
        super().__init__(message)
        self.stats_dir = str(stats_dir)
        self.message = message


class StatsDirectoryNotFoundError(KovaaksImportError):
    def __init__(self, stats_dir: Union[str, Path]):
        super().__init__(
            stats_dir,
            f"Stats directory not found at the specified path: {stats_dir}. "
            "Please ensure KOVAAK_STATS_DIR is correct in your .env file or create "
            "the default 'stats' directory.",
        )


class StatsDirectoryReadError(KovaaksImportError):
    def __init__(self, stats_dir: Union[str, Path], cause: Exception):
        super().__init__(stats_dir, f"Could not read statsDir ({stats_dir}): {cause}")
        self.cause = cause


@dataclass
class ReportSummary:
    score: Optional[float] = None
    hits: Optional[int] = None
    misses: Optional[int] = None

    @property
    def complete(self) -> bool:
        return self.score is not None and self.hits is not None and self.misses is not None


@dataclass
class ImportResult:
    entries: list[BenchmarkEntry] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def is_challenge_report(filename: str) -> bool:
    return filename.endswith(REPORT_EXTENSION) and CHALLENGE_DELIMITER in filename


def parse_report_filename(filename: str, today: Optional[date] = None) -> Optional[tuple[str, str]]:
    """
    Return (scenario, YYYY-MM-DD) for a challenge report filename.

    The date comes from the first "YYYY.MM.DD" token in the name; when there is
    none the current UTC date is used. Returns None when no scenario prefix
    can be found.
    """
    match = _SCENARIO_RE.match(filename)
    if not match or not match.group(1).strip():
        return None
    scenario = match.group(1).strip()

    date_match = _DATE_RE.search(filename)
    if date_match:
        report_date = date_match.group(1).replace(".", "-")
    else:
        report_date = (today or datetime.now(timezone.utc).date()).isoformat()
    return scenario, report_date


def _parse_float_prefix(text: str) -> Optional[float]:
    match = _FLOAT_PREFIX_RE.match(text)
    return float(match.group(0)) if match else None


def _parse_int_prefix(text: str) -> Optional[int]:
    match = _INT_PREFIX_RE.match(text)
    return int(match.group(0)) if match else None


def _label_value(line: str) -> str:
    """Text after the first colon (up to the next one), minus one leading comma."""
    parts = line.split(":")
    if len(parts) < 2:
        return ""
    value = parts[1].strip()
    if value.startswith(","):
        value = value[1:].strip()
    return value


def parse_report_summary(text: str) -> ReportSummary:
    """
    Scan report lines for the score, hit count and miss count fields.

    Labels match case-insensitively at the start of a trimmed line. The
    first line with a non-empty value wins for each label. A value that is
    present but not numeric leaves that field as None.
    """
    summary = ReportSummary()
    seen: set[str] = set()

    for raw_line in text.strip().splitlines():
        line = raw_line.strip()
        lowered = line.lower()

        for label in (SCORE_LABEL, HIT_COUNT_LABEL, MISS_COUNT_LABEL):
            if label in seen or not lowered.startswith(label):
                continue
            value = _label_value(line)
            if not value:
                continue
            seen.add(label)
            if label == SCORE_LABEL:
                summary.score = _parse_float_prefix(value)
            elif label == HIT_COUNT_LABEL:
                summary.hits = _parse_int_prefix(value)
            else:
                summary.misses = _parse_int_prefix(value)

        if len(seen) == 3:
            break

    return summary


def accuracy_from_counts(hits: int, misses: int) -> float:
    total = hits + misses
    if total <= 0:
        return 0
    return round_one_decimal((hits / total) * 100)


def parse_report(filename: str, text: str, today: Optional[date] = None) -> Optional[BenchmarkEntry]:
    """Build an entry from one report, or None when it should be skipped."""
    parsed_name = parse_report_filename(filename, today=today)
    if parsed_name is None:
        logger.info("Skipping file (could not extract scenario): %s", filename)
        return None
    scenario, report_date = parsed_name

    summary = parse_report_summary(text)
    if summary.score is None:
        logger.info("Skipping file (could not find valid 'Score:' line): %s", filename)
        return None
    if summary.hits is None or summary.misses is None:
        logger.info("Skipping file (could not find valid 'Hit Count:' or 'Miss Count:' lines): %s", filename)
        return None

    return BenchmarkEntry(
        id=f"{filename}-{report_date}",
        scenario=scenario,
        score=summary.score,
        accuracy=accuracy_from_counts(summary.hits, summary.misses),
        date=report_date,
        difficulty=DEFAULT_DIFFICULTY,
        notes=f"Imported from {filename}",
    )


def read_challenge_reports(stats_dir: Union[str, Path], today: Optional[date] = None) -> ImportResult:
    """
    Parse every challenge report in stats_dir.

    Raises:
        StatsDirectoryNotFoundError: stats_dir does not exist
        StatsDirectoryReadError: stats_dir exists but cannot be listed
    """
    directory = Path(stats_dir)
    logger.info("Attempting to read stats from: %s", directory)

    if not directory.exists():
        logger.error("Stats directory not found: %s", directory)
        raise StatsDirectoryNotFoundError(directory)

    try:
        paths = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.error("Error reading KovaaK's stats from %s: %s", directory, e)
        raise StatsDirectoryReadError(directory, e) from e

    result = ImportResult()
    for path in paths:
        if path.is_dir():
            continue
        name = path.name
        if not is_challenge_report(name):
            logger.debug("Skipping file (not a challenge CSV): %s", name)
            result.skipped.append(name)
            continue

        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable file %s: %s", name, e)
            result.skipped.append(name)
            continue

        entry = parse_report(name, text, today=today)
        if entry is None:
            result.skipped.append(name)
            continue

        logger.info("Parsed entry from %s: score=%s accuracy=%s%%", name, entry.score, entry.accuracy)
        result.entries.append(entry)

    logger.info("Processed %d valid KovaaK's stat files (%d skipped).", len(result.entries), len(result.skipped))
    return result
