"""aimtracker.stats

Derived statistics over benchmark entries.

All functions are pure: they take a sequence of entries and return plain
dataclasses. Rounding follows the dashboard's display rules:
- scores are rounded to the nearest integer, ties rounded up
- accuracy, standard deviations and percentages keep one decimal place,
  rounding the exact binary value half away from zero
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from aimtracker.filters import filter_by_scenarios
from aimtracker.models import BenchmarkEntry, TimePeriod

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class CurrentStats:
    count: int = 0
    avg_score: int = 0
    avg_accuracy: float = 0.0
    best_score: float = 0


@dataclass(frozen=True)
class ScenarioStats:
    scenario_name: str
    count: int = 0
    avg_score: int = 0
    best_score: float = 0
    lowest_score: float = 0
    avg_accuracy: float = 0.0
    best_accuracy: float = 0
    lowest_accuracy: float = 0


@dataclass(frozen=True)
class PeriodStats:
    score_std_dev: float = 0.0
    accuracy_std_dev: float = 0.0
    # None when there are fewer than two entries or the baseline is zero
    score_change_percent: Optional[float] = None
    accuracy_change_percent: Optional[float] = None


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds towards +infinity."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def round_one_decimal(value: float) -> float:
    """One decimal place, half away from zero on the exact binary value."""
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_entry_date(value: str) -> Optional[date]:
    """Return the calendar date for a well-formed YYYY-MM-DD string, else None."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def population_std_dev(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def percent_change(start: float, end: float) -> float:
    """Percent change from start to end; math.inf for a zero baseline."""
    if start == 0 and end == 0:
        return 0.0
    if start == 0:
        return math.inf
    return ((end - start) / start) * 100


def compute_current_stats(entries: Iterable[BenchmarkEntry]) -> CurrentStats:
    data = list(entries)
    if not data:
        return CurrentStats()
    total_score = sum(e.score for e in data)
    total_acc = sum(e.accuracy for e in data)
    return CurrentStats(
        count=len(data),
        avg_score=round_half_up(total_score / len(data)),
        avg_accuracy=round_one_decimal(total_acc / len(data)),
        best_score=max(max(e.score for e in data), 0),
    )


def compute_scenario_stats(entries: Iterable[BenchmarkEntry], selected: Sequence[str] = ()) -> ScenarioStats:
    """Extended stats for the union of the selected scenarios, or everything."""
    name = ", ".join(selected) if selected else "Overall"
    data = filter_by_scenarios(entries, selected)
    if not data:
        return ScenarioStats(scenario_name=name)

    scores = [e.score for e in data]
    accuracies = [e.accuracy for e in data]
    count = len(data)
    return ScenarioStats(
        scenario_name=name,
        count=count,
        avg_score=round_half_up(sum(scores) / count),
        best_score=max(scores),
        lowest_score=min(scores),
        avg_accuracy=round_one_decimal(sum(accuracies) / count),
        best_accuracy=max(accuracies),
        lowest_accuracy=min(accuracies),
    )


def period_cutoff(period: TimePeriod, today: Optional[date] = None) -> Optional[date]:
    days = TimePeriod(period).days
    if days is None:
        return None
    today = today or date.today()
    return today - timedelta(days=days)


def filter_by_period(
    entries: Iterable[BenchmarkEntry],
    period: TimePeriod,
    today: Optional[date] = None,
) -> list[BenchmarkEntry]:
    """Keep entries dated on or after today minus the window; ALL keeps everything."""
    cutoff = period_cutoff(period, today)
    if cutoff is None:
        return list(entries)
    kept = []
    for entry in entries:
        entry_date = parse_entry_date(entry.date)
        if entry_date is not None and entry_date >= cutoff:
            kept.append(entry)
    return kept


def chronological(entries: Iterable[BenchmarkEntry]) -> list[BenchmarkEntry]:
    """Well-dated entries in ascending date order (stable within a day)."""
    dated = [(parse_entry_date(e.date), e) for e in entries]
    dated = [(d, e) for d, e in dated if d is not None]
    dated.sort(key=lambda pair: pair[0])
    return [e for _, e in dated]


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return round_one_decimal(value)


def compute_period_stats(
    entries: Iterable[BenchmarkEntry],
    selected: Sequence[str] = (),
    period: TimePeriod = TimePeriod.ALL,
    today: Optional[date] = None,
) -> PeriodStats:
    """
    Dispersion and first-to-last trend over the scenario and time filtered entries.

    Entries without a real YYYY-MM-DD date have no place on the timeline, so
    they are left out here for every period, ALL included.
    """
    scenario_data = filter_by_scenarios(entries, selected)
    if not scenario_data:
        return PeriodStats()

    ordered = chronological(filter_by_period(scenario_data, period, today))
    scores = [e.score for e in ordered]
    accuracies = [e.accuracy for e in ordered]

    score_change = None
    accuracy_change = None
    if len(ordered) >= 2:
        first, last = ordered[0], ordered[-1]
        score_change = percent_change(first.score, last.score)
        accuracy_change = percent_change(first.accuracy, last.accuracy)

    return PeriodStats(
        score_std_dev=round_one_decimal(population_std_dev(scores)),
        accuracy_std_dev=round_one_decimal(population_std_dev(accuracies)),
        score_change_percent=_finite_or_none(score_change),
        accuracy_change_percent=_finite_or_none(accuracy_change),
    )
