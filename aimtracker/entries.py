"""
Entry creation from the add form, the bulk-add grid, clone and quick add.

Only presence is checked; scores and accuracies are otherwise taken as typed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence, Union

from aimtracker.models import DEFAULT_DIFFICULTY, BenchmarkEntry, Difficulty, EntryId


class EntryValidationError(ValueError):
    """Raised when a form submission is missing required fields."""


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class EntryDraft:
    """Partially filled add form."""
    scenario: Optional[str] = None
    score: Optional[float] = None
    accuracy: Optional[float] = None
    date: Optional[str] = field(default_factory=today_iso)
    difficulty: Optional[Difficulty] = DEFAULT_DIFFICULTY
    notes: Optional[str] = None


@dataclass
class BulkRow:
    """One row in the bulk-add grid for a single scenario."""
    date: str = field(default_factory=today_iso)
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    score: float = 0
    accuracy: float = 0
    notes: str = ""


def new_entry_id(existing_ids: Iterable[EntryId] = (), now: Optional[int] = None) -> int:
    """Millisecond timestamp, bumped until it does not collide with an existing id."""
    taken = set(existing_ids)
    candidate = now if now is not None else now_ms()
    while candidate in taken:
        candidate += 1
    return candidate


def build_entry(draft: EntryDraft, entry_id: Optional[EntryId] = None) -> BenchmarkEntry:
    if not draft.scenario or not draft.score or not draft.accuracy or not draft.date or not draft.difficulty:
        raise EntryValidationError("Please fill all required fields.")
    return BenchmarkEntry(
        id=entry_id if entry_id is not None else new_entry_id(),
        scenario=draft.scenario,
        score=draft.score,
        accuracy=draft.accuracy,
        date=draft.date,
        difficulty=Difficulty(draft.difficulty),
        notes=draft.notes or None,
    )


def build_bulk_entries(
    rows_by_scenario: Mapping[str, Sequence[BulkRow]],
    submission_ms: Optional[int] = None,
) -> list[BenchmarkEntry]:
    """Turn bulk-add rows into entries, dropping rows without a score or accuracy."""
    base = submission_ms if submission_ms is not None else now_ms()
    entries: list[BenchmarkEntry] = []
    index = 0
    for scenario, rows in rows_by_scenario.items():
        for row in rows:
            if row.score > 0 and row.accuracy > 0 and row.date and row.difficulty:
                entries.append(
                    BenchmarkEntry(
                        id=base + index,
                        scenario=scenario,
                        score=row.score,
                        accuracy=row.accuracy,
                        date=row.date,
                        difficulty=Difficulty(row.difficulty),
                        notes=row.notes or None,
                    )
                )
                index += 1

    if not entries:
        raise EntryValidationError(
            "No valid entries to submit. Please ensure Score and Accuracy are filled correctly."
        )
    return entries


def stored_difficulty_for(entries: Sequence[BenchmarkEntry], scenario: str) -> Optional[Difficulty]:
    """Difficulty of the last stored entry for the scenario (case-insensitive), or None."""
    wanted = scenario.strip().lower()
    if not wanted:
        return None
    for entry in reversed(entries):
        if entry.scenario.lower() == wanted:
            return entry.difficulty
    return None


def default_difficulty_for(entries: Sequence[BenchmarkEntry], scenario: str) -> Difficulty:
    return stored_difficulty_for(entries, scenario) or DEFAULT_DIFFICULTY


def with_scenario(draft: EntryDraft, entries: Sequence[BenchmarkEntry], scenario: Optional[str]) -> EntryDraft:
    """
    Draft with the scenario field changed.

    A scenario already in the history brings its stored difficulty along;
    an unknown one leaves the current difficulty as it is.
    """
    name = (scenario or "").strip() or None
    inherited = stored_difficulty_for(entries, name or "")
    return replace(draft, scenario=name, difficulty=inherited or draft.difficulty)


def clone_draft(entry: BenchmarkEntry, today: Optional[date] = None) -> EntryDraft:
    return EntryDraft(
        scenario=entry.scenario,
        score=None,
        accuracy=None,
        date=today_iso(today),
        difficulty=entry.difficulty,
        notes=entry.notes,
    )


def quick_add_draft(
    entries: Sequence[BenchmarkEntry],
    scenario: str,
    today: Optional[date] = None,
) -> EntryDraft:
    return EntryDraft(
        scenario=scenario,
        date=today_iso(today),
        difficulty=default_difficulty_for(entries, scenario),
        notes="",
    )


def new_bulk_row(entries: Sequence[BenchmarkEntry], scenario: str, today: Optional[date] = None) -> BulkRow:
    return BulkRow(date=today_iso(today), difficulty=default_difficulty_for(entries, scenario))


def coerce_number(value: Union[str, float, int, None], integer: bool = False) -> float:
    """Parse a grid cell the way the bulk form does; blanks and junk become 0."""
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(number) if integer else number
