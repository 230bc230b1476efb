"""
Benchmark Data Types

Defines the data structures shared by the store, statistics, import and
coaching modules. All types are plain and JSON-serializable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import json


EntryId = Union[int, str]


class Difficulty(str, Enum):
    """Drill intensity tiers, user-assigned."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    INSANE = "Insane"


DEFAULT_DIFFICULTY = Difficulty.MEDIUM


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class TimePeriod(str, Enum):
    """Chart / trend windows relative to today."""
    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"

    @property
    def days(self) -> Optional[int]:
        if self is TimePeriod.WEEK:
            return 7
        if self is TimePeriod.MONTH:
            return 30
        return None


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class BenchmarkEntry:
    """
    One logged practice result.

    Entries are never edited in place; an edit is a clone into a new entry
    followed by a delete of the old one.
    """
    # Millisecond timestamp for manual entries, "<file>-<date>" for imports
    id: EntryId

    # Drill name, case-sensitive for grouping
    scenario: str

    score: float
    accuracy: float

    # YYYY-MM-DD, no time component
    date: str

    difficulty: Difficulty
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "scenario": self.scenario,
            "score": self.score,
            "accuracy": self.accuracy,
            "date": self.date,
            "difficulty": self.difficulty.value,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict) -> BenchmarkEntry:
        """Create an entry from a dictionary, raising on malformed records."""
        entry_id = data["id"]
        if isinstance(entry_id, bool) or not isinstance(entry_id, (int, str)):
            raise TypeError(f"Invalid entry id: {entry_id!r}")
        score = data["score"]
        accuracy = data["accuracy"]
        for value in (score, accuracy):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"Invalid numeric value: {value!r}")
        notes = data.get("notes")
        return cls(
            id=entry_id,
            scenario=str(data["scenario"]),
            score=score,
            accuracy=accuracy,
            date=str(data["date"]),
            difficulty=Difficulty(data["difficulty"]),
            notes=None if notes is None else str(notes),
        )

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
