"""
List view helpers: scenario filtering, sorting, scenario search and paging.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, Optional, Sequence

from aimtracker.models import BenchmarkEntry, SortOrder

SORTABLE_FIELDS = ("date", "scenario", "score", "accuracy", "difficulty", "notes", "id")

INITIAL_DISPLAY_LIMIT = 20
SHOW_MORE_INCREMENT = 20


def filter_by_scenarios(entries: Iterable[BenchmarkEntry], selected: Sequence[str]) -> list[BenchmarkEntry]:
    if not selected:
        return list(entries)
    wanted = set(selected)
    return [e for e in entries if e.scenario in wanted]


def _sort_value(entry: BenchmarkEntry, key: str):
    value = getattr(entry, key)
    # Enums sort by their label
    return getattr(value, "value", value)


def _compare(a, b) -> int:
    if a is None or b is None:
        return 0
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        ka, kb = (a.casefold(), a), (b.casefold(), b)
        return (ka > kb) - (ka < kb)
    return 0


def sort_entries(
    entries: Iterable[BenchmarkEntry],
    key: Optional[str] = "date",
    order: SortOrder = SortOrder.DESC,
) -> list[BenchmarkEntry]:
    """Stable sort on one field; mixed or missing values keep their relative position."""
    data = list(entries)
    if not key:
        return data
    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Unknown sort field: {key}")
    sign = 1 if SortOrder(order) is SortOrder.ASC else -1
    return sorted(
        data,
        key=cmp_to_key(lambda a, b: sign * _compare(_sort_value(a, key), _sort_value(b, key))),
    )


def next_sort_state(
    current_key: Optional[str],
    current_order: SortOrder,
    clicked_key: str,
) -> tuple[str, SortOrder]:
    """Clicking the active column flips the order; a new column starts descending."""
    if current_key == clicked_key:
        flipped = SortOrder.DESC if SortOrder(current_order) is SortOrder.ASC else SortOrder.ASC
        return clicked_key, flipped
    return clicked_key, SortOrder.DESC


def unique_scenarios(entries: Iterable[BenchmarkEntry]) -> list[str]:
    return sorted({e.scenario for e in entries})


def search_scenarios(scenarios: Iterable[str], term: str) -> list[str]:
    if not term:
        return []
    needle = term.lower()
    return [s for s in scenarios if needle in s.lower()]


def selector_order(scenarios: Iterable[str], selected: Sequence[str]) -> list[str]:
    """Selected scenarios first, then the rest; both groups alphabetical."""
    names = list(scenarios)
    chosen = sorted(s for s in names if s in selected)
    rest = sorted(s for s in names if s not in selected)
    return chosen + rest


def toggle_selection(selected: Sequence[str], scenario: str, is_selected: bool) -> list[str]:
    if is_selected:
        return list(selected) + [scenario] if scenario not in selected else list(selected)
    return [s for s in selected if s != scenario]


def show_more(limit: int, total: int) -> int:
    return min(limit + SHOW_MORE_INCREMENT, total)


def visible_slice(entries: Sequence[BenchmarkEntry], limit: int) -> list[BenchmarkEntry]:
    if limit >= len(entries):
        return list(entries)
    return list(entries[:limit])
