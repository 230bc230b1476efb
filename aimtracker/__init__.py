"""
Aim Benchmark Tracker

Local benchmark history for aim trainer scenarios: persistence, filtering,
statistics, KovaaK's report import, coaching prompts and PDF export.
"""

from .models import BenchmarkEntry, Difficulty, SortOrder, Theme, TimePeriod
from .store import FavoritesStore, LocalStorage, PreferencesStore, ScoreStore

__all__ = [
    "BenchmarkEntry",
    "Difficulty",
    "SortOrder",
    "Theme",
    "TimePeriod",
    "LocalStorage",
    "ScoreStore",
    "FavoritesStore",
    "PreferencesStore",
]
