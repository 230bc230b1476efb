"""
Durable local storage for benchmarks, favorites and preferences.

Each storage key is a JSON file under the data directory. Stores load their
slice once on construction and write it back synchronously on every change.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, Optional

from aimtracker.config import get_settings
from aimtracker.models import BenchmarkEntry, EntryId, Theme

logger = logging.getLogger(__name__)


BENCHMARKS_KEY = "aimBenchmarks"
FAVORITES_KEY = "aimFavorites"
THEME_KEY = "aimTheme"
USER_GAME_KEY = "aimUserGame"
USER_SENS_KEY = "aimUserIngameSens"
USER_DPI_KEY = "aimUserDPI"

DEFAULT_GAME = "Valorant"
DEFAULT_SENS = "0.3"
DEFAULT_DPI = "800"


class LocalStorage:
    """String key/value storage backed by one JSON file per key."""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else get_settings().data_dir
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def has_item(self, key: str) -> bool:
        return self._path(key).exists()

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def _load_benchmarks(storage: LocalStorage) -> list[BenchmarkEntry]:
    raw = storage.get_item(BENCHMARKS_KEY)
    if raw is None:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        logger.error("Failed to parse benchmarks from storage: %s", e)
        storage.remove_item(BENCHMARKS_KEY)
        return []

    if not isinstance(parsed, list) or not all(
        isinstance(item, dict)
        and isinstance(item.get("id"), (int, str))
        and not isinstance(item.get("id"), bool)
        for item in parsed
    ):
        logger.error("Invalid data found in storage for %s", BENCHMARKS_KEY)
        storage.remove_item(BENCHMARKS_KEY)
        return []

    # Only the collection shape is checked above; single bad records are dropped
    entries = []
    for item in parsed:
        try:
            entries.append(BenchmarkEntry.from_dict(item))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Skipping unreadable benchmark %r: %s", item.get("id"), e)
    return entries


class ScoreStore:
    """
    Ordered collection of benchmark entries; single source of truth for the UI.

    Stored order is newest-first for manual and bulk entries; imports are
    appended at the end.
    """

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()
        self._entries: list[BenchmarkEntry] = _load_benchmarks(self.storage)

    @property
    def entries(self) -> tuple[BenchmarkEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BenchmarkEntry]:
        return iter(list(self._entries))

    def ids(self) -> set[EntryId]:
        return {e.id for e in self._entries}

    def get(self, entry_id: EntryId) -> Optional[BenchmarkEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def unique_scenarios(self) -> list[str]:
        return sorted({e.scenario for e in self._entries})

    def add(self, entry: BenchmarkEntry) -> None:
        if entry.id in self.ids():
            raise ValueError(f"Duplicate entry id: {entry.id!r}")
        self._entries.insert(0, entry)
        self._save()

    def add_many(self, entries: Iterable[BenchmarkEntry]) -> None:
        batch = list(entries)
        seen = self.ids()
        for entry in batch:
            if entry.id in seen:
                raise ValueError(f"Duplicate entry id: {entry.id!r}")
            seen.add(entry.id)
        self._entries = batch + self._entries
        self._save()

    def merge_imported(self, entries: Iterable[BenchmarkEntry]) -> int:
        """Append imported entries, skipping ids already present. Returns the count added."""
        seen = self.ids()
        added = 0
        for entry in entries:
            if entry.id in seen:
                logger.info("Skipping already imported entry %s", entry.id)
                continue
            seen.add(entry.id)
            self._entries.append(entry)
            added += 1
        if added:
            self._save()
        return added

    def delete(self, entry_id: EntryId) -> bool:
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self._save()
        return True

    def clear(self) -> None:
        self._entries = []
        self._save()

    def _save(self) -> None:
        # An untouched store never creates the key
        if self._entries or self.storage.has_item(BENCHMARKS_KEY):
            payload = json.dumps([e.to_dict() for e in self._entries])
            self.storage.set_item(BENCHMARKS_KEY, payload)


class FavoritesStore:
    """Set of favorite scenario names, kept sorted."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()
        self._favorites: list[str] = self._load()

    def _load(self) -> list[str]:
        raw = self.storage.get_item(FAVORITES_KEY)
        if raw is None:
            logger.debug("No favorites found in storage.")
            return []
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.error("Failed to parse favorites from storage: %s", e)
            self.storage.remove_item(FAVORITES_KEY)
            return []
        if not isinstance(parsed, list) or not all(isinstance(f, str) for f in parsed):
            logger.error("Invalid data found in storage for %s", FAVORITES_KEY)
            self.storage.remove_item(FAVORITES_KEY)
            return []
        return parsed

    @property
    def favorites(self) -> list[str]:
        return list(self._favorites)

    def __contains__(self, scenario: str) -> bool:
        return scenario in self._favorites

    def add(self, scenario: str) -> bool:
        if not scenario or scenario in self._favorites:
            return False
        self._favorites = sorted(self._favorites + [scenario])
        self._save()
        return True

    def remove(self, scenario: str) -> bool:
        if scenario not in self._favorites:
            return False
        self._favorites = [f for f in self._favorites if f != scenario]
        self._save()
        return True

    def _save(self) -> None:
        self.storage.set_item(FAVORITES_KEY, json.dumps(self._favorites))


class PreferencesStore:
    """Theme and the user's game / sensitivity / DPI fields."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()
        stored_theme = self._read_string(THEME_KEY)
        self._theme = Theme(stored_theme) if stored_theme in ("light", "dark") else Theme.DARK
        self._game = self._read_string(USER_GAME_KEY) or DEFAULT_GAME
        self._sens = self._read_string(USER_SENS_KEY) or DEFAULT_SENS
        self._dpi = self._read_string(USER_DPI_KEY) or DEFAULT_DPI

    def _read_string(self, key: str) -> Optional[str]:
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError as e:
            logger.error("Failed to parse %s from storage: %s", key, e)
            self.storage.remove_item(key)
            return None
        if not isinstance(value, str):
            logger.error("Invalid data found in storage for %s", key)
            self.storage.remove_item(key)
            return None
        return value

    def _write_string(self, key: str, value: str) -> None:
        self.storage.set_item(key, json.dumps(value))

    @property
    def theme(self) -> Theme:
        return self._theme

    @theme.setter
    def theme(self, value: Theme) -> None:
        self._theme = Theme(value)
        self._write_string(THEME_KEY, self._theme.value)

    def toggle_theme(self) -> Theme:
        self.theme = Theme.LIGHT if self._theme is Theme.DARK else Theme.DARK
        return self._theme

    @property
    def user_game(self) -> str:
        return self._game

    @user_game.setter
    def user_game(self, value: str) -> None:
        self._game = str(value)
        self._write_string(USER_GAME_KEY, self._game)

    @property
    def user_sensitivity(self) -> str:
        return self._sens

    @user_sensitivity.setter
    def user_sensitivity(self, value: str) -> None:
        self._sens = str(value)
        self._write_string(USER_SENS_KEY, self._sens)

    @property
    def user_dpi(self) -> str:
        return self._dpi

    @user_dpi.setter
    def user_dpi(self, value: str) -> None:
        self._dpi = str(value)
        self._write_string(USER_DPI_KEY, self._dpi)

    @property
    def sensitivity_label(self) -> str:
        return f"{self._sens} @ {self._dpi} DPI"
