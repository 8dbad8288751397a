"""Per-user settings, watch history and indexing of already downloaded files."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields

from .bloom_filter import BloomFilter, get_filter
from .models import Episode

HISTORY_FILE = "history.json"


@dataclass
class HistoryEntry:
    """The last episode watched of one series on one provider."""

    provider: str = ""
    anime_id: str = ""
    episode_id: int = 0
    episode_number: int = 0


_ENTRY_FIELDS = {field.name for field in fields(HistoryEntry)}


def _entry_from_json(data: object) -> HistoryEntry | None:
    if not isinstance(data, dict):
        return None
    return HistoryEntry(**{key: value for key, value in data.items() if key in _ENTRY_FIELDS})


def index_files(root_dir: str, bloom: BloomFilter) -> None:
    """Add the path of every file below ``root_dir`` to ``bloom``."""
    for directory, _subdirs, files in os.walk(root_dir):
        for name in files:
            bloom.add(os.path.join(directory, name))


class User:
    """A user with a download directory and a persisted watch history."""

    def __init__(self, name: str, root_dir: str) -> None:
        self.name = name
        self.root_dir = root_dir
        self._history: list[HistoryEntry] | None = None

    @property
    def _history_path(self) -> str:
        return os.path.join(self.root_dir, HISTORY_FILE)

    def _load(self) -> list[HistoryEntry]:
        try:
            with open(self._history_path, encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, ValueError):
            return []
        if not isinstance(raw, list):
            return []
        entries = (_entry_from_json(item) for item in raw)
        return [entry for entry in entries if entry is not None]

    def history(self) -> list[HistoryEntry]:
        """Return the watch history, reading it from disk on first use."""
        if self._history is None:
            self._history = self._load()
        return list(self._history)

    def add_history(self, provider: str, anime_id: str, episode: Episode) -> None:
        """Record ``episode`` as the latest watched one and save the history."""
        if self._history is None:
            self._history = self._load()

        existing = next(
            (
                entry
                for entry in self._history
                if entry.provider == provider and entry.anime_id == anime_id
            ),
            None,
        )
        if existing is None:
            self._history.append(
                HistoryEntry(
                    provider=provider,
                    anime_id=anime_id,
                    episode_id=episode.id,
                    episode_number=episode.number,
                )
            )
        elif existing.episode_id == episode.id:
            return
        else:
            existing.episode_id = episode.id
            existing.episode_number = episode.number

        payload = json.dumps([asdict(entry) for entry in self._history], separators=(",", ":"))
        with open(self._history_path, "w", encoding="utf-8") as handle:
            handle.write(payload)


_instance: User | None = None


def get_user(name: str, root_dir: str) -> User:
    """Return the process-wide user and index the files under ``root_dir``."""
    global _instance
    if _instance is None:
        _instance = User(name, root_dir)
    index_files(root_dir, get_filter())
    return _instance