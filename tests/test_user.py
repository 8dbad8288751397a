import json
import os

import pytest

from seriesdl import user as user_module
from seriesdl.bloom_filter import BloomFilter, get_filter
from seriesdl.models import Episode
from seriesdl.user import HistoryEntry, User, get_user, index_files


def test_history_is_empty_without_file(tmp_path):
    assert User("alice", str(tmp_path)).history() == []


def test_add_history_writes_json(tmp_path):
    person = User("alice", str(tmp_path))
    person.add_history("animeunity", "42", Episode(id=7, number=3))
    saved = json.loads((tmp_path / "history.json").read_text())
    assert saved == [
        {"provider": "animeunity", "anime_id": "42", "episode_id": 7, "episode_number": 3}
    ]


def test_history_round_trips_through_disk(tmp_path):
    User("alice", str(tmp_path)).add_history("animeunity", "42", Episode(id=7, number=3))
    reloaded = User("alice", str(tmp_path)).history()
    assert reloaded == [HistoryEntry("animeunity", "42", 7, 3)]


def test_add_history_updates_existing_series(tmp_path):
    person = User("alice", str(tmp_path))
    person.add_history("animeunity", "42", Episode(id=7, number=3))
    person.add_history("animeunity", "42", Episode(id=8, number=4))
    assert person.history() == [HistoryEntry("animeunity", "42", 8, 4)]
    assert User("alice", str(tmp_path)).history() == person.history()


def test_same_episode_is_not_rewritten(tmp_path):
    person = User("alice", str(tmp_path))
    person.add_history("animeunity", "42", Episode(id=7, number=3))
    path = tmp_path / "history.json"
    path.write_text("[]")
    person.add_history("animeunity", "42", Episode(id=7, number=3))
    assert path.read_text() == "[]"


def test_other_provider_and_series_are_appended(tmp_path):
    person = User("alice", str(tmp_path))
    person.add_history("animeunity", "42", Episode(id=7, number=3))
    person.add_history("other", "42", Episode(id=9, number=1))
    person.add_history("animeunity", "43", Episode(id=10, number=2))
    assert [(e.provider, e.anime_id) for e in person.history()] == [
        ("animeunity", "42"),
        ("other", "42"),
        ("animeunity", "43"),
    ]


def test_invalid_history_file_gives_empty_history(tmp_path):
    (tmp_path / "history.json").write_text("not json")
    assert User("alice", str(tmp_path)).history() == []


def test_existing_history_is_read(tmp_path):
    (tmp_path / "history.json").write_text(
        json.dumps([{"provider": "animeunity", "anime_id": "5", "episode_id": 11, "episode_number": 2}])
    )
    assert User("alice", str(tmp_path)).history() == [HistoryEntry("animeunity", "5", 11, 2)]


def test_add_history_fails_on_missing_directory(tmp_path):
    person = User("alice", str(tmp_path / "missing"))
    with pytest.raises(OSError):
        person.add_history("animeunity", "1", Episode(id=1, number=1))


def test_index_files_adds_file_paths(tmp_path):
    show = tmp_path / "show"
    show.mkdir()
    (show / "1.mp4").write_bytes(b"")
    bloom = BloomFilter()
    index_files(str(tmp_path), bloom)
    assert bloom.contains(os.path.join(str(tmp_path), "show", "1.mp4"))


def test_index_files_ignores_missing_root(tmp_path):
    bloom = BloomFilter()
    index_files(str(tmp_path / "missing"), bloom)
    assert bloom.bits == 0


def test_get_user_is_singleton_and_indexes(tmp_path, monkeypatch):
    monkeypatch.setattr(user_module, "_instance", None)
    (tmp_path / "a.mp4").write_bytes(b"")
    first = get_user("alice", str(tmp_path))
    second = get_user("bob", str(tmp_path))
    assert first is second
    assert first.name == "alice"
    assert get_filter().contains(os.path.join(str(tmp_path), "a.mp4"))