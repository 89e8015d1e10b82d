import json
import os
import stat
import pytest
from datetime import datetime, timezone

from weathercli.domain.models.common import CacheKey
from weathercli.domain.models.errors import (
    CacheFileNotFoundError,
    CachePersistenceError,
    CorruptCacheError,
)
from weathercli.infrastructure.cache.entry_store import CacheEntry
from weathercli.infrastructure.cache.persistence import CacheFile

T0 = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def entries():
    return {
        CacheKey("london"): CacheEntry(location="London", data={"temp_c": 7.2}, cached_at=T0),
        CacheKey("são paulo"): CacheEntry(location="São Paulo", data={"temp_c": 28}, cached_at=T0),
    }


def test_save_then_load_round_trip(cache_path, entries):
    cache_file = CacheFile(cache_path)
    cache_file.save(entries)

    assert cache_file.load() == entries


def test_save_creates_private_directory_and_file(cache_path, entries):
    CacheFile(cache_path).save(entries)

    assert stat.S_IMODE(os.stat(cache_path).st_mode) == 0o600
    assert stat.S_IMODE(os.stat(cache_path.parent).st_mode) == 0o700


def test_save_writes_documented_format(cache_path, entries):
    CacheFile(cache_path).save(entries)

    document = json.loads(cache_path.read_text(encoding="utf-8"))
    assert set(document["entries"]) == {"london", "são paulo"}
    london = document["entries"]["london"]
    assert london["location"] == "London"
    assert london["data"] == {"temp_c": 7.2}
    assert datetime.fromisoformat(london["cached_at"]) == T0


def test_save_leaves_no_temporary_files(cache_path, entries):
    CacheFile(cache_path).save(entries)
    assert os.listdir(cache_path.parent) == ["cache.json"]


def test_failed_rename_keeps_previous_file(cache_path, entries, mocker):
    cache_file = CacheFile(cache_path)
    cache_file.save(entries)
    before = cache_path.read_bytes()

    mocker.patch("weathercli.infrastructure.cache.persistence.os.replace", side_effect=OSError("disk full"))
    with pytest.raises(CachePersistenceError):
        cache_file.save({})

    assert cache_path.read_bytes() == before
    assert os.listdir(cache_path.parent) == ["cache.json"]


def test_failed_directory_creation_raises_persistence_error(tmp_path, entries):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    cache_file = CacheFile(blocker / "cache.json")

    with pytest.raises(CachePersistenceError):
        cache_file.save(entries)


def test_load_missing_file(cache_path):
    with pytest.raises(CacheFileNotFoundError):
        CacheFile(cache_path).load()


def test_load_unreadable_path_raises_persistence_error(tmp_path):
    # A directory where the file should be cannot be read as text
    directory = tmp_path / "cache.json"
    directory.mkdir()
    with pytest.raises(CachePersistenceError):
        CacheFile(directory).load()


@pytest.mark.parametrize("content", [
    "{not json",
    "[1, 2, 3]",
    '{"entries": []}',
    '{"entries": {"london": {"location": "London"}}}',
    '{"entries": {"london": {"location": "London", "data": {}, "cached_at": "soon"}}}',
])
def test_load_corrupt_content(cache_path, content):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(content, encoding="utf-8")

    with pytest.raises(CorruptCacheError):
        CacheFile(cache_path).load()


def test_load_document_without_entries_is_empty(cache_path):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text("{}", encoding="utf-8")

    assert CacheFile(cache_path).load() == {}
