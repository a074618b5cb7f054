"""Unit tests for the on-disk location cache."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import CachedLocation
from datastore.location_cache import LocationCache
from models.records import ResolvedLocation

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _location() -> ResolvedLocation:
    return ResolvedLocation(
        latitude=37.7749, longitude=-122.4194, city="San Francisco", country="United States"
    )


def test_load_returns_none_when_file_missing(tmp_path) -> None:
    cache = LocationCache(path=tmp_path / "location.json")

    assert cache.load() is None


def test_save_and_load_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "location.json"
    cache = LocationCache(path=path, clock=lambda: NOW)

    saved = cache.save(_location())
    loaded = cache.load()

    assert path.exists()
    payload = json.loads(path.read_text())
    assert payload["location"]["city"] == "San Francisco"
    assert payload["fetched_at"].startswith("2024-01-01T12:00:00")
    assert loaded == saved
    assert loaded == CachedLocation(location=_location(), fetched_at=NOW)


def test_save_leaves_no_temporary_files(tmp_path) -> None:
    cache = LocationCache(path=tmp_path / "location.json", clock=lambda: NOW)

    cache.save(_location())
    cache.save(_location(), fetched_at=NOW + timedelta(hours=1))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["location.json"]
    assert cache.load().fetched_at == NOW + timedelta(hours=1)


def test_failed_write_keeps_previous_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "location.json"
    cache = LocationCache(path=path, clock=lambda: NOW)
    cache.save(_location())
    before = path.read_text()

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("datastore.location_cache.os.replace", broken_replace)

    with pytest.raises(OSError):
        cache.save(_location(), fetched_at=NOW + timedelta(hours=2))

    assert path.read_text() == before
    assert sorted(p.name for p in tmp_path.iterdir()) == ["location.json"]


@pytest.mark.parametrize(
    "content",
    [
        "",
        "not json at all",
        "[1, 2, 3]",
        '{"location": {"city": "Nowhere"}}',
        '{"location": {"latitude": 1, "longitude": 2, "city": "a", "country": "b"},'
        ' "fetched_at": "2024-01-01T00:00:00"}',
    ],
)
def test_corrupted_cache_is_a_miss(tmp_path, content) -> None:
    path = tmp_path / "location.json"
    path.write_text(content)

    assert LocationCache(path=path).load() is None


def test_freshness_window(tmp_path) -> None:
    cache = LocationCache(path=tmp_path / "location.json", ttl=timedelta(hours=24))
    entry = CachedLocation(location=_location(), fetched_at=NOW)

    assert cache.is_fresh(entry, now=NOW + timedelta(hours=23, minutes=59))
    assert not cache.is_fresh(entry, now=NOW + timedelta(hours=24))
    assert not cache.is_fresh(entry, now=NOW + timedelta(days=3))


def test_future_timestamp_is_stale(tmp_path) -> None:
    cache = LocationCache(path=tmp_path / "location.json", clock=lambda: NOW)

    skewed = CachedLocation(location=_location(), fetched_at=NOW + timedelta(minutes=5))
    far_future = CachedLocation(location=_location(), fetched_at=NOW + timedelta(days=3650))

    assert not cache.is_fresh(skewed)
    assert not cache.is_fresh(far_future)
    assert cache.is_fresh(CachedLocation(location=_location(), fetched_at=NOW))


def test_clear_removes_file(tmp_path) -> None:
    cache = LocationCache(path=tmp_path / "location.json", clock=lambda: NOW)
    cache.save(_location())

    cache.clear()
    cache.clear()

    assert cache.load() is None
