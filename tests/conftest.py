"""Shared fixtures for Music Sheets tests."""

import itertools
from typing import Any, Dict

import pytest

from music_sheets.core.store import MemoryStore
from music_sheets.domain.sheets import SheetManager


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def id_factory():
    """Deterministic sheet ids: sheet-1, sheet-2, ..."""
    counter = itertools.count(1)
    return lambda: f"sheet-{next(counter)}"


@pytest.fixture
def manager(store: MemoryStore, id_factory) -> SheetManager:
    return SheetManager(store, id_factory=id_factory)


def make_track(track_id: str, platform: str = "local", **extra: Any) -> Dict[str, Any]:
    track = {
        "platform": platform,
        "id": track_id,
        "title": f"Track {track_id}",
        "artist": "Test Artist",
        "artwork": f"https://img.example/{platform}/{track_id}.jpg",
    }
    track.update(extra)
    return track


@pytest.fixture
def track_a() -> Dict[str, Any]:
    return make_track("a")


@pytest.fixture
def track_b() -> Dict[str, Any]:
    return make_track("b")


@pytest.fixture
def track_c() -> Dict[str, Any]:
    return make_track("c")


@pytest.fixture(name="make_track")
def make_track_fixture():
    """Factory for track records."""
    return make_track
