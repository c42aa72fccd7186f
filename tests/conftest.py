"""Shared fixtures: bundled reference data, fake upstreams and a controllable clock."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

import pytest

from waitwise.errors import UpstreamError
from waitwise.models.schemas import RideSnapshot
from waitwise.parks.base import BaseWaitTimeProvider
from waitwise.parks.catalog import load_static_catalog
from waitwise.services.aliases import load_alias_tables
from waitwise.services.cache import TTLCache
from waitwise.services.wait_times import SnapshotStore, WaitTimeAggregator

MAGIC_KINGDOM = 6
EPCOT = 5
HOLLYWOOD_STUDIOS = 7


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(BaseWaitTimeProvider):
    """In-memory wait-time provider that records every fetch."""

    name = "fake"

    def __init__(self, rides: Dict[int, List[RideSnapshot]] | None = None, failing: set | None = None):
        self.rides = rides or {}
        self.failing = failing or set()
        self.calls: List[int] = []

    async def fetch_queue_times(self, park_id: int) -> List[RideSnapshot]:
        self.calls.append(park_id)
        if park_id in self.failing:
            raise UpstreamError(park_id, "status 500", status_code=500)
        return list(self.rides.get(park_id, []))


def ride(park_id: int, name: str, wait=None, is_open=None, ride_id=None, updated=None) -> RideSnapshot:
    return RideSnapshot(
        park_id=park_id,
        ride_id=ride_id if ride_id is not None else name.lower().replace(" ", "-"),
        name=name,
        wait_minutes=wait,
        is_open=is_open,
        last_updated=updated,
    )


@pytest.fixture
def aliases():
    return load_alias_tables()


@pytest.fixture
def catalog(aliases):
    return load_static_catalog(aliases)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def park_rides():
    updated = datetime(2024, 5, 1, 14, 5, tzinfo=timezone.utc)
    return {
        MAGIC_KINGDOM: [
            ride(MAGIC_KINGDOM, "Space Mountain", 35, True, updated=updated),
            ride(MAGIC_KINGDOM, "Seven Dwarfs Mine Train", 70, True),
            ride(MAGIC_KINGDOM, "Big Thunder Mountain Railroad", 40, True),
            ride(MAGIC_KINGDOM, "Haunted Mansion", 25, False),
        ],
        EPCOT: [
            ride(EPCOT, "Guardians of the Galaxy: Cosmic Rewind", 90, True),
            ride(EPCOT, "Test Track", 55, True),
        ],
        HOLLYWOOD_STUDIOS: [
            ride(HOLLYWOOD_STUDIOS, "Space Mountain Experience", 15, True),
            ride(HOLLYWOOD_STUDIOS, "Rock 'n' Roller Coaster Starring Aerosmith", 60, True),
        ],
    }


@pytest.fixture
def provider(park_rides):
    return FakeProvider(park_rides)


@pytest.fixture
def store(provider, clock):
    return SnapshotStore(provider, TTLCache(ttl=60, clock=clock))


@pytest.fixture
def aggregator(catalog, store, aliases):
    return WaitTimeAggregator(catalog, store, aliases)
