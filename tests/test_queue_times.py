"""Tests for the queue-times connector and the provider registry.

Covers:
- lands → rides flattening (plus top-level rides)
- optional fields and malformed ride entries
- UpstreamError on bad status, non-JSON, wrong shape, transport errors
- build_provider registry lookups
"""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from waitwise.errors import UpstreamError
from waitwise.parks import build_provider
from waitwise.parks.queue_times import QueueTimesConnector

PAYLOAD = {
    "lands": [
        {
            "id": 1,
            "name": "Tomorrowland",
            "rides": [
                {"id": 284, "name": "Space Mountain", "is_open": True, "wait_time": 35,
                 "last_updated": "2024-05-01T14:05:00.000Z"},
                {"id": 285, "name": "Tomorrowland Speedway", "is_open": False, "wait_time": 0,
                 "last_updated": "2024-05-01T14:05:00.000Z"},
            ],
        },
        {
            "id": 2,
            "name": "Fantasyland",
            "rides": [
                {"id": 286, "name": "Seven Dwarfs Mine Train"},
                {"id": 287},
                "garbage",
            ],
        },
    ],
    "rides": [
        {"id": 300, "name": "Walt Disney World Railroad", "is_open": True, "wait_time": 5,
         "last_updated": "not a date"},
    ],
}


def _connector(handler) -> QueueTimesConnector:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return QueueTimesConnector(client=client, base_url="https://queue-times.test")


class TestFetchQueueTimes:
    """Tests for QueueTimesConnector.fetch_queue_times."""

    @pytest.mark.asyncio
    async def test_flattens_lands_in_payload_order(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=PAYLOAD)

        rides = await _connector(handler).fetch_queue_times(6)

        assert seen == ["https://queue-times.test/parks/6/queue_times.json"]
        assert [r.name for r in rides] == [
            "Space Mountain",
            "Tomorrowland Speedway",
            "Seven Dwarfs Mine Train",
            "Walt Disney World Railroad",
        ]
        assert all(r.park_id == 6 for r in rides)

    @pytest.mark.asyncio
    async def test_parses_fields(self):
        rides = await _connector(lambda r: httpx.Response(200, json=PAYLOAD)).fetch_queue_times(6)
        space = rides[0]

        assert space.ride_id == 284
        assert space.wait_minutes == 35
        assert space.is_open is True
        assert space.last_updated == datetime(2024, 5, 1, 14, 5, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_missing_optional_fields_are_absent(self):
        rides = await _connector(lambda r: httpx.Response(200, json=PAYLOAD)).fetch_queue_times(6)
        mine_train = rides[2]
        railroad = rides[3]

        assert mine_train.wait_minutes is None
        assert mine_train.is_open is None
        assert mine_train.last_updated is None
        assert railroad.last_updated is None

    @pytest.mark.asyncio
    async def test_empty_park(self):
        rides = await _connector(lambda r: httpx.Response(200, json={"lands": [], "rides": []})).fetch_queue_times(6)
        assert rides == []

    @pytest.mark.asyncio
    async def test_bad_status_raises(self):
        with pytest.raises(UpstreamError) as exc_info:
            await _connector(lambda r: httpx.Response(404, text="Not Found")).fetch_queue_times(6)
        assert exc_info.value.park_id == 6
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_non_json_raises(self):
        with pytest.raises(UpstreamError):
            await _connector(lambda r: httpx.Response(200, text="<html>maintenance</html>")).fetch_queue_times(6)

    @pytest.mark.asyncio
    async def test_wrong_shape_raises(self):
        with pytest.raises(UpstreamError):
            await _connector(lambda r: httpx.Response(200, json=[1, 2, 3])).fetch_queue_times(6)
        with pytest.raises(UpstreamError):
            await _connector(lambda r: httpx.Response(200, json={"lands": "nope"})).fetch_queue_times(6)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            await _connector(handler).fetch_queue_times(6)


class TestProviderRegistry:
    """Tests for build_provider."""

    def test_builds_queue_times(self):
        assert isinstance(build_provider("queue_times"), QueueTimesConnector)

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_provider("themeparks_wiki")
