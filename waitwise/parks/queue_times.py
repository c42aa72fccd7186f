"""
Queue-Times Connector
=====================
Live data source: https://queue-times.com/parks/{park_id}/queue_times.json

Response shape:
  {
    "lands": [
      { "id", "name", "rides": [ { id, name, is_open, wait_time, last_updated } ] }
    ],
    "rides": [ ...same ride shape, for parks without lands... ]
  }

Ride fields:
  id            — provider ride id
  name          — display name
  is_open       — bool
  wait_time     — integer minutes (0 when closed or no posted wait)
  last_updated  — ISO 8601 UTC timestamp
"""

import httpx
import logging
from typing import List, Optional
from datetime import datetime

from pydantic import ValidationError

from waitwise import config
from waitwise.errors import UpstreamError
from waitwise.models.schemas import RideSnapshot
from waitwise.parks.base import BaseWaitTimeProvider
from waitwise.services.http import client_session

logger = logging.getLogger(__name__)

QUEUE_TIMES_PATH = "/parks/{park_id}/queue_times.json"

HEADERS = {
    "Accept":     "application/json",
    "User-Agent": config.USER_AGENT,
}


class QueueTimesConnector(BaseWaitTimeProvider):
    name = "queue_times"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None):
        self._client = client
        self.base_url = (base_url or config.QUEUE_TIMES_BASE_URL).rstrip("/")

    async def _fetch_payload(self, park_id: int) -> dict:
        url = self.base_url + QUEUE_TIMES_PATH.format(park_id=park_id)
        try:
            async with client_session(self._client) as client:
                resp = await client.get(url, headers=HEADERS)
        except httpx.HTTPError as e:
            raise UpstreamError(park_id, f"request failed: {e}") from e

        if not resp.is_success:
            raise UpstreamError(park_id, f"status {resp.status_code}", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(park_id, "response is not JSON", status_code=resp.status_code) from e

        if not isinstance(data, dict):
            raise UpstreamError(park_id, f"unexpected payload type {type(data).__name__}")
        return data

    async def fetch_queue_times(self, park_id: int) -> List[RideSnapshot]:
        data = await self._fetch_payload(park_id)

        lands = data.get("lands", [])
        top_level = data.get("rides", [])
        if not isinstance(lands, list) or not isinstance(top_level, list):
            raise UpstreamError(park_id, "lands/rides are not lists")

        raw_rides = []
        for land in lands:
            if isinstance(land, dict) and isinstance(land.get("rides"), list):
                raw_rides.extend(land["rides"])
        raw_rides.extend(top_level)

        rides: List[RideSnapshot] = []
        for entry in raw_rides:
            ride = _parse_ride(park_id, entry)
            if ride is not None:
                rides.append(ride)

        logger.info(f"[QueueTimes] park {park_id}: {len(rides)} rides fetched.")
        return rides


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────

def _parse_ride(park_id: int, entry) -> Optional[RideSnapshot]:
    if not isinstance(entry, dict) or not entry.get("name"):
        logger.debug(f"[QueueTimes] park {park_id}: skipping ride entry {entry!r}")
        return None
    try:
        return RideSnapshot(
            park_id=park_id,
            ride_id=entry.get("id", entry["name"]),
            name=str(entry["name"]),
            wait_minutes=entry.get("wait_time"),
            is_open=entry.get("is_open"),
            last_updated=_parse_dt(entry.get("last_updated")),
        )
    except ValidationError:
        logger.debug(f"[QueueTimes] park {park_id}: invalid ride entry {entry!r}")
        return None


def _parse_dt(value) -> Optional[datetime]:
    """Parse queue-times ISO 8601 timestamps ("2024-05-01T14:05:00.000Z")."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"[QueueTimes] Could not parse datetime: {value!r}")
        return None
