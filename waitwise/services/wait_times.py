"""
Wait Times
==========
SnapshotStore       — cache-fronted access to one park's ride snapshot
WaitTimeAggregator  — answers "what's the wait for X" across one or many parks
                      and "what are the top waits at park Y"

Per-park upstream failures are logged and skipped during aggregation so one
unreachable park never blanks out the whole answer.
"""

import asyncio
import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from waitwise import config
from waitwise.errors import UpstreamError
from waitwise.models.schemas import RideSnapshot, RideWait, WaitLookup
from waitwise.parks.base import BaseWaitTimeProvider
from waitwise.parks.catalog import ParkCatalog
from waitwise.services.aliases import AliasTables
from waitwise.services.cache import TTLCache
from waitwise.services.normalizer import normalize
from waitwise.services.ride_matcher import match_rides

logger = logging.getLogger(__name__)

_EDGE_PUNCTUATION = "?!.,;:'\"()[]"


# ──────────────────────────────────────────────
# Snapshot store
# ──────────────────────────────────────────────

class SnapshotStore:
    def __init__(self, provider: BaseWaitTimeProvider, cache: Optional[TTLCache] = None):
        self.provider = provider
        self.cache = cache if cache is not None else TTLCache(ttl=config.WAIT_CACHE_TTL_SECONDS)

    async def get_snapshot(self, park_id: int) -> List[RideSnapshot]:
        """
        Return the park's rides, fetching upstream only when the cached
        snapshot is missing or older than the TTL. Failures raise
        UpstreamError and leave the cache untouched.
        """
        cached = self.cache.get(park_id)
        if cached is not None:
            logger.debug(f"[Cache] park {park_id}: hit ({len(cached)} rides).")
            return list(cached)

        rides = await self.provider.fetch_queue_times(park_id)
        self.cache.put(park_id, tuple(rides))
        return list(rides)


# ──────────────────────────────────────────────
# Aggregator
# ──────────────────────────────────────────────

class WaitTimeAggregator:
    def __init__(self, catalog: ParkCatalog, store: SnapshotStore, aliases: AliasTables):
        self.catalog = catalog
        self.store = store
        self.aliases = aliases

    def ride_fragment(self, query: str, park_phrase: Optional[str] = None) -> str:
        """Strip the park mention and queue phrasing, leaving the ride words."""
        text = normalize(query)
        if park_phrase:
            text = re.sub(rf"(?<!\w){re.escape(park_phrase)}(?!\w)", " ", text)
        words = []
        for word in text.split():
            word = word.strip(_EDGE_PUNCTUATION)
            if word and word not in self.aliases.filler_words:
                words.append(word)
        return " ".join(words)

    async def find_ride_waits(self, query: str) -> List[RideWait]:
        _, waits = await self._find(query)
        return waits

    async def park_snapshot(self, park_id: int, limit: Optional[int] = None) -> List[RideWait]:
        """
        Top rides for one park: open rides first, then longest wait.
        Absent is_open counts as open; absent wait sorts last (-1).
        """
        limit = config.TOP_WAITS_LIMIT if limit is None else limit
        rides = await self.store.get_snapshot(park_id)
        ranked = sorted(
            rides,
            key=lambda r: (
                r.is_open is not False,
                r.wait_minutes if r.wait_minutes is not None else -1,
            ),
            reverse=True,
        )
        return [self._to_wait(r) for r in ranked[:limit]]

    async def lookup(self, query: str) -> WaitLookup:
        """
        Direct ride matches; when nothing matched but a park was named,
        that park's top waits instead.
        """
        park_id, waits = await self._find(query)
        if waits or park_id is None:
            return WaitLookup(query=query, park_id=park_id, rides=waits)

        try:
            top = await self.park_snapshot(park_id)
        except UpstreamError as e:
            logger.warning(f"[Waits] Fallback snapshot failed: {e}")
            top = []
        return WaitLookup(query=query, park_id=park_id, rides=top, fallback=bool(top))

    async def _find(self, query: str) -> Tuple[Optional[int], List[RideWait]]:
        match = self.catalog.match_park(query)
        if match is not None:
            park_id, phrase = match
            park_ids = [park_id]
        else:
            park_id, phrase = None, None
            park_ids = [p.id for p in self.catalog.parks]

        fragment = self.ride_fragment(query, phrase)
        if not fragment:
            return park_id, []

        snapshots = await self._gather_snapshots(park_ids)

        waits: List[RideWait] = []
        for pid in park_ids:
            rides = snapshots.get(pid)
            if not rides:
                continue
            for ride in match_rides(fragment, rides, self.aliases.ride_aliases):
                waits.append(self._to_wait(ride))

        logger.info(
            f"[Waits] '{fragment}' across {len(park_ids)} park(s): {len(waits)} match(es)."
        )
        return park_id, waits

    async def _gather_snapshots(self, park_ids: Iterable[int]) -> Dict[int, List[RideSnapshot]]:
        park_ids = list(park_ids)
        outcomes = await asyncio.gather(
            *(self.store.get_snapshot(pid) for pid in park_ids),
            return_exceptions=True,
        )

        snapshots: Dict[int, List[RideSnapshot]] = {}
        for pid, outcome in zip(park_ids, outcomes):
            if isinstance(outcome, UpstreamError):
                logger.warning(f"[Waits] Skipping park {pid}: {outcome}")
            elif isinstance(outcome, Exception):
                logger.error(f"[Waits] Unexpected error for park {pid}: {outcome!r}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                snapshots[pid] = outcome
        return snapshots

    def _to_wait(self, ride: RideSnapshot) -> RideWait:
        park = self.catalog.get(ride.park_id)
        return RideWait(
            park_id=ride.park_id,
            park_name=park.name if park else f"Park {ride.park_id}",
            ride_name=ride.name,
            wait_minutes=ride.wait_minutes,
            is_open=ride.is_open,
            last_updated=ride.last_updated,
        )
