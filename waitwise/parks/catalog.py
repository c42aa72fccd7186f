"""
Park Catalog
============
Reference list of resorts and parks plus free-text park resolution.

Static source:   waitwise/data/parks.json (override with PARKS_PATH)
Dynamic source:  {QUEUE_TIMES_BASE_URL}/parks.json — refreshed by the scheduler

Upstream listing shape:
  [{ id, name, parks: [{ id, name, country, ... }] }, ...]

Resolution order for resolve_park_id(text):
  1. the whole normalized text equals a canonical park name
  2. the ordered alias rules (keyed by park id), each matched as a substring;
     first wins
  3. canonical park names appearing inside the text, in catalog order
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import httpx

from waitwise import config
from waitwise.models.schemas import Park, Resort
from waitwise.services.aliases import AliasTables
from waitwise.services.http import client_session
from waitwise.services.normalizer import normalize

logger = logging.getLogger(__name__)

PARKS_LISTING_PATH = "/parks.json"


class ParkCatalog:
    def __init__(self, resorts: Sequence[Resort], aliases: Optional[AliasTables] = None):
        self._aliases = aliases
        self._load(resorts)

    def _load(self, resorts: Sequence[Resort]):
        self._resorts: List[Resort] = list(resorts)
        self._parks: List[Park] = [p for r in self._resorts for p in r.parks]
        self._by_id: Dict[int, Park] = {p.id: p for p in self._parks}
        self._by_name: Dict[str, int] = {}
        for park in self._parks:
            self._by_name.setdefault(normalize(park.name), park.id)

        # Rules keyed by id survive upstream renames; rules pointing at parks
        # this catalog doesn't carry are dropped
        self._alias_rules: List[Tuple[str, int]] = []
        if self._aliases is not None:
            for alias, park in self._aliases.park_aliases:
                if isinstance(park, int):
                    park_id = park if park in self._by_id else None
                else:
                    park_id = self._by_name.get(normalize(park))
                if alias and park_id is not None:
                    self._alias_rules.append((alias, park_id))

    def replace(self, resorts: Sequence[Resort]):
        """Swap in a new resort listing. Readers see either the old or the new one."""
        self._load(resorts)

    @property
    def parks(self) -> List[Park]:
        return list(self._parks)

    @property
    def resorts(self) -> List[Resort]:
        return list(self._resorts)

    def get(self, park_id: int) -> Optional[Park]:
        return self._by_id.get(park_id)

    def match_park(self, text: str) -> Optional[Tuple[int, str]]:
        """Return (park_id, matched normalized phrase) or None."""
        needle = normalize(text)
        if not needle:
            return None

        park_id = self._by_name.get(needle)
        if park_id is not None:
            return park_id, needle

        for alias, park_id in self._alias_rules:
            if alias in needle:
                return park_id, alias

        for name, park_id in self._by_name.items():
            if name in needle:
                return park_id, name

        return None

    def resolve_park_id(self, text: str) -> Optional[int]:
        match = self.match_park(text)
        return match[0] if match else None


# ──────────────────────────────────────────────
# Loading
# ──────────────────────────────────────────────

def parse_resorts(data) -> List[Resort]:
    """Map an upstream (or bundled) resort listing to Resort models."""
    resorts: List[Resort] = []
    for r in data if isinstance(data, list) else []:
        if not isinstance(r, dict) or r.get("id") is None:
            continue
        resort_id = int(r["id"])
        resort_name = r.get("name") or "Resort"
        parks = [
            Park(
                id=int(p["id"]),
                name=p.get("name") or "Park",
                country=p.get("country") or "",
                resort_id=resort_id,
                resort_name=resort_name,
            )
            for p in (r.get("parks") if isinstance(r.get("parks"), list) else [])
            if isinstance(p, dict) and p.get("id") is not None
        ]
        resorts.append(Resort(id=resort_id, name=resort_name, parks=parks))
    return resorts


def load_static_catalog(aliases: Optional[AliasTables] = None, path: Optional[Path] = None) -> ParkCatalog:
    path = Path(path or config.PARKS_PATH)
    with open(path, "r", encoding="utf-8") as f:
        resorts = parse_resorts(json.load(f))
    logger.info(f"[Catalog] Loaded {sum(len(r.parks) for r in resorts)} parks from {path}.")
    return ParkCatalog(resorts, aliases)


async def fetch_resorts(client: Optional[httpx.AsyncClient] = None) -> List[Resort]:
    url = f"{config.QUEUE_TIMES_BASE_URL}{PARKS_LISTING_PATH}"
    headers = {"Accept": "application/json", "User-Agent": config.USER_AGENT}
    async with client_session(client) as http:
        resp = await http.get(url, headers=headers)
        resp.raise_for_status()
        return parse_resorts(resp.json())


async def refresh_catalog(catalog: ParkCatalog, client: Optional[httpx.AsyncClient] = None) -> bool:
    """
    Replace the catalog with the upstream listing.
    On any failure the current catalog is kept so lookups never break.
    """
    try:
        resorts = await fetch_resorts(client)
    except Exception as e:
        logger.error(f"[Catalog] Refresh failed, keeping current catalog: {e}")
        return False

    if not any(r.parks for r in resorts):
        logger.warning("[Catalog] Upstream listing was empty, keeping current catalog.")
        return False

    catalog.replace(resorts)
    logger.info(f"[Catalog] Refreshed: {len(resorts)} resorts, {len(catalog.parks)} parks.")
    return True
