"""
TTL Cache
=========
Small time-bounded cache in front of upstream fetches.

  get(key)         — value if fetched less than `ttl` seconds ago, else None
  put(key, value)  — store with fetched_at = now (last writer wins)
  invalidate(key)  — drop one key, or everything when key is None

Expired entries are dropped lazily on the next get(); there is no sweep.
Only touched from the event loop, so no locking.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    fetched_at: float


class TTLCache:
    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at < self.ttl:
            return entry.value
        del self._entries[key]
        logger.debug(f"[Cache] {key!r} expired.")
        return None

    def put(self, key: Hashable, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock())

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
