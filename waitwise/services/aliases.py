"""
Alias & keyword tables
======================
Park aliases, ride aliases, search markers and the intent keyword lists live
in a versioned JSON document (bundled: waitwise/data/aliases.json, override
with ALIASES_PATH) so they can be extended without touching matching code.

  park_aliases      — ordered [alias, park] pairs; order matters, the first
                      alias found in an utterance wins. v2 names the park by
                      its id, v1 by its canonical name
  ride_aliases      — {alias: full ride name fragment}
  search_markers    — literal prefixes that force a web search
  recency_patterns  — phrases that imply fresh web context is needed
  queue_patterns    — phrases that imply ride wait times are needed
  filler_words      — words dropped from a query before ride matching
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from waitwise import config
from waitwise.services.normalizer import normalize

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = {1, 2}


@dataclass(frozen=True)
class AliasTables:
    version: int
    park_aliases: Tuple[Tuple[str, Union[int, str]], ...] = ()
    ride_aliases: Dict[str, str] = field(default_factory=dict)
    search_markers: Tuple[str, ...] = ()
    recency_patterns: Tuple[str, ...] = ()
    queue_patterns: Tuple[str, ...] = ()
    filler_words: frozenset = frozenset()

    @classmethod
    def from_dict(cls, data: dict) -> "AliasTables":
        version = data.get("version")
        if version not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported alias table version: {version!r}")

        return cls(
            version=version,
            park_aliases=tuple(
                (normalize(alias), int(park) if version >= 2 else park)
                for alias, park in data.get("park_aliases", [])
            ),
            ride_aliases={
                normalize(alias): normalize(full)
                for alias, full in (data.get("ride_aliases") or {}).items()
            },
            search_markers=tuple(normalize(m) for m in data.get("search_markers", [])),
            recency_patterns=tuple(normalize(p) for p in data.get("recency_patterns", [])),
            queue_patterns=tuple(normalize(p) for p in data.get("queue_patterns", [])),
            filler_words=frozenset(normalize(w) for w in data.get("filler_words", [])),
        )


def load_alias_tables(path: Optional[Path] = None) -> AliasTables:
    path = Path(path or config.ALIASES_PATH)
    with open(path, "r", encoding="utf-8") as f:
        tables = AliasTables.from_dict(json.load(f))
    logger.info(
        f"[Aliases] Loaded v{tables.version} from {path}: "
        f"{len(tables.park_aliases)} park aliases, {len(tables.ride_aliases)} ride aliases."
    )
    return tables


@lru_cache(maxsize=1)
def default_alias_tables() -> AliasTables:
    """The process-wide tables, loaded once on first use."""
    return load_alias_tables()
