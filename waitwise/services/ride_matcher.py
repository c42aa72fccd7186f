"""
Ride Matcher
============
Filters a park's ride list down to the rides a free-text fragment refers to.

Stages, first satisfied wins for a given ride:
  1. normalized ride name contains the query, or the query contains the name
  2. the query is (or contains, as whole words) a known ride alias and the
     alias's full form is contained in the ride name
  3. the query has at least two tokens and every token is a substring of the
     ride name — a lone common word like "mountain" never matches by itself

Results keep the upstream payload order; there is no scoring.
"""

import re
from typing import List, Mapping, Optional, Sequence

from waitwise.models.schemas import RideSnapshot
from waitwise.services.normalizer import normalize, tokenize


def _aliases_in(query: str, ride_aliases: Mapping[str, str]) -> List[str]:
    """Full forms of every alias the query equals or contains as whole words."""
    found = []
    for alias, full in ride_aliases.items():
        if query == alias or re.search(rf"(?<!\w){re.escape(alias)}(?!\w)", query):
            found.append(full)
    return found


def match_rides(
    query: str,
    snapshots: Sequence[RideSnapshot],
    ride_aliases: Optional[Mapping[str, str]] = None,
) -> List[RideSnapshot]:
    needle = normalize(query)
    if not needle:
        return []

    alias_targets = _aliases_in(needle, ride_aliases or {})
    tokens = tokenize(needle)

    matches: List[RideSnapshot] = []
    for ride in snapshots:
        name = normalize(ride.name)
        if not name:
            continue
        if needle in name or name in needle:
            matches.append(ride)
        elif any(target in name for target in alias_targets):
            matches.append(ride)
        elif len(tokens) >= 2 and all(token in name for token in tokens):
            matches.append(ride)
    return matches
