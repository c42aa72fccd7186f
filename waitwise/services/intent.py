"""
Search intent classification.

Decides from the latest user utterance whether fresh web context and/or ride
wait times are needed. Both checks run independently; either, both or neither
may fire. Pattern lists come from the alias tables and are matched as whole
words, case-insensitively.
"""

import re
from typing import Optional, Pattern, Sequence, Tuple

from waitwise.models.schemas import IntentDecision
from waitwise.parks.catalog import ParkCatalog
from waitwise.services.aliases import AliasTables, default_alias_tables
from waitwise.services.normalizer import normalize


def _compile(phrases: Sequence[str]) -> Optional[Pattern]:
    if not phrases:
        return None
    # Longest first so "this weekend" wins over "this week" in the alternation
    ordered = sorted(set(phrases), key=len, reverse=True)
    body = "|".join(re.escape(p).replace(r"\ ", r"\s+") for p in ordered)
    return re.compile(rf"(?<!\w)(?:{body})(?!\w)", re.IGNORECASE)


def _prefix_end(text: str, marker: str) -> Optional[int]:
    """Length of the shortest prefix of text that normalizes to marker."""
    # Casefolding can change length ("ß" -> "ss"), so the cut is found on the original
    for end in range(1, len(text) + 1):
        head = normalize(text[:end])
        if head == marker:
            return end
        if len(head) > len(marker):
            break
    return None


class IntentClassifier:
    def __init__(self, aliases: Optional[AliasTables] = None, catalog: Optional[ParkCatalog] = None):
        self.aliases = aliases or default_alias_tables()
        self.catalog = catalog
        self._markers: Tuple[str, ...] = tuple(
            sorted(self.aliases.search_markers, key=len, reverse=True)
        )
        self._recency_re = _compile(self.aliases.recency_patterns)
        self._queue_re = _compile(self.aliases.queue_patterns)

    def strip_marker(self, utterance: str) -> Tuple[bool, str]:
        """Return (had_marker, utterance without the marker, trimmed)."""
        text = (utterance or "").strip()
        folded = normalize(text)
        for marker in self._markers:
            if not marker or not folded.startswith(marker):
                continue
            end = _prefix_end(text, marker)
            if end is not None:
                return True, text[end:].strip()
        return False, text

    def classify(self, utterance: str, force_search: bool = False) -> IntentDecision:
        had_marker, effective = self.strip_marker(utterance)
        text = normalize(utterance)

        wants_web = (
            force_search
            or had_marker
            or bool(self._recency_re and self._recency_re.search(text))
        )
        wants_waits = bool(self._queue_re and self._queue_re.search(text))

        park_hint = self.catalog.resolve_park_id(effective) if self.catalog else None

        return IntentDecision(
            wants_web_search=wants_web,
            wants_wait_times=wants_waits,
            effective_query=effective,
            park_hint=park_hint,
        )


def classify(
    utterance: str,
    force_search: bool = False,
    catalog: Optional[ParkCatalog] = None,
    aliases: Optional[AliasTables] = None,
) -> IntentDecision:
    return IntentClassifier(aliases, catalog).classify(utterance, force_search=force_search)
