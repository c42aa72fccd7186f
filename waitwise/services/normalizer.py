"""
Text normalization used as the equality basis for every lookup.

Two names are "the same" iff their normalized forms are equal.
"""

import html
import re
from typing import List, Optional

_CHAR_MAP = str.maketrans({
    "‘": "'", "’": "'", "‚": "'", "‛": "'", "′": "'", "`": "'",
    "“": '"', "”": '"', "„": '"', "‟": '"', "″": '"',
    "–": "-", "—": "-",
    "\u00a0": " ",
})

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_SPLIT_RE = re.compile(r"[\W_]+")


def normalize(value: Optional[str]) -> str:
    """Lower-case, unify quotes/dashes/entities, collapse whitespace, trim."""
    if not value:
        return ""
    text = str(value)
    # Repeat until stable: casefolding can expose a new entity ("&AMP;amp;")
    while True:
        folded = html.unescape(text).translate(_CHAR_MAP).casefold()
        if folded == text:
            break
        text = folded
    return _WHITESPACE_RE.sub(" ", text).strip()


def tokenize(value: Optional[str]) -> List[str]:
    """Split normalized text on non-word characters, dropping empties."""
    return [t for t in _TOKEN_SPLIT_RE.split(normalize(value)) if t]


def clamp(value: Optional[str], limit: int) -> str:
    """Collapse whitespace and cut to `limit` characters, marking the cut with an ellipsis."""
    text = _WHITESPACE_RE.sub(" ", value or "").strip()
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)].rstrip() + "…"
