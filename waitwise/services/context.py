"""
Context Assembler
=================
Builds the system instruction handed to the chat model:

  priming statement          — context is pre-fetched, never claim you can't browse
  Live ride wait times       — "Magic Kingdom — Space Mountain: 35 min (open) (updated ...)"
  Web context                — summary, then "1. title — url"
  closing instruction        — cite sources (only when any context was given)

Every free-text field is clamped to CONTEXT_FIELD_MAX_CHARS and the whole
block to CONTEXT_MAX_CHARS.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from waitwise import config
from waitwise.models.schemas import ChatMessage, IntentDecision, LiveContext, RideWait
from waitwise.services.normalizer import clamp

PRIMING = (
    "You are WaitWise, a theme-park companion assistant. "
    "Any context below was fetched moments ago on the user's behalf: use it directly "
    "and never say you are unable to browse the web or access live data."
)
CLOSING = (
    "When you rely on the context above, cite it: name the park for ride waits and "
    "the numbered source for web facts. Wait times change quickly, so say when they were updated."
)


def _format_time(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%H:%M UTC")


def format_ride_wait(wait: RideWait) -> str:
    limit = config.CONTEXT_FIELD_MAX_CHARS
    minutes = "no posted wait" if wait.wait_minutes is None else f"{wait.wait_minutes} min"
    line = f"{clamp(wait.park_name, limit)} — {clamp(wait.ride_name, limit)}: {minutes}"
    if wait.is_open is not None:
        line += " (open)" if wait.is_open else " (closed)"
    updated = _format_time(wait.last_updated)
    if updated:
        line += f" (updated {updated})"
    return line


def _ride_section(ride_waits: Sequence[RideWait], fallback: bool) -> List[str]:
    header = (
        "Live ride wait times (no ride matched by name; top waits at the park mentioned):"
        if fallback else "Live ride wait times:"
    )
    return [header] + [f"- {format_ride_wait(w)}" for w in ride_waits]


def _web_section(live: LiveContext) -> List[str]:
    limit = config.CONTEXT_FIELD_MAX_CHARS
    lines = ["Web context:"]
    if live.summary:
        lines.append(clamp(live.summary, limit))
    if live.sources:
        lines.append("Sources:")
        for i, source in enumerate(live.sources, start=1):
            lines.append(f"{i}. {clamp(source.title, limit)} — {source.url}")
    return lines


def assemble_context(
    intent: IntentDecision,
    ride_waits: Optional[Sequence[RideWait]] = None,
    live_context: Optional[LiveContext] = None,
    fallback: bool = False,
) -> str:
    sections: List[List[str]] = []
    if ride_waits:
        sections.append(_ride_section(ride_waits, fallback))
    if live_context is not None and live_context.has_content:
        sections.append(_web_section(live_context))

    limit = config.CONTEXT_MAX_CHARS
    if not sections:
        return PRIMING[:limit]

    if intent.effective_query:
        question = clamp(intent.effective_query, config.CONTEXT_FIELD_MAX_CHARS)
        sections.insert(0, [f"Context gathered for: {question}"])

    # Priming and closing are budgeted first; body lines drop from the end to fit
    budget = limit - len(PRIMING) - len(CLOSING) - 4
    lines: List[str] = []
    for section in sections:
        lines.extend(section)
        lines.append("")

    body: List[str] = []
    used = 0
    for line in lines:
        if used + len(line) + 1 > budget:
            break
        body.append(line)
        used += len(line) + 1

    text = "\n\n".join(part for part in (PRIMING, "\n".join(body).strip(), CLOSING) if part)
    # A limit smaller than priming + closing still bounds the block
    return text[:limit]


def build_messages(system_context: str, conversation: Sequence[ChatMessage]) -> List[Dict[str, str]]:
    """System instruction first, then the conversation untouched."""
    messages = [{"role": "system", "content": system_context}]
    messages.extend({"role": m.role, "content": m.content} for m in conversation)
    return messages
