"""Tests for context assembly.

Covers:
- priming statement always present, closing only with context
- ride-wait line format (minutes, status, updated time)
- web section (summary + numbered sources)
- field and total length bounds, including limits below priming + closing
- build_messages ordering
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from waitwise.models.schemas import ChatMessage, IntentDecision, LiveContext, RideWait, SearchResult
from waitwise.services.context import (
    CLOSING,
    PRIMING,
    assemble_context,
    build_messages,
    format_ride_wait,
)


def _wait(**overrides) -> RideWait:
    data = dict(park_id=6, park_name="Magic Kingdom", ride_name="Space Mountain", wait_minutes=35, is_open=True)
    data.update(overrides)
    return RideWait(**data)


INTENT = IntentDecision(wants_wait_times=True, effective_query="what's the wait for Space Mountain")


class TestFormatRideWait:
    """Tests for one ride-wait line."""

    def test_basic_line(self):
        assert format_ride_wait(_wait()) == "Magic Kingdom — Space Mountain: 35 min (open)"

    def test_closed_with_update_time(self):
        line = format_ride_wait(_wait(
            is_open=False,
            last_updated=datetime(2024, 5, 1, 14, 5, tzinfo=timezone.utc),
        ))
        assert line == "Magic Kingdom — Space Mountain: 35 min (closed) (updated 14:05 UTC)"

    def test_absent_fields(self):
        assert format_ride_wait(_wait(wait_minutes=None, is_open=None)) == \
            "Magic Kingdom — Space Mountain: no posted wait"


class TestAssembleContext:
    """Tests for assemble_context."""

    def test_no_context_is_priming_only(self):
        assert assemble_context(IntentDecision(effective_query="hi")) == PRIMING

    def test_ride_section_without_web(self):
        text = assemble_context(INTENT, [_wait()], None)

        assert text.startswith(PRIMING)
        assert "Live ride wait times:" in text
        assert "Magic Kingdom — Space Mountain: 35 min" in text
        assert "Web context:" not in text
        assert text.endswith(CLOSING)

    def test_fallback_header(self):
        text = assemble_context(INTENT, [_wait()], None, fallback=True)
        assert "top waits at the park mentioned" in text

    def test_web_section(self):
        live = LiveContext(
            summary="Epic Universe opens at 9am.",
            sources=[
                SearchResult(title="Hours", url="https://example.com/hours"),
                SearchResult(title="News", url="https://example.com/news"),
            ],
            provider="tavily",
        )
        text = assemble_context(IntentDecision(wants_web_search=True, effective_query="epic hours"), None, live)

        assert "Web context:\nEpic Universe opens at 9am." in text
        assert "1. Hours — https://example.com/hours" in text
        assert "2. News — https://example.com/news" in text
        assert "Live ride wait times" not in text

    def test_rides_before_web(self):
        live = LiveContext(summary="Something new.", provider="x")
        text = assemble_context(INTENT, [_wait()], live)
        assert text.index("Live ride wait times") < text.index("Web context")

    def test_empty_live_context_ignored(self):
        assert assemble_context(INTENT, [], LiveContext()) == PRIMING

    def test_fields_are_clamped(self):
        text = assemble_context(INTENT, [_wait(ride_name="R" * 2000)], None)
        assert "R" * 501 not in text
        assert "R" * 499 in text

    def test_total_is_bounded(self):
        waits = [_wait(ride_name=f"Ride {i} " + "x" * 300) for i in range(100)]
        text = assemble_context(INTENT, waits, None)

        assert len(text) <= 6000
        assert text.startswith(PRIMING)
        assert text.endswith(CLOSING)

    @pytest.mark.parametrize("limit", [10, len(PRIMING) + 5, len(PRIMING) + len(CLOSING)])
    def test_tiny_limit_still_bounds_block(self, monkeypatch, limit):
        monkeypatch.setattr("waitwise.config.CONTEXT_MAX_CHARS", limit)

        assert len(assemble_context(INTENT, [_wait()], None)) <= limit
        assert len(assemble_context(IntentDecision(effective_query="hi"))) <= limit


class TestBuildMessages:
    """Tests for the message list handed to the chat model."""

    def test_system_first_then_conversation(self):
        conversation = [
            ChatMessage(role="user", content="hi"),
            ChatMessage(role="assistant", content="hello"),
            ChatMessage(role="user", content="wait for space mountain?"),
        ]
        messages = build_messages("SYSTEM", conversation)

        assert messages[0] == {"role": "system", "content": "SYSTEM"}
        assert messages[1:] == [m.model_dump() for m in conversation]
