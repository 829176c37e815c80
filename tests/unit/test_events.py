"""Tests for stream events."""

import json

import pytest

from eri_chat.api.sse import closed_stream, event_generator
from eri_chat.core.exceptions import CompletionUnavailable
from eri_chat.events.models import StreamEvent
from eri_chat.events.types import StreamEventType


class TestStreamEvent:
    """Tests for event models."""

    def test_text_to_sse(self):
        """Test SSE formatting."""
        sse = StreamEvent.text("晴れ").to_sse()

        assert sse.startswith("data: ")
        assert sse.endswith("\n\n")
        assert json.loads(sse[len("data: "):]) == {"type": "text", "data": "晴れ"}
        assert "晴れ" in sse

    def test_done_has_no_data(self):
        assert json.loads(StreamEvent.done().to_json()) == {"type": "done"}

    def test_weather_event(self):
        event = StreamEvent.weather({"city": "Kyoto"})

        assert event.type == StreamEventType.WEATHER
        assert json.loads(event.to_json())["data"] == {"city": "Kyoto"}


class TestEventGenerator:
    """Tests for SSE line generation."""

    @pytest.mark.asyncio
    async def test_stops_after_done(self):
        async def events():
            yield StreamEvent.text("a")
            yield StreamEvent.done()
            yield StreamEvent.text("ignored")

        lines = [line async for line in event_generator(events())]

        assert len(lines) == 2
        assert '"done"' in lines[-1]

    @pytest.mark.asyncio
    async def test_unavailable_ends_without_done(self):
        async def events():
            yield StreamEvent.weather({"city": "Kyoto"})
            raise CompletionUnavailable()

        lines = [line async for line in event_generator(events())]

        assert len(lines) == 1
        assert '"weather"' in lines[0]

    @pytest.mark.asyncio
    async def test_closed_stream_is_empty(self):
        assert [line async for line in event_generator(closed_stream())] == []
