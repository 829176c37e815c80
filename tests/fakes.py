"""Test doubles for the completion provider and the weather service."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, AsyncIterator, Callable

import httpx

from eri_chat.core.exceptions import ProviderError
from eri_chat.data.transcript import (
    Completion,
    ToolCallRequest,
    Transcript,
)
from eri_chat.utils.providers.base import BaseLLMProvider
from eri_chat.weather.models import WeatherSnapshot


# =============================================================================
# Completion provider fakes
# =============================================================================


@dataclass
class RecordedCall:
    """One request seen by the fake provider."""

    model: str
    transcript: Transcript
    tools: bool
    max_tokens: int
    temperature: float | None


class FakeProvider(BaseLLMProvider):
    """
    Scripted completion provider.

    Outcomes are queued per model and consumed in order. An exception
    outcome is raised instead of returned. An unscripted request fails with
    ProviderError so tests notice unexpected calls.
    """

    def __init__(self):
        self.completions: dict[str, list[Any]] = defaultdict(list)
        self.streams: dict[str, list[Any]] = defaultdict(list)
        self.calls: list[RecordedCall] = []
        self.stream_calls: list[RecordedCall] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    def script(self, model: str, *outcomes: Any) -> "FakeProvider":
        self.completions[model].extend(outcomes)
        return self

    def script_stream(self, model: str, *outcomes: Any) -> "FakeProvider":
        """Queue streams; each outcome is a list of fragments or an exception."""
        self.streams[model].extend(outcomes)
        return self

    async def complete(
        self,
        transcript: Transcript,
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> Completion:
        self.calls.append(RecordedCall(model, transcript, bool(tools), max_tokens, temperature))
        queue = self.completions[model]
        if not queue:
            raise ProviderError(f"Unscripted completion for {model}", model=model)
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def stream(
        self,
        transcript: Transcript,
        *,
        model: str,
        max_tokens: int = 1500,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        self.stream_calls.append(RecordedCall(model, transcript, False, max_tokens, temperature))
        queue = self.streams[model]
        if not queue:
            raise ProviderError(f"Unscripted stream for {model}", model=model)
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        for fragment in outcome:
            if isinstance(fragment, Exception):
                raise fragment
            yield fragment

    @property
    def models_called(self) -> list[str]:
        return [call.model for call in self.calls]


def text_completion(content: str, model: str = "") -> Completion:
    return Completion(content=content, model=model, finish_reason="stop")


def tool_completion(
    *calls: tuple[str, str, str],
    content: str = "",
    model: str = "",
) -> Completion:
    """Completion carrying structured calls given as (id, name, arguments)."""
    return Completion(
        content=content,
        tool_calls=tuple(
            ToolCallRequest(id=call_id, name=name, arguments=arguments)
            for call_id, name, arguments in calls
        ),
        model=model,
        finish_reason="tool_calls",
    )


# =============================================================================
# Weather fakes
# =============================================================================


class FakeAggregator:
    """Aggregator stand-in returning a fixed snapshot and recording lookups."""

    def __init__(self, snapshot: WeatherSnapshot | None, today: date = date(2024, 4, 1)):
        self.snapshot = snapshot
        self.fetches: list[tuple[str, str, int]] = []
        self._today = today

    async def fetch(self, city_query: str, lang: str = "ja", days: int = 1) -> WeatherSnapshot | None:
        self.fetches.append((city_query, lang, days))
        return self.snapshot

    def today(self) -> date:
        return self._today


def weather_transport(
    geocode: Callable[[str], list[dict[str, Any]]] | list[dict[str, Any]],
    current: dict[str, Any],
    forecast: dict[str, Any],
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """
    Mock OpenWeatherMap transport.

    ``geocode`` is either a fixed result or a function of the query string.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = request.url.path
        if path == "/geo/1.0/direct":
            query = request.url.params.get("q", "")
            result = geocode(query) if callable(geocode) else geocode
            return httpx.Response(200, json=result)
        if path == "/data/2.5/weather":
            return httpx.Response(200, json=current)
        if path == "/data/2.5/forecast":
            return httpx.Response(200, json=forecast)
        return httpx.Response(404, json={"message": "not found"})

    return httpx.MockTransport(handler)


def forecast_sample(moment: datetime, temp: float, description: str = "clear sky") -> dict[str, Any]:
    return {
        "dt": int(moment.timestamp()),
        "main": {"temp": temp, "feels_like": temp, "humidity": 50},
        "weather": [{"description": description, "icon": "01d"}],
    }


def fixed_clock(moment: datetime) -> Callable[[], datetime]:
    return lambda: moment


UTC = timezone.utc
