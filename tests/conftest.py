"""Pytest fixtures for testing."""

from datetime import datetime
from typing import Any

import httpx
import pytest

from eri_chat.config.models import ModelTiers
from eri_chat.config.settings import Settings
from eri_chat.core.orchestrator import ModelOrchestrator
from eri_chat.data.transcript import ConversationTurn, Transcript
from eri_chat.weather.aggregator import ForecastAggregator
from eri_chat.weather.client import OpenWeatherClient
from eri_chat.weather.models import ForecastPoint, WeatherSnapshot

from tests.fakes import FakeProvider, fixed_clock, weather_transport


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        groq_api_key="test-key",
        openweather_api_key="test-weather-key",
        log_level="DEBUG",
    )


@pytest.fixture
def tiers() -> ModelTiers:
    return ModelTiers(primary="primary-model", secondary="secondary-model", tertiary="tertiary-model")


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def orchestrator(provider: FakeProvider, tiers: ModelTiers) -> ModelOrchestrator:
    return ModelOrchestrator(provider, tiers, schema_retry_attempts=3)


@pytest.fixture
def transcript() -> Transcript:
    return (
        ConversationTurn(role="system", content="You are a travel assistant."),
        ConversationTurn(role="user", content="京都の天気は？"),
    )


@pytest.fixture
def kyoto_snapshot() -> WeatherSnapshot:
    return WeatherSnapshot(
        city="Kyoto",
        country="JP",
        temp=18,
        feels_like=17,
        humidity=60,
        description="晴れ",
        icon="01d",
        wind_speed=2.5,
        forecast=[
            ForecastPoint(label="今日", time="Now", temp=18, description="晴れ", icon="01d"),
        ],
    )


@pytest.fixture
def current_reading() -> dict[str, Any]:
    return {
        "main": {"temp": 18.4, "feels_like": 16.6, "humidity": 60},
        "weather": [{"description": "few clouds", "icon": "02d"}],
        "wind": {"speed": 3.1},
    }


@pytest.fixture
def make_aggregator(current_reading: dict[str, Any]):
    """Build a ForecastAggregator over a mocked OpenWeatherMap."""

    def factory(
        samples: list[dict[str, Any]],
        now: datetime,
        geocode: Any = None,
        tz: str = "UTC",
        requests: list[httpx.Request] | None = None,
        api_key: str = "test-weather-key",
        current: dict[str, Any] | None = None,
    ) -> ForecastAggregator:
        if geocode is None:
            geocode = [{"name": "Kyoto", "country": "JP", "lat": 35.02, "lon": 135.75}]
        transport = weather_transport(
            geocode,
            current if current is not None else current_reading,
            {"list": samples},
            requests,
        )
        http_client = httpx.AsyncClient(
            base_url="https://api.openweathermap.org", transport=transport
        )
        return ForecastAggregator(
            OpenWeatherClient(http_client, api_key),
            tz=tz,
            clock=fixed_clock(now),
        )

    return factory
