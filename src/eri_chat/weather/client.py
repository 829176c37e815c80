"""OpenWeatherMap HTTP client.

Resilience patterns applied:
- Retry with exponential backoff for transient failures (timeouts,
  connection errors, 5xx)
- HTTP error classification into TransientError / LookupFailed
"""

from typing import Any

import httpx

from eri_chat.core.resilience import weather_retry, wrap_weather_errors
from eri_chat.utils.logging import get_logger


logger = get_logger(__name__)


class OpenWeatherClient:
    """
    Async client for the OpenWeatherMap geocoding and weather endpoints.

    Features:
    - Direct city -> coordinates geocoding
    - Current conditions and 3-hour-step forecast by coordinates
    - Metric units, localized descriptions
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        """
        Initialize the weather client.

        Args:
            client: Shared HTTP client whose base_url is the OpenWeatherMap root
            api_key: OpenWeatherMap API key
        """
        self._client = client
        self._api_key = api_key

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @weather_retry
    @wrap_weather_errors
    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        response = await self._client.get(
            path, params={**params, "appid": self._api_key}
        )
        response.raise_for_status()
        return response.json()

    async def geocode(self, query: str) -> list[dict[str, Any]]:
        """
        Resolve a city query to candidate locations.

        Returns:
            List of matches (at most one), each with lat/lon/name/country
        """
        logger.debug("Geocoding city", query=query)
        data = await self._get_json("/geo/1.0/direct", {"q": query, "limit": 1})
        return data if isinstance(data, list) else []

    async def current(self, lat: float, lon: float, lang: str) -> dict[str, Any]:
        """Get current conditions at the given coordinates."""
        return await self._get_json(
            "/data/2.5/weather",
            {"lat": lat, "lon": lon, "units": "metric", "lang": lang},
        )

    async def forecast(self, lat: float, lon: float, lang: str) -> dict[str, Any]:
        """Get the 5-day / 3-hour forecast at the given coordinates."""
        return await self._get_json(
            "/data/2.5/forecast",
            {"lat": lat, "lon": lon, "units": "metric", "lang": lang},
        )
