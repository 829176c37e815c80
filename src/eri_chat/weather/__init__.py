"""Weather lookup and forecast aggregation."""

from eri_chat.weather.aggregator import ForecastAggregator, normalize_query
from eri_chat.weather.client import OpenWeatherClient
from eri_chat.weather.models import ForecastPoint, WeatherSnapshot

__all__ = [
    "ForecastAggregator",
    "ForecastPoint",
    "OpenWeatherClient",
    "WeatherSnapshot",
    "normalize_query",
]
