"""Forecast aggregation.

Turns OpenWeatherMap geocoding, current-conditions and 3-hour forecast data
into a ``WeatherSnapshot`` with one to five daily points.

Steps:
1. Normalize the city query (country aliases, Japanese-locale disambiguation)
2. Geocode, retrying once with the raw query on a miss
3. Fetch current conditions and the forecast feed
4. Bucket samples per local calendar day (days > 1) or take the first one
5. Label points relative to the requester's date; "today" shows current
   conditions
"""

from datetime import date, datetime, timezone, tzinfo
from typing import Any, Callable
from zoneinfo import ZoneInfo

from eri_chat.core.exceptions import LookupFailed
from eri_chat.utils.dates import NOW, format_clock, is_today_label, relative_label
from eri_chat.utils.logging import get_logger
from eri_chat.weather.client import OpenWeatherClient
from eri_chat.weather.models import ForecastPoint, WeatherSnapshot


logger = get_logger(__name__)

MAX_FORECAST_DAYS = 5
NOON_HOUR = 12

COUNTRY_ALIASES: dict[str, str] = {
    "UK": "GB",
    "USA": "US",
    "United States": "US",
    "United Kingdom": "GB",
    "England": "GB",
}

# Native-script names the geocoder resolves to the wrong place.
NATIVE_CITY_NAMES: dict[str, str] = {
    "京都": "Kyoto",
}


def normalize_query(city: str, lang: str) -> str:
    """
    Rewrite a city query into the form the geocoder resolves best.

    - A trailing country alias becomes its ISO code ("London, UK" -> "London, GB")
    - Under the Japanese locale an unqualified name is pinned to Japan
      ("Tokyo" -> "Tokyo, JP")
    """
    query = city.strip()

    for variant, iso in COUNTRY_ALIASES.items():
        suffix = f", {variant.lower()}"
        if query.lower().endswith(suffix):
            query = query[: -len(variant)] + iso
            break

    if lang == "ja" and "," not in query and "japan" not in query.lower():
        query = f"{NATIVE_CITY_NAMES.get(query, query)}, JP"

    return query


def sample_time(sample: dict[str, Any], tz: tzinfo) -> datetime:
    """Local datetime of a forecast sample."""
    return datetime.fromtimestamp(sample["dt"], tz=timezone.utc).astimezone(tz)


def bucket_daily(
    samples: list[dict[str, Any]],
    tz: tzinfo,
    limit: int = MAX_FORECAST_DAYS,
) -> list[dict[str, Any]]:
    """
    Pick one representative sample per local calendar day.

    Within a day the sample nearest noon wins; samples are visited in
    chronological order and only a strictly closer one replaces the held
    sample, so the earlier of two equidistant samples is kept.
    """
    buckets: dict[date, dict[str, Any]] = {}

    for sample in sorted(samples, key=lambda s: s["dt"]):
        moment = sample_time(sample, tz)
        day = moment.date()
        held = buckets.get(day)
        if held is None:
            buckets[day] = sample
            continue
        held_distance = abs(sample_time(held, tz).hour - NOON_HOUR)
        if abs(moment.hour - NOON_HOUR) < held_distance:
            buckets[day] = sample

    return list(buckets.values())[:limit]


def _conditions(reading: dict[str, Any]) -> tuple[str, str]:
    weather = (reading.get("weather") or [{}])[0]
    return weather.get("description", ""), weather.get("icon", "")


def _now_point(current: dict[str, Any], label: str) -> ForecastPoint:
    description, icon = _conditions(current)
    return ForecastPoint(
        label=label,
        time=NOW,
        temp=round(current["main"]["temp"]),
        description=description,
        icon=icon,
    )


def build_forecast(
    samples: list[dict[str, Any]],
    current: dict[str, Any],
    days: int,
    lang: str,
    today: date,
    tz: tzinfo,
) -> list[ForecastPoint]:
    """Select and label forecast points."""
    if days > 1:
        selected = bucket_daily(samples, tz)
    else:
        selected = samples[:1]

    if not selected:
        return [_now_point(current, relative_label(today, today, lang))]

    points: list[ForecastPoint] = []
    for index, sample in enumerate(selected):
        moment = sample_time(sample, tz)
        label = relative_label(moment.date(), today, lang)

        if index == 0 and is_today_label(label):
            points.append(_now_point(current, label))
            continue

        description, icon = _conditions(sample)
        points.append(
            ForecastPoint(
                label=label,
                time=format_clock(moment, lang),
                temp=round(sample["main"]["temp"]),
                description=description,
                icon=icon,
            )
        )

    return points


class ForecastAggregator:
    """
    Builds weather snapshots for the chat pipeline and the weather endpoint.

    A failed lookup is never fatal: ``fetch`` returns None and callers carry
    on without weather.
    """

    def __init__(
        self,
        client: OpenWeatherClient,
        tz: tzinfo | str = "UTC",
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the aggregator.

        Args:
            client: OpenWeatherMap client
            tz: Requester timezone; defines day boundaries and "today"
            clock: Returns the current aware datetime (injectable for tests)
        """
        self._client = client
        self._tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def today(self) -> date:
        return self._clock().astimezone(self._tz).date()

    async def _locate(self, city: str, lang: str) -> dict[str, Any]:
        query = normalize_query(city, lang)
        matches = await self._client.geocode(query)

        if not matches and query != city:
            logger.info("Normalized query not found, retrying raw", query=query, city=city)
            matches = await self._client.geocode(city)

        if not matches:
            raise LookupFailed(f"No geocoding match for {city!r}", query=city)
        return matches[0]

    async def fetch(
        self,
        city_query: str,
        lang: str = "ja",
        days: int = 1,
    ) -> WeatherSnapshot | None:
        """
        Fetch a weather snapshot.

        Args:
            city_query: City as given by the model or the user
            lang: "ja" or "en"; affects query normalization and labels
            days: 1 for current conditions, >1 for a daily digest (max 5)

        Returns:
            WeatherSnapshot, or None when the city or its weather is unavailable
        """
        if not self._client.configured:
            logger.error("OPENWEATHER_API_KEY is not set")
            return None

        try:
            place = await self._locate(city_query, lang)
            lat, lon = place["lat"], place["lon"]

            current = await self._client.current(lat, lon, lang)
            if not isinstance(current, dict) or not current.get("main"):
                raise LookupFailed(f"No current conditions for {city_query!r}", query=city_query)

            forecast = await self._client.forecast(lat, lon, lang)
            samples = (forecast.get("list") or []) if isinstance(forecast, dict) else []

            points = build_forecast(samples, current, days, lang, self.today(), self._tz)
            description, icon = _conditions(current)

            snapshot = WeatherSnapshot(
                city=place.get("name", city_query),
                country=place.get("country", ""),
                temp=round(current["main"]["temp"]),
                feels_like=round(current["main"]["feels_like"]),
                humidity=current["main"]["humidity"],
                description=description,
                icon=icon,
                wind_speed=(current.get("wind") or {}).get("speed", 0.0),
                forecast=points,
            )
        except LookupFailed as e:
            logger.info("Weather lookup failed", city=city_query, reason=str(e))
            return None
        except Exception as e:
            logger.warning("Weather fetch error", city=city_query, error=str(e), exc_info=True)
            return None

        logger.info(
            "Weather snapshot built",
            city=snapshot.city,
            country=snapshot.country,
            days=len(snapshot.forecast),
        )
        return snapshot
