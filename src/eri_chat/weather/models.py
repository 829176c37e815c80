"""Weather snapshot models.

Field names are Pythonic; aliases keep the wire keys the chat UI reads
(``feels_like``, ``wind``, ``date``). Serialize with ``by_alias=True``.
"""

from pydantic import BaseModel, ConfigDict, Field


class ForecastPoint(BaseModel):
    """One entry of the forecast strip."""

    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(alias="date", description="Today / Tomorrow / weekday")
    time: str = Field(description="'Now' or a local clock time")
    temp: int
    description: str = ""
    icon: str = ""


class WeatherSnapshot(BaseModel):
    """Current conditions plus one to five daily forecast points."""

    model_config = ConfigDict(populate_by_name=True)

    city: str
    country: str = ""
    temp: int
    feels_like: int
    humidity: int
    description: str = ""
    icon: str = ""
    wind_speed: float = Field(alias="wind")
    forecast: list[ForecastPoint] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Serialize with wire keys."""
        return self.model_dump(by_alias=True)
