"""Typed models for history queries and decoded history payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Geographic point used by coordinate-based history queries."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class HistoricalParameters(BaseModel):
    """Time window (Unix seconds) and optional sample cap for a history query.

    ``end`` preceding ``start`` is passed through unchanged; the service decides
    what such a window means.
    """

    start: int
    end: int
    cnt: int | None = Field(default=None, ge=1)

    def to_query(self) -> dict[str, Any]:
        """Return the query parameters this window contributes to a request."""
        query: dict[str, Any] = {"type": "hour", "start": self.start, "end": self.end}
        if self.cnt is not None:
            query["cnt"] = self.cnt
        return query


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MainConditions(_Payload):
    temp: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    sea_level: float | None = None
    grnd_level: float | None = None
    humidity: float | None = None


class Wind(_Payload):
    speed: float | None = None
    deg: float | None = None


class Clouds(_Payload):
    all: int | None = None


class Precipitation(_Payload):
    """Rain or snow volume for the last one/three hours."""

    one_hour: float | None = Field(default=None, alias="1h")
    three_hours: float | None = Field(default=None, alias="3h")


class WeatherCondition(_Payload):
    id: int | None = None
    main: str | None = None
    description: str | None = None
    icon: str | None = None


class WeatherHistory(_Payload):
    """One time-stamped historical sample."""

    dt: int
    main: MainConditions = Field(default_factory=MainConditions)
    wind: Wind = Field(default_factory=Wind)
    clouds: Clouds = Field(default_factory=Clouds)
    weather: list[WeatherCondition] = Field(default_factory=list)
    rain: Precipitation | None = None
    snow: Precipitation | None = None


class HistoricalWeatherResponse(_Payload):
    """Decoded history payload returned to the caller, who owns it exclusively."""

    message: str | float | None = None
    cod: int | str | None = None
    city_id: int | None = None
    calctime: float | None = None
    cnt: int | None = None
    samples: list[WeatherHistory] = Field(default_factory=list, alias="list")
