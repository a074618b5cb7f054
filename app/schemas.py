"""Pydantic schemas for provider responses and persisted state."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

from app.errors import DataFormatError
from models.records import ResolvedLocation


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lon: float
    lat: float


class Condition(BaseModel):
    """One entry of the provider's ``weather`` list."""

    model_config = ConfigDict(frozen=True)

    id: int
    main: str
    description: str
    icon: str


class MainMetrics(BaseModel):
    """Temperatures in Kelvin, pressure in hPa, humidity in percent."""

    model_config = ConfigDict(frozen=True)

    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int
    humidity: int


class Wind(BaseModel):
    model_config = ConfigDict(frozen=True)

    speed: float
    deg: int = 0
    gust: Optional[float] = None


class Clouds(BaseModel):
    model_config = ConfigDict(frozen=True)

    all: int


class SystemInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Optional[int] = Field(default=None, alias="type")
    id: Optional[int] = None
    country: str
    sunrise: int
    sunset: int


class WeatherSnapshot(BaseModel):
    """Current conditions as returned by the OpenWeather ``/weather`` endpoint.

    Field names are Pythonic; aliases match the provider's JSON keys so that
    ``model_dump(by_alias=True)`` reproduces the provider's shape.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    coord: Optional[Coordinates] = None
    conditions: List[Condition] = Field(..., alias="weather")
    base: Optional[str] = None
    main_metrics: MainMetrics = Field(..., alias="main")
    visibility: Optional[int] = None
    wind: Wind
    clouds: Clouds
    observed_at: Optional[int] = Field(default=None, alias="dt")
    sys: SystemInfo
    timezone_offset: int = Field(..., alias="timezone")
    city_id: Optional[int] = Field(default=None, alias="id")
    place_name: str = Field(..., alias="name")
    status_code: int = Field(..., alias="cod")

    @field_validator("conditions")
    @classmethod
    def _require_conditions(cls, value: List[Condition]) -> List[Condition]:
        if not value:
            raise ValueError("weather conditions list is empty")
        return value

    @property
    def country_code(self) -> str:
        return self.sys.country

    @property
    def sunrise(self) -> int:
        return self.sys.sunrise

    @property
    def sunset(self) -> int:
        return self.sys.sunset

    @property
    def primary_condition(self) -> Condition:
        return self.conditions[0]

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent, exclude_none=True)


class GeoLocationResponse(BaseModel):
    """Body returned by the ip-api geolocation endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    message: Optional[str] = None
    country: str = ""
    country_code: str = Field(default="", alias="countryCode")
    region: str = ""
    region_name: str = Field(default="", alias="regionName")
    city: str = ""
    zip: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None
    timezone: str = ""
    isp: str = ""
    org: str = ""
    as_: str = Field(default="", alias="as")

    @property
    def succeeded(self) -> bool:
        return self.status == "success" and self.lat is not None and self.lon is not None

    def to_location(self) -> ResolvedLocation:
        if self.lat is None or self.lon is None:
            raise DataFormatError(
                f"geolocation answer for {self.city!r} has no coordinates", "geolocate"
            )
        return ResolvedLocation(
            latitude=self.lat,
            longitude=self.lon,
            city=self.city,
            country=self.country,
        )


class CachedLocation(BaseModel):
    """Last geolocated place and when it was fetched."""

    model_config = ConfigDict(frozen=True)

    location: ResolvedLocation
    fetched_at: AwareDatetime

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at
