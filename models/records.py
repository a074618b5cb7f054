"""Domain values shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class TemperatureUnit(str, Enum):
    """Units a temperature can be displayed in."""

    celsius = "celsius"
    fahrenheit = "fahrenheit"
    kelvin = "kelvin"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    TemperatureUnit.celsius: "C",
    TemperatureUnit.fahrenheit: "F",
    TemperatureUnit.kelvin: "K",
}


@dataclass(frozen=True, slots=True)
class TemperatureValue:
    """A magnitude that always travels with its unit."""

    magnitude: float
    unit: TemperatureUnit


@dataclass(frozen=True)
class ExplicitLocation:
    """A place typed by the user, sent to the provider verbatim."""

    query: str

    @property
    def label(self) -> str:
        return self.query

    def describe(self) -> str:
        return self.query

    def request_params(self) -> Dict[str, str]:
        return {"q": self.query}


@dataclass(frozen=True)
class ResolvedLocation:
    """A place derived from the caller's network address."""

    latitude: float
    longitude: float
    city: str
    country: str

    @property
    def label(self) -> str:
        return self.city or f"{self.latitude:.4f},{self.longitude:.4f}"

    def describe(self) -> str:
        return f"{self.city}, {self.country} ({self.latitude}, {self.longitude})"

    def request_params(self) -> Dict[str, str]:
        return {"lat": str(self.latitude), "lon": str(self.longitude)}


Location = Union[ExplicitLocation, ResolvedLocation]


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    """Everything the desktop notifier needs; complete or not at all."""

    summary: str
    body: str
    icon_key: str

    def __post_init__(self) -> None:
        for name in ("summary", "body", "icon_key"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Notification {name} must be a non-empty string.")
