"""Builds the desktop alert text from a weather snapshot."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from app.errors import NumericError
from app.schemas import WeatherSnapshot
from models.records import NotificationPayload, TemperatureValue

DEFAULT_ICON = "weather-severe-alert"

# Keyed by the provider's ``weather[].main`` group.
CONDITION_ICONS: Dict[str, str] = {
    "clear": "weather-clear",
    "clouds": "weather-few-clouds",
    "rain": "weather-showers",
    "drizzle": "weather-showers-scattered",
    "thunderstorm": "weather-storm",
    "snow": "weather-snow",
    "mist": "weather-fog",
    "fog": "weather-fog",
    "haze": "weather-fog",
    "smoke": "weather-fog",
    "dust": "weather-fog",
    "sand": "weather-fog",
    "ash": "weather-fog",
    "squall": "weather-storm",
    "tornado": "weather-severe-alert",
}

NIGHT_ICONS: Dict[str, str] = {
    "weather-clear": "weather-clear-night",
    "weather-few-clouds": "weather-few-clouds-night",
}


def icon_for(keyword: str, provider_icon: str = "") -> str:
    """Map a condition group to a freedesktop icon name; unknown groups get the default."""
    icon = CONDITION_ICONS.get(keyword.strip().lower(), DEFAULT_ICON)
    if provider_icon.strip().endswith("n"):
        icon = NIGHT_ICONS.get(icon, icon)
    return icon


def format_magnitude(magnitude: float) -> str:
    """``10.03`` stays ``10.03``; ``8.0`` prints as ``8``; no exponent notation."""
    text = format(Decimal(repr(magnitude)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


class NotificationComposer:

    def compose(
        self,
        place: str,
        snapshot: WeatherSnapshot,
        display_temp: TemperatureValue,
        display_min: TemperatureValue,
        display_max: TemperatureValue,
    ) -> NotificationPayload:
        units = {display_temp.unit, display_min.unit, display_max.unit}
        if len(units) != 1:
            raise NumericError(
                "current, minimum and maximum temperatures use different units",
                "compose notification",
            )
        symbol = f"°{display_temp.unit.symbol}"

        condition = snapshot.primary_condition
        description = capitalize_first(condition.description)
        return NotificationPayload(
            summary=f"{place} {format_magnitude(display_temp.magnitude)}{symbol}",
            body=(
                f"{description}... "
                f"{format_magnitude(display_min.magnitude)}{symbol} / "
                f"{format_magnitude(display_max.magnitude)}{symbol}"
            ),
            icon_key=icon_for(condition.main, condition.icon),
        )
