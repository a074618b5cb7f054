"""Temperature unit arithmetic and display rounding."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Tuple

from app.errors import NumericError
from models.records import TemperatureUnit, TemperatureValue

ABSOLUTE_ZERO_CELSIUS = 273.15
DEFAULT_DECIMAL_PLACES = 2


def _ensure_finite(value: TemperatureValue, operation: str) -> None:
    if not math.isfinite(value.magnitude):
        raise NumericError(
            f"temperature {value.magnitude!r} {value.unit.value} is not a finite number",
            operation,
        )


def round_half_even(number: float, places: int = DEFAULT_DECIMAL_PLACES) -> float:
    """Round ``number`` to ``places`` decimals, ties going to the even digit.

    The float is read through its shortest decimal representation, so
    ``round_half_even(6.5, 0) == 6`` and ``round_half_even(7.5, 0) == 8``.
    """
    if places < 0:
        raise ValueError("places must be zero or positive")
    exact = Decimal(repr(number))
    with localcontext() as context:
        # quantize needs room for every integer digit plus the requested places
        context.prec = max(context.prec, exact.adjusted() + places + 2)
        rounded = exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)
    return float(rounded)


class TemperatureConverter:
    """Pure conversion component; every result carries its unit."""

    def to_celsius(self, value: TemperatureValue) -> TemperatureValue:
        _ensure_finite(value, "convert temperature to celsius")
        magnitude = value.magnitude
        if value.unit is TemperatureUnit.kelvin:
            magnitude = magnitude - ABSOLUTE_ZERO_CELSIUS
        elif value.unit is TemperatureUnit.fahrenheit:
            magnitude = (magnitude - 32) * 5 / 9
        return TemperatureValue(magnitude=magnitude, unit=TemperatureUnit.celsius)

    def to_fahrenheit(self, value: TemperatureValue) -> TemperatureValue:
        _ensure_finite(value, "convert temperature to fahrenheit")
        magnitude = value.magnitude
        if value.unit is TemperatureUnit.kelvin:
            magnitude = (magnitude - ABSOLUTE_ZERO_CELSIUS) * 9 / 5 + 32
        elif value.unit is TemperatureUnit.celsius:
            magnitude = magnitude * 9 / 5 + 32
        return TemperatureValue(magnitude=magnitude, unit=TemperatureUnit.fahrenheit)

    def to_kelvin(self, value: TemperatureValue) -> TemperatureValue:
        _ensure_finite(value, "convert temperature to kelvin")
        magnitude = value.magnitude
        if value.unit is TemperatureUnit.celsius:
            magnitude = magnitude + ABSOLUTE_ZERO_CELSIUS
        elif value.unit is TemperatureUnit.fahrenheit:
            magnitude = (magnitude - 32) * 5 / 9 + ABSOLUTE_ZERO_CELSIUS
        return TemperatureValue(magnitude=magnitude, unit=TemperatureUnit.kelvin)

    def convert(self, value: TemperatureValue, unit: TemperatureUnit) -> TemperatureValue:
        if unit is TemperatureUnit.celsius:
            return self.to_celsius(value)
        if unit is TemperatureUnit.fahrenheit:
            return self.to_fahrenheit(value)
        return self.to_kelvin(value)

    def round_display(
        self, value: TemperatureValue, places: int = DEFAULT_DECIMAL_PLACES
    ) -> TemperatureValue:
        _ensure_finite(value, "round temperature")
        return TemperatureValue(
            magnitude=round_half_even(value.magnitude, places), unit=value.unit
        )

    def floor_value(self, value: TemperatureValue) -> TemperatureValue:
        _ensure_finite(value, "round minimum temperature")
        return TemperatureValue(magnitude=float(math.floor(value.magnitude)), unit=value.unit)

    def ceil_value(self, value: TemperatureValue) -> TemperatureValue:
        _ensure_finite(value, "round maximum temperature")
        return TemperatureValue(magnitude=float(math.ceil(value.magnitude)), unit=value.unit)

    def display_range(
        self, minimum: TemperatureValue, maximum: TemperatureValue
    ) -> Tuple[TemperatureValue, TemperatureValue]:
        """Widen the range outward: minimum floored, maximum ceiled."""
        return self.floor_value(minimum), self.ceil_value(maximum)
