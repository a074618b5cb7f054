from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from app.errors import ConfigError
from models.records import TemperatureUnit

API_KEY_ENV = "WEATHER_API_KEY"
_WEATHER_URL_ENV = "MAUSAM_WEATHER_URL"
_GEOLOCATION_URL_ENV = "MAUSAM_GEOLOCATION_URL"
_CACHE_PATH_ENV = "MAUSAM_CACHE_PATH"
_CACHE_TTL_ENV = "MAUSAM_CACHE_TTL_HOURS"
_HTTP_TIMEOUT_ENV = "MAUSAM_HTTP_TIMEOUT"
_RETRY_ATTEMPTS_ENV = "MAUSAM_RETRY_ATTEMPTS"
_RETRY_BACKOFF_ENV = "MAUSAM_RETRY_BACKOFF"
_DECIMAL_PLACES_ENV = "MAUSAM_DECIMAL_PLACES"
_UNIT_ENV = "MAUSAM_UNIT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_GEOLOCATION_URL = "http://ip-api.com/json"
APP_NAME = "mausam"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    weather_base_url: str
    geolocation_url: str
    cache_path: Path
    cache_ttl_hours: float
    http_timeout: float
    retry_attempts: int
    retry_backoff: float
    decimal_places: int
    display_unit: TemperatureUnit
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_positive_float(name: str, default: float) -> float:
    candidate = _read_optional_env(name)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_int(name: str, default: int, minimum: int) -> int:
    candidate = _read_optional_env(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _read_unit(default: TemperatureUnit) -> TemperatureUnit:
    candidate = _read_optional_env(_UNIT_ENV)
    if candidate is None:
        return default
    try:
        return TemperatureUnit(candidate.lower())
    except ValueError:
        return default


def _default_cache_path() -> Path:
    explicit = _read_optional_env(_CACHE_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    config_home = _read_optional_env("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_NAME / "location.json"


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_key=_read_optional_env(API_KEY_ENV),
        weather_base_url=_read_str_env(_WEATHER_URL_ENV, DEFAULT_WEATHER_URL).rstrip("/"),
        geolocation_url=_read_str_env(_GEOLOCATION_URL_ENV, DEFAULT_GEOLOCATION_URL),
        cache_path=_default_cache_path(),
        cache_ttl_hours=_read_positive_float(_CACHE_TTL_ENV, 24.0),
        http_timeout=_read_positive_float(_HTTP_TIMEOUT_ENV, 10.0),
        retry_attempts=_read_int(_RETRY_ATTEMPTS_ENV, 3, minimum=1),
        retry_backoff=_read_positive_float(_RETRY_BACKOFF_ENV, 0.5),
        decimal_places=_read_int(_DECIMAL_PLACES_ENV, 2, minimum=0),
        display_unit=_read_unit(TemperatureUnit.celsius),
        log_level=_read_str_env(_LOG_LEVEL_ENV, "WARNING").upper(),
    )


def require_api_key(settings: Settings) -> str:
    if settings.api_key is None:
        raise ConfigError(
            f"`{API_KEY_ENV}` environment variable not found in the environment "
            f"or in `{Path.cwd() / '.env'}`",
            "load configuration",
        )
    return settings.api_key
