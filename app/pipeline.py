"""Resolve -> fetch -> convert -> compose, wired through an explicit context."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from app.retry import RetryPolicy
from app.schemas import WeatherSnapshot
from datastore.location_cache import LocationCache
from models.records import Location, NotificationPayload, TemperatureUnit, TemperatureValue
from services.composer import NotificationComposer
from services.converter import TemperatureConverter
from services.geolocation import GeolocationClient
from services.resolver import LocationResolver
from services.weather_client import WeatherClient
from settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineContext:
    """Handles every component needs; nothing is held in module globals."""

    http: httpx.AsyncClient
    cache: LocationCache
    api_key: str
    settings: Settings


@dataclass(frozen=True)
class PipelineResult:
    location: Location
    snapshot: WeatherSnapshot
    temperature: TemperatureValue
    payload: NotificationPayload


class WeatherPipeline:

    def __init__(
        self,
        context: PipelineContext,
        resolver: Optional[LocationResolver] = None,
        weather_client: Optional[WeatherClient] = None,
        converter: Optional[TemperatureConverter] = None,
        composer: Optional[NotificationComposer] = None,
        retry: Optional[RetryPolicy] = None,
    ) -> None:
        settings = context.settings
        self.context = context
        self.retry = retry or RetryPolicy(
            attempts=settings.retry_attempts, backoff=settings.retry_backoff
        )
        self.resolver = resolver or LocationResolver(
            cache=context.cache,
            geolocator=GeolocationClient(context.http, settings.geolocation_url),
            retry=self.retry,
        )
        self.weather_client = weather_client or WeatherClient(
            context.http, settings.weather_base_url
        )
        self.converter = converter or TemperatureConverter()
        self.composer = composer or NotificationComposer()

    async def run(
        self, place: Optional[str] = None, unit: Optional[TemperatureUnit] = None
    ) -> PipelineResult:
        settings = self.context.settings
        display_unit = unit or settings.display_unit

        location = await self.resolver.resolve(place)
        snapshot = await self.retry.run(
            "fetch weather",
            lambda: self.weather_client.fetch(location, self.context.api_key),
        )

        metrics = snapshot.main_metrics
        temp = self.converter.convert(
            TemperatureValue(metrics.temp, TemperatureUnit.kelvin), display_unit
        )
        temp_min = self.converter.convert(
            TemperatureValue(metrics.temp_min, TemperatureUnit.kelvin), display_unit
        )
        temp_max = self.converter.convert(
            TemperatureValue(metrics.temp_max, TemperatureUnit.kelvin), display_unit
        )

        display_temp = self.converter.round_display(temp, settings.decimal_places)
        display_min, display_max = self.converter.display_range(temp_min, temp_max)

        payload = self.composer.compose(
            location.label, snapshot, display_temp, display_min, display_max
        )
        logger.info(payload.summary, extra={"unit": display_unit.value})
        return PipelineResult(
            location=location,
            snapshot=snapshot,
            temperature=display_temp,
            payload=payload,
        )
