"""OpenWeather current-conditions client."""

from __future__ import annotations

import logging
from typing import Dict

import httpx
from pydantic import ValidationError

from app.errors import ClientError, DataFormatError, TransientError, body_excerpt
from app.schemas import WeatherSnapshot
from models.records import Location
from services import transport
from settings import DEFAULT_WEATHER_URL

logger = logging.getLogger(__name__)

OPERATION = "fetch weather"


class WeatherClient:
    """Fetches and classifies one ``/weather`` response.

    Temperatures are requested in the provider's default unit (Kelvin); no
    ``units`` parameter is sent. The client never retries; wrap calls in a
    retry policy when transient failures should be retried.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str = DEFAULT_WEATHER_URL) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/weather"

    async def fetch(self, place: Location, api_key: str) -> WeatherSnapshot:
        query = place.describe()
        params: Dict[str, str] = {**place.request_params(), "appid": api_key}

        logger.info("Requesting current weather", extra={"query": query})
        response = await transport.get(self._client, self.endpoint, OPERATION, params=params)
        status = response.status_code
        logger.debug("Weather provider answered", extra={"query": query, "status": status})

        if response.is_server_error:
            raise TransientError(
                f"provider returned server error {status} for {query!r}",
                OPERATION,
                status=status,
            )
        if response.is_client_error:
            raise ClientError(status, query, OPERATION, detail=self._error_detail(response))
        if not response.is_success:
            raise DataFormatError(
                f"unexpected status {status} for {query!r}",
                OPERATION,
                excerpt=body_excerpt(response.text),
            )

        payload = transport.decode_json(response, OPERATION)
        try:
            snapshot = WeatherSnapshot.model_validate(payload)
        except ValidationError as exc:
            raise DataFormatError(
                f"unexpected weather payload for {query!r} "
                f"({exc.error_count()} validation errors)",
                OPERATION,
                excerpt=body_excerpt(response.text),
            ) from exc

        logger.info(
            "Weather received: %s",
            snapshot.primary_condition.description,
            extra={"query": query, "city": snapshot.place_name},
        )
        return snapshot

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return body_excerpt(response.text, limit=80)
        if isinstance(data, dict):
            return str(data.get("message") or "")
        return ""
