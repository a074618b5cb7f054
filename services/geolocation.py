"""ip-api lookup of the caller's approximate location."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from app.errors import DataFormatError, NetworkError, TransientError, body_excerpt
from app.schemas import GeoLocationResponse
from models.records import ResolvedLocation
from services import transport
from settings import DEFAULT_GEOLOCATION_URL

logger = logging.getLogger(__name__)

OPERATION = "geolocate"
_RATE_LIMITED = 429


class GeolocationClient:
    """Note that ip-api limits request rates, so results are cached upstream."""

    def __init__(self, client: httpx.AsyncClient, url: str = DEFAULT_GEOLOCATION_URL) -> None:
        self._client = client
        self.url = url

    async def locate(self) -> ResolvedLocation:
        response = await transport.get(self._client, self.url, OPERATION)
        status = response.status_code

        if response.is_server_error or status == _RATE_LIMITED:
            raise TransientError(
                f"geolocation provider returned status {status}", OPERATION, status=status
            )
        if not response.is_success:
            raise NetworkError(
                f"geolocation provider returned status {status}", OPERATION, status=status
            )

        payload = transport.decode_json(response, OPERATION)
        try:
            body = GeoLocationResponse.model_validate(payload)
        except ValidationError as exc:
            raise DataFormatError(
                "unexpected geolocation payload",
                OPERATION,
                excerpt=body_excerpt(response.text),
            ) from exc

        if not body.succeeded:
            raise NetworkError(
                f"geolocation lookup failed: {body.message or body.status}", OPERATION
            )

        location = body.to_location()
        logger.info("Geolocated caller", extra={"city": location.city})
        return location
