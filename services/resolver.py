"""Decides which place to query: explicit input, then cache, then geolocation."""

from __future__ import annotations

import logging
from typing import Optional

from app.errors import EmptyInputError
from app.retry import RetryPolicy
from datastore.location_cache import LocationCache
from models.records import ExplicitLocation, Location
from services.geolocation import GeolocationClient

logger = logging.getLogger(__name__)


class LocationResolver:

    def __init__(
        self,
        cache: LocationCache,
        geolocator: GeolocationClient,
        retry: Optional[RetryPolicy] = None,
    ) -> None:
        self.cache = cache
        self.geolocator = geolocator
        self.retry = retry or RetryPolicy(attempts=1)

    async def resolve(self, explicit: Optional[str] = None) -> Location:
        if explicit is not None:
            query = explicit.strip()
            if not query:
                raise EmptyInputError(
                    f"empty string passed for place: {explicit!r}", "resolve location"
                )
            return ExplicitLocation(query=query)

        cached = self.cache.load()
        if cached is not None:
            if self.cache.is_fresh(cached):
                logger.debug("Using cached location", extra={"city": cached.location.city})
                return cached.location
            logger.info("Cached location is stale", extra={"city": cached.location.city})

        location = await self.retry.run("geolocate", self.geolocator.locate)
        try:
            self.cache.save(location)
        except OSError as exc:
            logger.warning(
                "Could not write location cache: %s",
                exc,
                extra={"cache_path": str(self.cache.path)},
            )
        return location
