from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from app.schemas import CachedLocation
from models.records import ResolvedLocation
from settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LocationCache:
    """Single-file JSON store for the last geolocated place.

    Reads treat any problem with the file as a miss. Writes go to a sibling
    temporary file that is renamed over the target, so readers in another
    process see either the old file or the new one.
    """

    def __init__(
        self,
        path: Path,
        ttl: timedelta = DEFAULT_TTL,
        clock: Clock = _utc_now,
    ) -> None:
        self.path = path
        self.ttl = ttl
        self._clock = clock

    def load(self) -> Optional[CachedLocation]:
        if not self.path.exists():
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
            return CachedLocation.model_validate(json.loads(raw))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning(
                "Ignoring unreadable location cache: %s",
                exc.__class__.__name__,
                extra={"cache_path": str(self.path)},
            )
            return None

    def save(
        self, location: ResolvedLocation, fetched_at: Optional[datetime] = None
    ) -> CachedLocation:
        entry = CachedLocation(location=location, fetched_at=fetched_at or self._clock())
        payload = json.dumps(entry.model_dump(mode="json"), indent=2, sort_keys=True)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Saved location cache", extra={"cache_path": str(self.path)})
        return entry

    def is_fresh(self, cached: CachedLocation, now: Optional[datetime] = None) -> bool:
        current = now or self._clock()
        # a timestamp ahead of the clock is never fresh
        return timedelta(0) <= cached.age(current) < self.ttl

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def build_location_cache(settings: Settings) -> LocationCache:
    return LocationCache(
        path=settings.cache_path,
        ttl=timedelta(hours=settings.cache_ttl_hours),
    )
