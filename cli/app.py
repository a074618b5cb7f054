from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
import typer
from dotenv import load_dotenv

from app.errors import ConfigError, MausamError
from app.pipeline import PipelineContext, PipelineResult, WeatherPipeline
from cli.render import render_error_chain, render_snapshot
from datastore.location_cache import LocationCache, build_location_cache
from logging_config import configure_logging
from models.records import TemperatureUnit
from services.notifier import DesktopNotifier, Notifier, NullNotifier
from settings import Settings, get_settings, require_api_key

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
# sysexits.h EX_CONFIG
EXIT_CONFIG = 78

app = typer.Typer(
    help="Show the current weather for a place as a desktop notification.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def build_notifier(enabled: bool) -> Notifier:
    return DesktopNotifier() if enabled else NullNotifier()


async def fetch_weather(
    place: Optional[str],
    unit: Optional[TemperatureUnit],
    settings: Settings,
    cache: LocationCache,
    api_key: str,
) -> PipelineResult:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as http:
        context = PipelineContext(http=http, cache=cache, api_key=api_key, settings=settings)
        return await WeatherPipeline(context).run(place, unit)


@app.command()
def main(
    place: Optional[str] = typer.Argument(
        None,
        help="Place to look up (defaults to your geolocated city).",
    ),
    unit: Optional[TemperatureUnit] = typer.Option(
        None,
        "--unit",
        "-u",
        case_sensitive=False,
        help="Display unit (defaults to MAUSAM_UNIT or celsius).",
    ),
    notify: bool = typer.Option(
        True,
        "--notify/--no-notify",
        help="Show a desktop notification.",
    ),
    refresh_location: bool = typer.Option(
        False,
        "--refresh-location",
        help="Discard the cached location before resolving.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Fetch current weather, send one alert and print the snapshot as JSON."""
    load_dotenv()
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        api_key = require_api_key(settings)
    except ConfigError as exc:
        render_error_chain(exc)
        raise typer.Exit(code=EXIT_CONFIG)

    cache = build_location_cache(settings)
    if refresh_location:
        cache.clear()

    try:
        result = asyncio.run(fetch_weather(place, unit, settings, cache, api_key))
    except MausamError as exc:
        render_error_chain(exc)
        raise typer.Exit(code=EXIT_FAILURE)

    if not build_notifier(notify).send(result.payload):
        logger.warning("Desktop alert was not shown", extra={"icon": result.payload.icon_key})
    render_snapshot(result.snapshot)
