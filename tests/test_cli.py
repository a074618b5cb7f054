from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from app.errors import ClientError, TransientError
from app.pipeline import PipelineResult
from app.schemas import WeatherSnapshot
from cli.app import EXIT_CONFIG, app
from models.records import ExplicitLocation, NotificationPayload, TemperatureUnit, TemperatureValue


class StubNotifier:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: List[NotificationPayload] = []

    def send(self, payload: NotificationPayload) -> bool:
        self.sent.append(payload)
        return self.succeed


class StubFetch:
    def __init__(self, result: Optional[PipelineResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, place, unit, settings, cache, api_key) -> PipelineResult:
        self.calls.append({"place": place, "unit": unit, "api_key": api_key, "cache": cache})
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def result_for_london(weather_body) -> PipelineResult:
    return PipelineResult(
        location=ExplicitLocation("London"),
        snapshot=WeatherSnapshot.model_validate(weather_body),
        temperature=TemperatureValue(7.19, TemperatureUnit.celsius),
        payload=NotificationPayload(
            summary="London 7.19°C",
            body="Broken clouds... 5°C / 9°C",
            icon_key="weather-few-clouds-night",
        ),
    )


@pytest.fixture()
def notifier(monkeypatch) -> StubNotifier:
    stub = StubNotifier()
    monkeypatch.setattr("cli.app.build_notifier", lambda enabled: stub)
    monkeypatch.setattr("cli.app.load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.setattr("cli.app.configure_logging", lambda *args, **kwargs: None)
    return stub


def _install_fetch(monkeypatch, stub: StubFetch) -> None:
    monkeypatch.setattr("cli.app.fetch_weather", stub)


def test_success_prints_snapshot_and_notifies(
    monkeypatch, runner, notifier, result_for_london, weather_body
) -> None:
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    stub = StubFetch(result=result_for_london)
    _install_fetch(monkeypatch, stub)

    result = runner.invoke(app, ["London", "--unit", "fahrenheit"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == weather_body
    assert notifier.sent == [result_for_london.payload]
    assert stub.calls[0]["place"] == "London"
    assert stub.calls[0]["unit"] is TemperatureUnit.fahrenheit
    assert stub.calls[0]["api_key"] == "abc123"


def test_place_is_optional(monkeypatch, runner, notifier, result_for_london) -> None:
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    stub = StubFetch(result=result_for_london)
    _install_fetch(monkeypatch, stub)

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert stub.calls[0]["place"] is None
    assert stub.calls[0]["unit"] is None


def test_notifier_failure_still_prints_snapshot(
    monkeypatch, runner, notifier, result_for_london
) -> None:
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    notifier.succeed = False
    _install_fetch(monkeypatch, StubFetch(result=result_for_london))

    result = runner.invoke(app, ["London"])

    assert result.exit_code == 0
    assert '"name": "London"' in result.stdout


def test_missing_api_key_exits_before_pipeline(monkeypatch, runner, notifier) -> None:
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)
    stub = StubFetch(error=AssertionError("pipeline must not run"))
    _install_fetch(monkeypatch, stub)

    result = runner.invoke(app, ["London"])

    assert result.exit_code == EXIT_CONFIG
    assert "WEATHER_API_KEY" in result.output
    assert stub.calls == []
    assert notifier.sent == []


def test_classified_failure_prints_error_chain(monkeypatch, runner, notifier) -> None:
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    try:
        try:
            raise OSError("connection refused")
        except OSError as exc:
            raise TransientError("could not reach weather.test", "fetch weather") from exc
    except TransientError as chained:
        error = chained
    _install_fetch(monkeypatch, StubFetch(error=error))

    result = runner.invoke(app, ["London"])

    assert result.exit_code == 1
    assert "TransientError: fetch weather: could not reach weather.test" in result.output
    assert "Caused by: OSError: connection refused" in result.output
    assert notifier.sent == []


def test_client_error_reports_status_and_query(monkeypatch, runner, notifier) -> None:
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    error = ClientError(404, "Atlantis", "fetch weather", detail="city not found")
    _install_fetch(monkeypatch, StubFetch(error=error))

    result = runner.invoke(app, ["Atlantis"])

    assert result.exit_code == 1
    assert "404" in result.output
    assert "'Atlantis'" in result.output


def test_refresh_location_clears_cache(monkeypatch, runner, notifier, result_for_london, tmp_path) -> None:
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    cache_file = tmp_path / "config" / "location.json"
    cache_file.parent.mkdir(parents=True)
    cache_file.write_text("{}")
    _install_fetch(monkeypatch, StubFetch(result=result_for_london))

    result = runner.invoke(app, ["--refresh-location"])

    assert result.exit_code == 0
    assert not cache_file.exists()
