"""Tests for the data.gov.sg forecast fetcher and payload parser."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from reminder_weather.exceptions import (
    FetchError,
    InvalidShapeError,
    UnreachableError,
    UpstreamStatusError,
)
from reminder_weather.weather.datagov import (
    DataGovForecastFetcher,
    FileForecastSource,
    parse_forecast_payload,
)

API_URL = "https://api.example.test/v1/environment/2-hour-weather-forecast"
FIXTURE = Path(__file__).parent / "fixtures" / "datagov_forecast.json"
RETRIEVED_AT = datetime(2026, 10, 18, 6, 5, tzinfo=UTC)


def _make_settings(**overrides: Any) -> Any:
    defaults = {
        "weather_api_url": API_URL,
        "weather_timeout_seconds": 10.0,
        "weather_user_agent": "reminder-weather-tests/0.1",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_fetcher(handler: Any) -> DataGovForecastFetcher:
    return DataGovForecastFetcher(
        settings=_make_settings(),
        logger=logging.getLogger("test_datagov_fetcher"),
        transport=httpx.MockTransport(handler),
    )


def _payload() -> dict[str, Any]:
    return json.loads(FIXTURE.read_text(encoding="utf-8"))


def test_fetch_normalizes_area_forecasts() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_payload())

    with _make_fetcher(handler) as fetcher:
        result = fetcher.fetch()

    assert len(seen) == 1
    assert str(seen[0].url) == API_URL
    assert seen[0].headers["User-Agent"] == "reminder-weather-tests/0.1"
    assert [item.area for item in result.items] == [
        "Ang Mo Kio",
        "Changi",
        "City",
        "Jurong East",
        "Orchard",
        "Sentosa",
    ]
    assert result.items[2].forecast_text == "Heavy Rain"
    assert result.observed_at == datetime(2026, 10, 18, 6, 0, tzinfo=UTC)
    assert result.source_url == API_URL


def test_non_2xx_status_maps_to_upstream_status_error() -> None:
    fetcher = _make_fetcher(lambda request: httpx.Response(503, text="maintenance"))

    with pytest.raises(UpstreamStatusError) as excinfo:
        fetcher.fetch()

    assert excinfo.value.status_code == 503
    assert excinfo.value.kind == "upstream_status"


def test_timeout_maps_to_unreachable_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = _make_fetcher(handler)
    with pytest.raises(UnreachableError) as excinfo:
        fetcher.fetch()
    assert excinfo.value.kind == "unreachable"


def test_connection_error_maps_to_unreachable_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UnreachableError):
        _make_fetcher(handler).fetch()


def test_non_json_body_is_invalid_shape() -> None:
    fetcher = _make_fetcher(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(InvalidShapeError, match="non-JSON"):
        fetcher.fetch()


def test_fetcher_makes_a_single_call_without_retry() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(502)

    with pytest.raises(FetchError):
        _make_fetcher(handler).fetch()
    assert calls["count"] == 1


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "must be an object"),
        ({"api_info": {}}, "non-empty 'items'"),
        ({"items": []}, "non-empty 'items'"),
        ({"items": ["nope"]}, "is not an object"),
        ({"items": [{"timestamp": "2026-10-18T14:00:00+08:00"}]}, "forecasts' list"),
        ({"items": [{"forecasts": []}]}, "no area forecasts"),
        ({"items": [{"forecasts": [{"area": "Bedok"}]}]}, "missing 'area' or 'forecast'"),
        ({"items": [{"forecasts": [{"area": " ", "forecast": "Fair"}]}]}, "item 0"),
        (
            {"items": [{"forecasts": [{"area": "Bedok", "forecast": "Fair"}, "x"]}]},
            "item 1 is not an object",
        ),
    ],
)
def test_structurally_invalid_payloads_raise(payload: Any, message: str) -> None:
    with pytest.raises(InvalidShapeError, match=message):
        parse_forecast_payload(payload, source_url=API_URL, retrieved_at=RETRIEVED_AT)


def test_observed_at_falls_back_through_timestamps() -> None:
    forecasts = [{"area": "Bedok", "forecast": "Fair"}]

    from_update = parse_forecast_payload(
        {"items": [{"update_timestamp": "2026-10-18T05:00:00Z", "forecasts": forecasts}]},
        source_url=API_URL,
        retrieved_at=RETRIEVED_AT,
    )
    assert from_update.observed_at == datetime(2026, 10, 18, 5, 0, tzinfo=UTC)

    from_api_info = parse_forecast_payload(
        {
            "items": [{"forecasts": forecasts}],
            "api_info": {"timestamp": "2026-10-18T04:00:00Z"},
        },
        source_url=API_URL,
        retrieved_at=RETRIEVED_AT,
    )
    assert from_api_info.observed_at == datetime(2026, 10, 18, 4, 0, tzinfo=UTC)

    from_retrieval = parse_forecast_payload(
        {"items": [{"timestamp": "garbage", "forecasts": forecasts}]},
        source_url=API_URL,
        retrieved_at=RETRIEVED_AT,
    )
    assert from_retrieval.observed_at == RETRIEVED_AT


def test_area_and_forecast_text_are_trimmed() -> None:
    result = parse_forecast_payload(
        {"items": [{"forecasts": [{"area": "  Bedok ", "forecast": " Cloudy  "}]}]},
        source_url=API_URL,
        retrieved_at=RETRIEVED_AT,
    )
    assert result.items[0].area == "Bedok"
    assert result.items[0].forecast_text == "Cloudy"


def test_parsed_result_keeps_only_normalized_fields() -> None:
    result = parse_forecast_payload(
        {"items": [{"forecasts": [{"area": "Bedok", "forecast": "Cloudy"}]}], "extra": "x"},
        source_url=API_URL,
        retrieved_at=RETRIEVED_AT,
    )
    assert set(result.model_dump()) == {"items", "observed_at", "retrieved_at", "source_url"}


def test_file_source_reads_saved_payload() -> None:
    result = FileForecastSource(FIXTURE).fetch()
    assert len(result.items) == 6
    assert result.source_url.startswith("file://")


def test_file_source_missing_file_is_unreachable(tmp_path: Path) -> None:
    with pytest.raises(UnreachableError):
        FileForecastSource(tmp_path / "missing.json").fetch()


def test_file_source_bad_json_is_invalid_shape(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidShapeError):
        FileForecastSource(path).fetch()
