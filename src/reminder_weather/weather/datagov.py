"""data.gov.sg 2-hour forecast source implementation."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import InvalidShapeError, UnreachableError, UpstreamStatusError
from .base import ForecastSource
from .models import AreaForecast, FetchResult


def parse_forecast_payload(
    payload: Any,
    *,
    source_url: str,
    retrieved_at: datetime,
) -> FetchResult:
    """Validate a provider document and normalize it into a FetchResult.

    The expected shape is ``{"items": [{"timestamp": ..., "forecasts":
    [{"area": ..., "forecast": ...}, ...]}], "api_info": {...}}``. Any
    deviation raises InvalidShapeError; partially valid payloads are rejected
    as a whole.
    """
    if not isinstance(payload, dict):
        raise InvalidShapeError(
            f"Forecast payload must be an object, got {type(payload).__name__}.",
            url=source_url,
        )

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        raise InvalidShapeError("Forecast payload missing non-empty 'items' list.", url=source_url)
    head = items[0]
    if not isinstance(head, dict):
        raise InvalidShapeError("Forecast payload 'items[0]' is not an object.", url=source_url)

    raw_forecasts = head.get("forecasts")
    if not isinstance(raw_forecasts, list):
        raise InvalidShapeError(
            "Forecast payload missing 'items[0].forecasts' list.", url=source_url
        )
    if not raw_forecasts:
        raise InvalidShapeError("Forecast payload contained no area forecasts.", url=source_url)

    forecasts: list[AreaForecast] = []
    for position, item in enumerate(raw_forecasts):
        if not isinstance(item, dict):
            raise InvalidShapeError(
                f"Forecast item {position} is not an object.", url=source_url
            )
        area = _as_str(item.get("area"))
        text = _as_str(item.get("forecast"))
        if area is None or text is None:
            raise InvalidShapeError(
                f"Forecast item {position} missing 'area' or 'forecast' text.",
                url=source_url,
            )
        forecasts.append(AreaForecast(area=area, forecast_text=text))

    api_info = payload.get("api_info")
    observed_at = (
        _parse_datetime(head.get("timestamp"))
        or _parse_datetime(head.get("update_timestamp"))
        or (_parse_datetime(api_info.get("timestamp")) if isinstance(api_info, dict) else None)
        or retrieved_at
    )
    return FetchResult(
        items=forecasts,
        observed_at=observed_at,
        retrieved_at=retrieved_at,
        source_url=source_url,
    )


class DataGovForecastFetcher(ForecastSource):
    """Fetches the region-wide 2-hour forecast with a single GET per call.

    No retries happen here; a failed call surfaces as a typed FetchError and
    the scheduler decides what to do with it.
    """

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.url = str(settings.weather_api_url)
        self._client = httpx.Client(
            timeout=settings.weather_timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.weather_user_agent,
            },
            transport=transport,
        )

    def __enter__(self) -> DataGovForecastFetcher:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> FetchResult:
        """Fetch the current forecast document and normalize it."""
        self.logger.info("Fetching area forecasts from %s", self.url)
        payload = self._request_json()
        result = parse_forecast_payload(
            payload,
            source_url=self.url,
            retrieved_at=datetime.now(UTC),
        )
        self.logger.info("Fetched forecasts for %d areas", len(result.items))
        return result

    def _request_json(self) -> Any:
        try:
            response = self._client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise UpstreamStatusError(
                f"Forecast request failed with status {status} "
                f"at {self.url}: {exc.response.text[:300]}",
                status_code=status,
                url=self.url,
            ) from exc
        except httpx.HTTPError as exc:
            raise UnreachableError(
                f"Forecast request failed at {self.url} ({type(exc).__name__}): {exc}",
                url=self.url,
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidShapeError(
                f"Forecast request returned non-JSON response at {self.url}.",
                url=self.url,
            ) from exc


class FileForecastSource(ForecastSource):
    """Reads a saved provider payload from disk instead of the network."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def fetch(self) -> FetchResult:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise UnreachableError(
                f"Failed reading forecast file {self.path}: {exc}", url=str(self.path)
            ) from exc
        except ValueError as exc:
            raise InvalidShapeError(
                f"Forecast file {self.path} is not valid JSON.", url=str(self.path)
            ) from exc
        return parse_forecast_payload(
            payload,
            source_url=self.path.resolve().as_uri(),
            retrieved_at=datetime.now(UTC),
        )

    def close(self) -> None:
        return None


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _parse_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            return None
        return parsed.astimezone(UTC) if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None
