"""Typed models for forecast snapshots, lookups and event checks."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AreaForecast(BaseModel):
    """One (area, forecast text) pair returned by a forecast source."""

    area: str = Field(min_length=1)
    forecast_text: str = Field(min_length=1)


class FetchResult(BaseModel):
    """Normalized result of one provider round-trip."""

    items: list[AreaForecast] = Field(min_length=1)
    observed_at: datetime
    retrieved_at: datetime
    source_url: str


class ForecastEntry(BaseModel):
    """Cached forecast for a single canonical area."""

    model_config = ConfigDict(frozen=True)

    area: str
    forecast_text: str
    observed_at: datetime
    cached_at: datetime


class WeatherIcon(str, Enum):
    """Symbolic icon identifiers derived from forecast text."""

    THUNDERSTORM = "thunderstorm"
    HEAVY_RAIN = "heavy_rain"
    SHOWERS = "showers"
    HAZE = "haze"
    WINDY = "windy"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    SUNNY = "sunny"
    PARTLY_SUNNY = "partly_sunny"


class WeatherClassification(BaseModel):
    """Warning, advice and icon computed from a forecast text."""

    model_config = ConfigDict(frozen=True)

    warning: bool
    recommendation: str
    icon: WeatherIcon


class LookupFound(BaseModel):
    """Successful area resolution."""

    status: Literal["found"] = "found"
    requested_area: str
    matched_by: Literal["exact", "alias", "partial"]
    entry: ForecastEntry
    classification: WeatherClassification

    def as_weather(self) -> dict[str, Any]:
        """Flatten entry and classification into the collaborator-facing record."""
        return {
            "area": self.entry.area,
            "forecast": self.entry.forecast_text,
            "timestamp": self.entry.observed_at.isoformat(),
            "cached_at": self.entry.cached_at.isoformat(),
            "warning": self.classification.warning,
            "recommendation": self.classification.recommendation,
            "icon": self.classification.icon.value,
        }


class LookupNotFound(BaseModel):
    """Area could not be resolved against the current snapshot."""

    status: Literal["not_found"] = "not_found"
    requested_area: str
    message: str
    available_areas: list[str] = Field(default_factory=list)


LookupResult = Annotated[Union[LookupFound, LookupNotFound], Field(discriminator="status")]


class OutdoorEvent(BaseModel):
    """Minimal view of a reminder/calendar item needed for a weather check."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = ""
    location: str | None = None
    is_outdoor: bool = Field(default=False, alias="isOutdoor")

    @field_validator("location", mode="before")
    @classmethod
    def location_name(cls, value: Any) -> Any:
        """Accept either a plain string or a location object with a `name`."""
        if isinstance(value, dict):
            value = value.get("name")
        elif value is not None and not isinstance(value, str):
            value = getattr(value, "name", None)
        if isinstance(value, str) and not value.strip():
            return None
        return value


class EventWeatherCheck(BaseModel):
    """Outcome of checking an event against the current forecast."""

    needs_weather: bool
    event: dict[str, Any] | None = None
    weather: dict[str, Any] | None = None
    alert: str | None = None
    message: str | None = None
    error: str | None = None
    location: str | None = None


class RefreshReport(BaseModel):
    """Result of one scheduler refresh cycle."""

    status: Literal["installed", "failed", "skipped"]
    area_count: int = 0
    error_kind: str | None = None
    error: str | None = None
    started_at: datetime
    finished_at: datetime
