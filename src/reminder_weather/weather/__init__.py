"""Area forecast cache, matching and classification."""

from .aliases import DEFAULT_ALIASES, AliasTable, load_alias_table
from .base import ForecastSource
from .datagov import DataGovForecastFetcher, FileForecastSource, parse_forecast_payload
from .index import AreaIndex, Snapshot, normalize_area_key
from .lookup import WeatherLookup
from .models import (
    AreaForecast,
    EventWeatherCheck,
    FetchResult,
    ForecastEntry,
    LookupFound,
    LookupNotFound,
    LookupResult,
    OutdoorEvent,
    RefreshReport,
    WeatherClassification,
    WeatherIcon,
)
from .scheduler import RefreshScheduler

__all__ = [
    "DEFAULT_ALIASES",
    "AliasTable",
    "AreaForecast",
    "AreaIndex",
    "DataGovForecastFetcher",
    "EventWeatherCheck",
    "FetchResult",
    "FileForecastSource",
    "ForecastEntry",
    "ForecastSource",
    "LookupFound",
    "LookupNotFound",
    "LookupResult",
    "OutdoorEvent",
    "RefreshReport",
    "RefreshScheduler",
    "Snapshot",
    "WeatherClassification",
    "WeatherIcon",
    "WeatherLookup",
    "load_alias_table",
    "normalize_area_key",
    "parse_forecast_payload",
]
