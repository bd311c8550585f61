"""Composition root for the weather cache-and-lookup service."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from .config import Settings
from .weather.aliases import AliasTable, load_alias_table
from .weather.base import ForecastSource
from .weather.datagov import DataGovForecastFetcher
from .weather.index import AreaIndex, Clock
from .weather.lookup import WeatherLookup
from .weather.models import EventWeatherCheck, LookupResult, OutdoorEvent, RefreshReport
from .weather.scheduler import RefreshScheduler


class WeatherService:
    """Owns the area index, its refresh scheduler and the lookup facade.

    Construction performs no I/O; call ``start()`` to run the first refresh
    and arm the periodic timer, and ``stop()`` to disarm it.
    """

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        source: ForecastSource | None = None,
        aliases: AliasTable | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        interval = settings.weather_refresh_interval_seconds
        self.source = source or DataGovForecastFetcher(settings=settings, logger=logger)
        self.index = AreaIndex(stale_after=timedelta(seconds=interval), clock=clock)
        self.scheduler = RefreshScheduler(
            source=self.source,
            index=self.index,
            interval_seconds=interval,
            logger=logger,
            clock=clock,
        )
        self.lookup = WeatherLookup(
            index=self.index,
            aliases=aliases if aliases is not None else load_alias_table(settings),
            logger=logger,
        )

    def __enter__(self) -> WeatherService:
        self.start()
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def start(self) -> RefreshReport | None:
        return self.scheduler.start()

    def stop(self, timeout: float | None = None) -> None:
        self.scheduler.stop(timeout)

    def close(self) -> None:
        """Stop the scheduler and release the forecast source."""
        self.stop()
        self.source.close()

    def refresh_now(self) -> RefreshReport:
        return self.scheduler.refresh_once()

    def is_stale(self) -> bool:
        return self.index.is_stale()

    def get_weather_for_area(self, area: Any) -> LookupResult:
        return self.lookup.get_weather_for_area(area)

    def check_event_weather(self, event: OutdoorEvent | Mapping[str, Any]) -> EventWeatherCheck:
        return self.lookup.check_event_weather(event)

    def get_all_areas(self) -> list[str]:
        return self.lookup.get_all_areas()

    def annotate_reminders(
        self, reminders: Iterable[Mapping[str, Any]]
    ) -> list[dict[str, Any]]:
        return self.lookup.annotate_reminders(reminders)
