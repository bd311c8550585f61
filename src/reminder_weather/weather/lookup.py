"""Resolution of free-form location strings against the area index."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from . import classifier
from .aliases import AliasTable
from .index import AreaIndex, Snapshot, normalize_area_key
from .models import (
    EventWeatherCheck,
    ForecastEntry,
    LookupFound,
    LookupNotFound,
    LookupResult,
    OutdoorEvent,
)

WEATHER_ALERT = "Weather Alert"


def area_name_of(area: Any) -> str:
    """Extract the area string from a plain string, a mapping or an object with `name`."""
    if isinstance(area, str):
        return area
    if isinstance(area, Mapping):
        name = area.get("name")
    else:
        name = getattr(area, "name", None)
    return name if isinstance(name, str) else ""


def partial_match(snapshot: Snapshot, key: str) -> ForecastEntry | None:
    """Return the first entry whose key contains, or is contained in, ``key``.

    Snapshot keys iterate alphabetically, so among several candidates the
    alphabetically first key wins.
    """
    for area_key, entry in snapshot.items():
        if area_key in key or key in area_key:
            return entry
    return None


class WeatherLookup:
    """Entry point collaborators use to resolve areas and check events."""

    def __init__(
        self,
        index: AreaIndex,
        aliases: AliasTable,
        logger: logging.Logger | None = None,
    ) -> None:
        self.index = index
        self.aliases = aliases
        self.logger = logger or logging.getLogger("reminder_weather.weather.lookup")

    def resolve(self, raw_area: str) -> LookupResult:
        """Resolve a free-form area: exact, then alias, then partial match."""
        snapshot = self.index.current()
        key = normalize_area_key(raw_area)
        if not key:
            return self._not_found(raw_area, snapshot)

        entry = snapshot.get(key)
        if entry is not None:
            return self._found(raw_area, "exact", entry)

        target = self.aliases.target(key)
        if target is not None:
            entry = snapshot.get(normalize_area_key(target))
            if entry is not None:
                return self._found(raw_area, "alias", entry)

        entry = partial_match(snapshot, key)
        if entry is not None:
            return self._found(raw_area, "partial", entry)

        self.logger.debug("No forecast area matched %r", raw_area, extra={"area": raw_area})
        return self._not_found(raw_area, snapshot)

    def get_weather_for_area(self, area: Any) -> LookupResult:
        return self.resolve(area_name_of(area))

    def get_all_areas(self) -> list[str]:
        return self.index.keys()

    def check_event_weather(self, event: OutdoorEvent | Mapping[str, Any]) -> EventWeatherCheck:
        """Check an outdoor event's location against the current forecast."""
        if not isinstance(event, OutdoorEvent):
            try:
                event = OutdoorEvent.model_validate(event)
            except ValidationError as exc:
                raise ValueError(f"Invalid event payload: {exc}") from exc

        if not event.is_outdoor or not event.location:
            return EventWeatherCheck(
                needs_weather=False,
                message="Indoor event - no weather check needed",
            )

        result = self.resolve(event.location)
        if isinstance(result, LookupNotFound):
            return EventWeatherCheck(
                needs_weather=True,
                error=result.message,
                location=event.location,
            )

        weather = result.as_weather()
        warning = result.classification.warning
        return EventWeatherCheck(
            needs_weather=True,
            event={
                "title": event.title,
                "location": event.location,
                "isOutdoor": event.is_outdoor,
            },
            weather=weather,
            alert=WEATHER_ALERT if warning else None,
            message=(
                f"Weather warning for {event.title}: {result.classification.recommendation}"
                if warning
                else f"Good weather for {event.title}"
            ),
        )

    def annotate_reminders(
        self, reminders: Iterable[Mapping[str, Any]]
    ) -> list[dict[str, Any]]:
        """Attach weather and weatherAlert to each outdoor reminder with a location.

        Reminders that fail event validation are passed through unannotated.
        """
        annotated: list[dict[str, Any]] = []
        for reminder in reminders:
            item = dict(reminder)
            if item.get("isOutdoor") and item.get("location"):
                try:
                    check = self.check_event_weather(item)
                except ValueError as exc:
                    self.logger.warning(
                        "Skipping weather for reminder %r: %s", item.get("title"), exc
                    )
                    annotated.append(item)
                    continue
                item["weather"] = check.weather
                item["weatherAlert"] = check.alert
            annotated.append(item)
        return annotated

    def _found(self, raw_area: str, matched_by: str, entry: ForecastEntry) -> LookupFound:
        return LookupFound(
            requested_area=raw_area,
            matched_by=matched_by,
            entry=entry,
            classification=classifier.classify(entry.forecast_text),
        )

    @staticmethod
    def _not_found(raw_area: str, snapshot: Snapshot) -> LookupNotFound:
        return LookupNotFound(
            requested_area=raw_area,
            message=f"Weather data not found for area: {raw_area}",
            available_areas=snapshot.area_names(),
        )
