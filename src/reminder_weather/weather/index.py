"""In-memory area index holding one immutable forecast snapshot at a time."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from datetime import UTC, datetime, timedelta
from types import MappingProxyType

from .models import FetchResult, ForecastEntry

Clock = Callable[[], datetime]


def normalize_area_key(text: str) -> str:
    """Lowercase and trim an area name or free-form location string."""
    return text.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Snapshot(Mapping[str, ForecastEntry]):
    """Immutable normalized-key -> ForecastEntry mapping.

    Keys are kept in alphabetical order, so iteration order is stable and is
    the order used for partial matching.
    """

    def __init__(self, entries: Mapping[str, ForecastEntry]) -> None:
        ordered = {key: entries[key] for key in sorted(entries)}
        self._entries: Mapping[str, ForecastEntry] = MappingProxyType(ordered)
        self._area_names: tuple[str, ...] = tuple(
            sorted(entry.area for entry in ordered.values())
        )

    @classmethod
    def empty(cls) -> Snapshot:
        return cls({})

    @classmethod
    def from_fetch(
        cls,
        result: FetchResult,
        cached_at: datetime,
        logger: logging.Logger | None = None,
    ) -> Snapshot:
        """Build a snapshot from a fetch result, stamping every entry with cached_at."""
        log = logger or logging.getLogger("reminder_weather.weather.index")
        entries: dict[str, ForecastEntry] = {}
        for item in result.items:
            key = normalize_area_key(item.area)
            if key in entries:
                log.warning(
                    "Duplicate area %r in forecast payload; keeping %r",
                    item.area,
                    entries[key].area,
                )
                continue
            entries[key] = ForecastEntry(
                area=item.area,
                forecast_text=item.forecast_text,
                observed_at=result.observed_at,
                cached_at=cached_at,
            )
        return cls(entries)

    def area_names(self) -> list[str]:
        """Canonical display names, sorted."""
        return list(self._area_names)

    def __getitem__(self, key: str) -> ForecastEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class AreaIndex:
    """Publishes the current Snapshot by reference replacement.

    The lock guards only the reference swap and the refresh timestamp. Readers
    grab ``current()`` once and keep working on that object even if a newer
    snapshot is installed meanwhile.
    """

    def __init__(self, stale_after: timedelta, clock: Clock | None = None) -> None:
        self.stale_after = stale_after
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._snapshot = Snapshot.empty()
        self._last_refreshed_at: datetime | None = None

    def install(self, snapshot: Snapshot) -> None:
        now = self._clock()
        with self._lock:
            self._snapshot = snapshot
            self._last_refreshed_at = now

    def current(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    @property
    def last_refreshed_at(self) -> datetime | None:
        with self._lock:
            return self._last_refreshed_at

    def lookup(self, key: str) -> ForecastEntry | None:
        return self.current().get(key)

    def keys(self) -> list[str]:
        return self.current().area_names()

    def is_stale(self) -> bool:
        """True when no successful install happened within ``stale_after``."""
        refreshed = self.last_refreshed_at
        if refreshed is None:
            return True
        return self._clock() - refreshed > self.stale_after
