"""Background refresh loop feeding the area index."""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime

from ..exceptions import FetchError
from .base import ForecastSource
from .index import AreaIndex, Clock, Snapshot
from .models import RefreshReport


class RefreshScheduler:
    """Drives a ForecastSource on a fixed interval and installs good snapshots.

    At most one refresh cycle runs at a time; a cycle requested while another
    is in flight is skipped rather than queued. Fetch failures are logged and
    leave the installed snapshot untouched.
    """

    def __init__(
        self,
        source: ForecastSource,
        index: AreaIndex,
        interval_seconds: float,
        logger: logging.Logger | None = None,
        clock: Clock | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0.")
        self.source = source
        self.index = index
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger("reminder_weather.weather.scheduler")
        self._clock = clock or (lambda: datetime.now(UTC))
        self._cycle_lock = threading.Lock()
        self._lifecycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def refresh_once(self) -> RefreshReport:
        """Run one fetch-and-install cycle, or skip if one is already running."""
        started_at = self._clock()
        if not self._cycle_lock.acquire(blocking=False):
            self.logger.info("Refresh already in progress; skipping")
            return RefreshReport(status="skipped", started_at=started_at, finished_at=started_at)
        try:
            try:
                result = self.source.fetch()
            except FetchError as exc:
                self.logger.error(
                    "Forecast refresh failed (%s); keeping previous snapshot of %d areas: %s",
                    exc.kind,
                    len(self.index.current()),
                    exc,
                    extra={"error_kind": exc.kind, "area_count": len(self.index.current())},
                )
                return RefreshReport(
                    status="failed",
                    area_count=len(self.index.current()),
                    error_kind=exc.kind,
                    error=str(exc),
                    started_at=started_at,
                    finished_at=self._clock(),
                )

            snapshot = Snapshot.from_fetch(result, cached_at=self._clock(), logger=self.logger)
            self.index.install(snapshot)
            self.logger.info(
                "Cached forecasts for %d areas",
                len(snapshot),
                extra={"area_count": len(snapshot), "observed_at": result.observed_at},
            )
            return RefreshReport(
                status="installed",
                area_count=len(snapshot),
                started_at=started_at,
                finished_at=self._clock(),
            )
        finally:
            self._cycle_lock.release()

    def start(self) -> RefreshReport | None:
        """Refresh synchronously, then arm the periodic timer thread.

        Returns the report of the initial cycle, or None if already running.
        """
        with self._lifecycle_lock:
            if self.running:
                return None
            # One event per run; a loop from an earlier run keeps its own, already set.
            self._stop_event = threading.Event()
            report = self.refresh_once()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="weather-refresh",
                daemon=True,
            )
            self._thread.start()
            self.logger.info(
                "Weather refresh scheduler started (interval=%ss)", self.interval_seconds
            )
            return report

    def stop(self, timeout: float | None = None) -> None:
        with self._lifecycle_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            thread.join(timeout)
            if thread.is_alive():
                self.logger.warning(
                    "Weather refresh thread still finishing a cycle; it will exit afterwards"
                )
            self._thread = None
            self.logger.info("Weather refresh scheduler stopped")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval_seconds):
            self.logger.info("Periodic weather update")
            try:
                self.refresh_once()
            except Exception:  # pragma: no cover - keep the timer thread alive
                self.logger.exception("Unexpected error during periodic weather refresh")
