"""CLI: refresh the area forecast once and query it like a collaborator would."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import load_settings
from .exceptions import ConfigError
from .log_setup import setup_logger
from .service import WeatherService
from .weather.classifier import icon_glyph
from .weather.datagov import FileForecastSource
from .weather.models import EventWeatherCheck, LookupFound, LookupResult


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Look up cached area forecasts for reminders and events."
    )
    parser.add_argument(
        "--input-file",
        type=Path,
        default=None,
        help="Read a saved provider payload instead of calling the forecast API.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("areas", help="List canonical forecast areas.")

    lookup_parser = subparsers.add_parser("lookup", help="Resolve a free-form area.")
    lookup_parser.add_argument("area", help="Area name, alias or partial name.")

    event_parser = subparsers.add_parser("check-event", help="Check an event's weather.")
    event_parser.add_argument("--location", required=True, help="Event location.")
    event_parser.add_argument("--title", default="Event", help="Event title.")
    event_parser.add_argument(
        "--outdoor",
        action="store_true",
        help="Flag the event as outdoor (indoor events skip the check).",
    )
    return parser.parse_args(argv)


def _print_areas(console: Console, areas: list[str]) -> None:
    table = Table(title=f"Forecast Areas ({len(areas)})")
    table.add_column("Area")
    for area in areas:
        table.add_row(area)
    console.print(table)


def _print_lookup(console: Console, result: LookupResult) -> None:
    if not isinstance(result, LookupFound):
        console.print(result.message)
        if result.available_areas:
            console.print("Available areas: " + ", ".join(result.available_areas))
        return

    entry = result.entry
    classification = result.classification
    table = Table(title=f"Weather for {entry.area}")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("Matched by", result.matched_by)
    table.add_row("Forecast", f"{icon_glyph(classification.icon)} {entry.forecast_text}")
    table.add_row("Warning", "yes" if classification.warning else "no")
    table.add_row("Recommendation", classification.recommendation)
    table.add_row("Observed (UTC)", entry.observed_at.isoformat())
    table.add_row("Cached (UTC)", entry.cached_at.isoformat())
    console.print(table)


def _print_event_check(console: Console, check: EventWeatherCheck) -> None:
    if not check.needs_weather:
        console.print(check.message or "No weather check needed.")
        return
    if check.error:
        console.print(f"{check.error} (location={check.location})")
        return
    if check.alert:
        console.print(f"[bold red]{check.alert}[/bold red]: {check.message}")
    else:
        console.print(check.message or "")


def main(argv: list[str] | None = None) -> int:
    """Run one refresh and answer a single query."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger.setLevel(settings.log_level)
    logger.info("Weather CLI starting with %s", settings.safe_summary())

    source = FileForecastSource(args.input_file) if args.input_file else None
    try:
        service = WeatherService(settings=settings, logger=logger, source=source)
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    try:
        report = service.refresh_now()
        if report.status == "failed" and not service.get_all_areas():
            logger.error("No forecast data available: %s", report.error)
            return 4

        if args.command == "areas":
            _print_areas(console, service.get_all_areas())
            return 0
        if args.command == "lookup":
            result = service.get_weather_for_area(args.area)
            _print_lookup(console, result)
            return 0 if isinstance(result, LookupFound) else 5

        check = service.check_event_weather(
            {"title": args.title, "location": args.location, "isOutdoor": args.outdoor}
        )
        _print_event_check(console, check)
        return 5 if check.error else 0
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
