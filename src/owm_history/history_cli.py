"""CLI: fetch OpenWeatherMap history for one location and print the samples."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .exceptions import ConfigError, DataUnitError, InvalidInputError, OWMError
from .history import HistoricalClient
from .log_setup import setup_logger
from .models import Coordinates, HistoricalParameters, HistoricalWeatherResponse
from .units import DATA_UNITS

_UNIT_SUFFIX = {"C": "°C", "F": "°F", "K": "K"}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse history CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch historical weather samples from OpenWeatherMap."
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--name", type=str, default=None, help="City name, e.g. Vancouver.")
    target.add_argument("--id", dest="city_id", type=int, default=None, help="City ID.")
    target.add_argument("--lat", type=float, default=None, help="Latitude (needs --lon).")
    parser.add_argument("--lon", type=float, default=None, help="Longitude (needs --lat).")
    parser.add_argument("--start", type=int, default=None, help="Window start, Unix seconds.")
    parser.add_argument("--end", type=int, default=None, help="Window end, Unix seconds.")
    parser.add_argument("--cnt", type=int, default=None, help="Maximum number of samples.")
    parser.add_argument(
        "--unit",
        choices=sorted(DATA_UNITS),
        default=None,
        help="Unit system; defaults to OWM_DEFAULT_UNIT.",
    )
    parser.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of samples to print.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log requests at DEBUG level.")
    return parser.parse_args(argv)


def _build_params(args: argparse.Namespace) -> HistoricalParameters | None:
    if args.max_print is not None and args.max_print <= 0:
        raise InvalidInputError("--max-print must be > 0 when provided.")
    if args.start is None and args.end is None:
        if args.cnt is not None:
            raise InvalidInputError("--cnt requires --start and --end.")
        return None
    if args.start is None or args.end is None:
        raise InvalidInputError("--start and --end must be passed together.")
    try:
        return HistoricalParameters(start=args.start, end=args.end, cnt=args.cnt)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid time window: {exc.errors()[0]['msg']}") from exc


def _build_coords(args: argparse.Namespace) -> Coordinates | None:
    if args.lat is None:
        if args.lon is not None:
            raise InvalidInputError("--lon requires --lat.")
        return None
    if args.lon is None:
        raise InvalidInputError("--lat requires --lon.")
    try:
        return Coordinates(latitude=args.lat, longitude=args.lon)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid coordinates: {exc.errors()[0]['msg']}") from exc


def _print_history(
    console: Console,
    history: HistoricalWeatherResponse,
    unit: str,
    max_print: int,
) -> None:
    console.print(
        f"city_id={history.city_id if history.city_id is not None else '-'} "
        f"samples={len(history.samples)} calctime={history.calctime or '-'}"
    )
    if not history.samples:
        console.print("No historical samples returned.")
        return

    suffix = _UNIT_SUFFIX[unit]
    table = Table(title="OpenWeatherMap History")
    table.add_column("Time (UTC)")
    table.add_column("Temp")
    table.add_column("Humidity %")
    table.add_column("Wind")
    table.add_column("Conditions", overflow="fold")

    for sample in history.samples[:max_print]:
        temp = f"{sample.main.temp:g} {suffix}" if sample.main.temp is not None else "-"
        humidity = f"{sample.main.humidity:g}" if sample.main.humidity is not None else "-"
        wind = f"{sample.wind.speed:g}" if sample.wind.speed is not None else "-"
        if sample.wind.deg is not None:
            wind = f"{wind} @ {sample.wind.deg:g}°"
        conditions = ", ".join(
            item.description or item.main or "?" for item in sample.weather
        ) or "-"
        table.add_row(
            datetime.fromtimestamp(sample.dt, tz=UTC).isoformat(),
            temp,
            humidity,
            wind,
            conditions,
        )
    console.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    """Run a single history query."""
    args = parse_args(argv)
    logger = setup_logger(verbose=args.verbose)
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger.info("Settings loaded", extra={"settings": settings.safe_summary()})
    unit = args.unit or settings.owm_default_unit

    try:
        params = _build_params(args)
        coords = _build_coords(args)
        with HistoricalClient.from_settings(settings, logger=logger, unit=unit) as client:
            if args.name is not None:
                history = client.history_by_name(args.name, params)
            elif args.city_id is not None:
                history = client.history_by_id(args.city_id, params)
            else:
                history = client.history_by_coord(coords, params)
    except (InvalidInputError, DataUnitError) as exc:
        logger.error("Invalid input: %s", exc)
        return 2
    except OWMError as exc:
        logger.error("History request failure: %s", exc)
        return 4

    logger.info("History request success", extra={"sample_count": len(history.samples)})
    _print_history(
        console,
        history,
        unit=unit,
        max_print=args.max_print or settings.owm_max_print,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
