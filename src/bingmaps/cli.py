#!/usr/bin/env python3
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from bingmaps.client import Client
from bingmaps.common import CultureCode
from bingmaps.config import get_settings
from bingmaps.config.settings import Settings
from bingmaps.errors import BingMapsError, ErrorKind
from bingmaps.locations import find_by_point, find_by_query
from bingmaps.logging_config import configure_logging
from bingmaps.models import ClientConfig, ContextParams, EntityType, FindPoint, Location
from bingmaps.parsers import locations_to_dataframe

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REQUEST_FAILED = 1
EXIT_CONVERSION_FAILED = 2
EXIT_CONFIG_INVALID = 3


def _parse_float_list(value: str) -> List[float]:
    """Parse comma-separated numbers such as "47.6,-122.1"."""
    try:
        return [float(part) for part in value.split(",")]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid number list '{value}'. Expected comma-separated decimals."
        ) from exc


def _parse_culture(value: str) -> CultureCode:
    """Match a culture code case-insensitively ("en-us" -> en-US)."""
    for culture in CultureCode:
        if culture.value.lower() == value.lower():
            return culture
    raise argparse.ArgumentTypeError(f"Unsupported culture '{value}'")


def _parse_entity_types(value: str) -> List[EntityType]:
    try:
        return [EntityType(part.strip()) for part in value.split(",") if part.strip()]
    except ValueError as exc:
        choices = ", ".join(entity.value for entity in EntityType)
        raise argparse.ArgumentTypeError(
            f"Invalid entity types '{value}'. Choose from: {choices}"
        ) from exc


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser for the bingmaps CLI."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--api-key", help="Override API key")
    common.add_argument("--culture", type=_parse_culture, help="Culture code, e.g. en-US")
    common.add_argument(
        "--user-location",
        type=_parse_float_list,
        help="User position as LAT,LNG[,RADIUS]",
    )
    common.add_argument(
        "--user-map-view",
        type=_parse_float_list,
        help="Visible map area as SOUTH,WEST,NORTH,EAST",
    )
    common.add_argument("--user-ip", help="User IPv4 address")
    common.add_argument("--user-region", help="ISO 3166 region code of the user")
    common.add_argument(
        "--format",
        choices=["json", "csv", "table"],
        default="json",
        help="Output format (default: json)",
    )
    common.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: LOG_LEVEL setting or INFO)",
    )

    parser = argparse.ArgumentParser(
        prog="bingmaps",
        description="Look up locations with the Bing Maps REST API.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    point = commands.add_parser(
        "point", parents=[common], help="Find the address at a latitude/longitude"
    )
    point.add_argument("lat", type=float, nargs="?", help="Latitude in decimal degrees")
    point.add_argument("lng", type=float, nargs="?", help="Longitude in decimal degrees")
    point.add_argument("--raw", help='Pre-formatted point, e.g. "47.64054,-122.12934"')
    point.add_argument(
        "--entity-types",
        type=_parse_entity_types,
        default=[],
        help="Comma-separated entity types to include",
    )
    point.add_argument("--neighborhood", action="store_true", help="Include neighborhood")
    point.add_argument("--ciso2", action="store_true", help="Include ISO country code")

    query = commands.add_parser(
        "query", parents=[common], help="Find coordinates for an address or place"
    )
    query.add_argument("text", help='Free-text query, e.g. "1 Microsoft Way, Redmond WA"')
    return parser


def _load_settings(log_level: Optional[str]) -> Optional[Settings]:
    """Load settings and configure logging; None if the settings are invalid."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging(log_level or "INFO")
        LOGGER.error("Invalid configuration: %s", exc)
        return None
    configure_logging(log_level or settings.log_level)
    return settings


def _build_find_point(args: argparse.Namespace, parser: argparse.ArgumentParser) -> FindPoint:
    options = {
        "include_entity_types": args.entity_types,
        "include_neighborhood": args.neighborhood,
        "include_ciso2": args.ciso2,
    }
    if args.raw:
        return FindPoint.from_str(args.raw, **options)
    if args.lat is None or args.lng is None:
        parser.error("point requires LAT LNG or --raw")
    return FindPoint.from_latlng(args.lat, args.lng, **options)


def render(locations: List[Location], output_format: str) -> str:
    """Render locations in the requested output format."""
    if output_format == "json":
        payload = [location.model_dump(mode="json", by_alias=True) for location in locations]
        return json.dumps(payload, indent=2, ensure_ascii=False)
    frame = locations_to_dataframe(locations)
    if output_format == "csv":
        return frame.to_csv(index=False)
    return frame.to_string(index=False)


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Execute CLI with given arguments.

    Args:
        argv: Command-line arguments (uses sys.argv if None).

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = _load_settings(args.log_level)
    if settings is None:
        return EXIT_CONFIG_INVALID
    config = ClientConfig.from_settings(settings)
    api_key = args.api_key or settings.api.bing_maps_key

    context = ContextParams(
        culture=args.culture,
        user_map_view=args.user_map_view,
        user_location=args.user_location,
        user_ip=args.user_ip,
        user_region=args.user_region,
    )

    try:
        with Client(api_key=api_key, config=config) as client:
            if args.command == "point":
                find = _build_find_point(args, parser)
                locations = find_by_point(client, find, context)
            else:
                locations = find_by_query(client, args.text, context)
    except BingMapsError as exc:
        LOGGER.error("%s", exc)
        if exc.should_wait:
            LOGGER.warning("Bing Maps is overloaded; wait a few seconds and retry")
        if exc.kind is ErrorKind.CONVERSION:
            return EXIT_CONVERSION_FAILED
        return EXIT_REQUEST_FAILED
    except RuntimeError as exc:
        # Missing API key
        LOGGER.error("%s", exc)
        return EXIT_REQUEST_FAILED

    LOGGER.info("Found %d location(s)", len(locations))
    sys.stdout.write(render(locations, args.format))
    sys.stdout.write("\n")
    return EXIT_OK


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
