#!/usr/bin/env python3
"""
Operator CLI for the flood zone resolver.

Provisions the polygon store, imports GeoJSON flood data, and runs
one-off resolutions against the configured Redis and PostGIS instances.

    python scripts/flood_admin.py init
    python scripts/flood_admin.py import /data/auckland_flood.geojson
    python scripts/flood_admin.py sample
    python scripts/flood_admin.py resolve -36.845 174.765 --parcel 12345
"""

import argparse
import logging
import sys
from decimal import Decimal

from flood_zone.api.dependencies import create_polygon_store
from flood_zone.config import settings
from flood_zone.errors import FloodZoneError
from flood_zone.logging_config import configure_logging
from flood_zone.repositories import RedisQueryRepository
from flood_zone.services import IngestionService, ResolutionService

logger = logging.getLogger("flood_admin")


def cmd_init(args: argparse.Namespace) -> int:
    """Provision the polygon store."""
    create_polygon_store().initialize()
    print("✓ Polygon store initialized")
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    """Import a GeoJSON FeatureCollection file."""
    ingestion = IngestionService(polygon_store=create_polygon_store())
    if not ingestion.import_features(args.file):
        print(f"✗ Could not read {args.file} as a GeoJSON FeatureCollection")
        return 1
    print(f"✓ Imported {args.file}")
    return 0


def cmd_sample(args: argparse.Namespace) -> int:
    """Load the bundled Auckland sample polygons."""
    count = IngestionService(polygon_store=create_polygon_store()).import_sample_data()
    print(f"✓ Imported {count} sample polygons")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve one coordinate and print the result."""
    service = ResolutionService.create(
        query_cache=RedisQueryRepository.create(),
        polygon_store=create_polygon_store(),
    )
    result = service.resolve(args.latitude, args.longitude, parcel_id=args.parcel)

    print(f"  Flood zone:  {result.flood_zone.value}")
    print(f"  Region:      {result.region}")
    print(f"  Category:    {result.flood_category or '-'}")
    print(f"  Return per.: {result.return_period if result.return_period is not None else '-'}")
    print(f"  Source:      {result.source.value} (cached: {result.from_cache})")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flood_admin", description="Flood zone resolver operator tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    p_init = subparsers.add_parser("init", help="Create the polygon table and spatial index")
    p_init.set_defaults(func=cmd_init)

    p_import = subparsers.add_parser("import", help="Import a GeoJSON FeatureCollection")
    p_import.add_argument("file", help="Path to the GeoJSON file")
    p_import.set_defaults(func=cmd_import)

    p_sample = subparsers.add_parser("sample", help="Import the bundled Auckland sample polygons")
    p_sample.set_defaults(func=cmd_sample)

    p_resolve = subparsers.add_parser("resolve", help="Resolve the flood zone of a coordinate")
    p_resolve.add_argument("latitude", type=Decimal)
    p_resolve.add_argument("longitude", type=Decimal)
    p_resolve.add_argument("--parcel", default=None, help="Parcel identifier")
    p_resolve.set_defaults(func=cmd_resolve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except FloodZoneError as e:
        print(f"\n❌ Import aborted: {e}")
        return 2
    except Exception as e:
        logger.exception("Command failed")
        print(f"\n❌ Error: {e}")
        print("\nMake sure Redis and PostGIS are running:")
        print("  docker compose up -d")
        print("\nOr set REDIS_URL / POSTGIS_URL to your instances.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
