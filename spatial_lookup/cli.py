"""
Command line entry point: load a GeoJSON file, index it, serve /lookup.

    spatial-lookup regions.geojson name --port 8080

Arguments left out fall back to SPATIAL_LOOKUP_* environment variables.
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn
from pyproj.exceptions import CRSError

from .config import LookupConfig, config_from_env
from .errors import ConfigError
from .geojson import build_from_file
from .projection import point_transform
from .server import create_app

logger = logging.getLogger("spatial_lookup")


def parse_args(argv: Optional[List[str]], defaults: LookupConfig) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="spatial-lookup",
        description="Serve point-in-polygon lookups over a GeoJSON file.",
    )
    ap.add_argument("geojson", nargs="?", default=defaults.geojson_path, help="GeoJSON file with the polygons")
    ap.add_argument("property", nargs="?", default=defaults.attribute, help="feature property to return for hits")
    ap.add_argument("--host", default=defaults.host)
    ap.add_argument("--port", type=int, default=defaults.port)
    ap.add_argument("--node-capacity", type=int, default=defaults.node_capacity, help="STR tree fan-out")
    ap.add_argument("--query-crs", default=defaults.query_crs, help="CRS of incoming x/y, e.g. EPSG:3857")
    ap.add_argument("--data-crs", default=defaults.data_crs, help="CRS of the GeoJSON coordinates, e.g. EPSG:4326")
    ap.add_argument("--log-level", default=defaults.log_level, help="DEBUG, INFO, WARNING, ...")
    args = ap.parse_args(argv)

    if not args.geojson or not args.property:
        ap.error("both GEOJSON and PROPERTY are required (or set SPATIAL_LOOKUP_FILE / SPATIAL_LOOKUP_PROPERTY)")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    try:
        defaults = config_from_env()
    except ConfigError as e:
        print(f"spatial-lookup: {e}", file=sys.stderr)
        return 2

    args = parse_args(argv, defaults)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    outcome = build_from_file(args.geojson, args.property, node_capacity=args.node_capacity)
    if not outcome.ok:
        for failure in outcome.failures:
            logger.error("%s: %s", failure.kind.value, failure.message)
        logger.error("no usable index built from %s; not serving", args.geojson)
        return 1
    logger.info("loaded and indexed %s", args.geojson)

    try:
        transform = point_transform(args.query_crs, args.data_crs)
    except CRSError as e:
        logger.error("bad CRS: %s", e)
        return 2
    if transform is not None:
        logger.info("reprojecting queries from %s to %s", args.query_crs, args.data_crs)

    app = create_app(outcome.service, transform=transform)
    logger.info("listening on %s:%d", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=str(args.log_level).lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
