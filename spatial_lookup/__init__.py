"""
In-memory reverse geocoding: which polygons contain a point?

    outcome = build_from_file("regions.geojson", "name")
    service = outcome.raise_for_failure()
    service.lookup(0.5, 0.5)   # -> ["Peter", "Paul"]
"""

__version__ = "1.0.0"

from .entry import LookupEntry
from .errors import BuildError, ConfigError, GeometryError, InputError, SpatialLookupError
from .geojson import build_from_file, parse_features, read_features
from .index import BoundingBoxIndex
from .records import PolygonRecord, RawFeature, polygon_record
from .service import BuildFailure, BuildOutcome, FailureKind, SpatialLookupService, build
from .tester import ContainmentTester

__all__ = [
    "BoundingBoxIndex",
    "BuildError",
    "BuildFailure",
    "BuildOutcome",
    "ConfigError",
    "ContainmentTester",
    "FailureKind",
    "GeometryError",
    "InputError",
    "LookupEntry",
    "PolygonRecord",
    "RawFeature",
    "SpatialLookupError",
    "SpatialLookupService",
    "build",
    "build_from_file",
    "parse_features",
    "polygon_record",
    "read_features",
]
