from __future__ import annotations

"""Spatial lookup service: build once, then answer point queries.

build() turns raw features into LookupEntries, bulk-loads the bounding-box
index over them and reports the result as a BuildOutcome value. Build
problems are never raised from here; they are collected as BuildFailure
records and the returned service is simply not ready.

Query path (lookup):
1. index filter   - candidates whose box contains the point
2. exact refine   - prepared containment test per candidate
3. attribute read - configured attribute of every match, in discovery order

After build nothing is mutated, so one service can be shared by any number of
threads without locking.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .entry import LookupEntry
from .errors import BuildError, GeometryError
from .index import DEFAULT_NODE_CAPACITY, BoundingBoxIndex, Bounds
from .records import PolygonRecord, RawFeature, polygon_record

logger = logging.getLogger(__name__)


# -----------------------------
# Build outcome
# -----------------------------
class FailureKind(str, Enum):
    INPUT = "input"  # unreadable / unparseable / zero features
    NO_POLYGONS = "no_polygons"  # parsed fine, nothing polygonal
    GEOMETRY = "geometry"  # a polygonal feature could not be built


@dataclass(frozen=True)
class BuildFailure:
    kind: FailureKind
    message: str
    feature: Optional[int] = None  # position in the input sequence, when known


@dataclass(frozen=True)
class BuildOutcome:
    service: "SpatialLookupService"
    failures: Tuple[BuildFailure, ...] = ()
    skipped: int = 0  # non-polygonal features discarded

    @property
    def ok(self) -> bool:
        return not self.failures and self.service.ready()

    def raise_for_failure(self) -> "SpatialLookupService":
        """Return the service, or raise BuildError if the build failed."""
        if not self.ok:
            raise BuildError(self.failures)
        return self.service


# -----------------------------
# Service
# -----------------------------
class SpatialLookupService:
    """Read-only point -> attribute values lookup over a fixed set of polygons.

    Instances are normally created by ``build``. A service with no entries is
    valid but not ready: every lookup returns an empty list.
    """

    def __init__(
        self,
        entries: Sequence[LookupEntry],
        attribute_name: str,
        node_capacity: int = DEFAULT_NODE_CAPACITY,
    ) -> None:
        self._entries: Tuple[LookupEntry, ...] = tuple(entries)
        self._attribute_name = attribute_name
        # the index stores positions into self._entries, never the entries
        self._index = BoundingBoxIndex([e.bounding_box for e in self._entries], node_capacity=node_capacity)

    @classmethod
    def empty(cls, attribute_name: str) -> "SpatialLookupService":
        return cls((), attribute_name)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SpatialLookupService(entries={len(self)}, attribute={self._attribute_name!r}, ready={self.ready()})"

    @property
    def attribute_name(self) -> str:
        return self._attribute_name

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._index.bounds

    @property
    def entries(self) -> Tuple[LookupEntry, ...]:
        return self._entries

    def ready(self) -> bool:
        return len(self._entries) > 0

    def matches(self, x: float, y: float) -> Iterator[LookupEntry]:
        """Lazily yield every entry whose polygon contains (x, y).

        Boundary points count as contained. Entries come out in index
        discovery order.
        """
        if not self.ready() or not (math.isfinite(x) and math.isfinite(y)):
            return
        for pos in self._index.query_point(x, y):
            entry = self._entries[pos]
            if entry.intersects(x, y):
                yield entry

    def lookup(self, x: float, y: float) -> List[str]:
        """Return the configured attribute of every polygon containing (x, y).

        Never raises. An unready service, a non-finite coordinate or a point
        outside every polygon all give ``[]``. A matching polygon without the
        attribute is left out of the result (and logged).
        """
        values: List[str] = []
        if not self.ready():
            return values
        try:
            fx, fy = float(x), float(y)
            for entry in self.matches(fx, fy):
                v = entry.value(self._attribute_name)
                if v is None:
                    logger.warning(
                        "polygon at %s matched (%s, %s) but has no %r attribute; skipped",
                        entry.bounding_box,
                        fx,
                        fy,
                        self._attribute_name,
                    )
                    continue
                values.append(v)
        except Exception:
            logger.exception("lookup failed for (%r, %r)", x, y)
            return []
        return values


# -----------------------------
# Build
# -----------------------------
def _as_raw_feature(feature: Any) -> RawFeature:
    if isinstance(feature, RawFeature):
        return feature
    if isinstance(feature, tuple) and len(feature) == 2:
        geometry, props = feature
        return RawFeature(geometry=geometry, properties=props if isinstance(props, Mapping) else {})
    return RawFeature.from_geojson(feature)


def failed_build(attribute_name: str, failures: Iterable[BuildFailure], skipped: int = 0) -> BuildOutcome:
    failures = tuple(failures)
    for f in failures:
        logger.warning("build failure (%s): %s", f.kind.value, f.message)
    return BuildOutcome(service=SpatialLookupService.empty(attribute_name), failures=failures, skipped=skipped)


def build(
    features: Iterable[Any],
    attribute_name: str,
    node_capacity: int = DEFAULT_NODE_CAPACITY,
) -> BuildOutcome:
    """Build a SpatialLookupService from raw features.

    ``features`` may hold RawFeature objects, GeoJSON feature mappings or
    ``(geometry, properties)`` pairs. Non-polygonal features are skipped.
    Any geometry error fails the whole build; a partially built index is
    never returned.
    """
    if int(node_capacity) < 2:
        raise ValueError(f"node_capacity must be >= 2, got {node_capacity}")

    features = list(features)
    if not features:
        return failed_build(attribute_name, [BuildFailure(FailureKind.INPUT, "input contains no features")])

    records: List[PolygonRecord] = []
    failures: List[BuildFailure] = []
    skipped = 0

    for i, feature in enumerate(features):
        try:
            record = polygon_record(_as_raw_feature(feature))
        except GeometryError as e:
            failures.append(BuildFailure(FailureKind.GEOMETRY, f"feature {i}: {e}", feature=i))
            continue
        if record is None:
            skipped += 1
            logger.debug("feature %d is not polygonal; skipped", i)
            continue
        records.append(record)

    if failures:
        return failed_build(attribute_name, failures, skipped)
    if not records:
        return failed_build(
            attribute_name,
            [BuildFailure(FailureKind.NO_POLYGONS, f"none of the {len(features)} features is polygonal")],
            skipped,
        )

    entries: List[LookupEntry] = []
    for i, record in enumerate(records):
        try:
            entries.append(LookupEntry.from_record(record))
        except Exception as e:
            failures.append(BuildFailure(FailureKind.GEOMETRY, f"polygon {i}: cannot prepare geometry: {e}"))
    if failures:
        return failed_build(attribute_name, failures, skipped)

    try:
        service = SpatialLookupService(entries, attribute_name, node_capacity=node_capacity)
    except ValueError as e:
        return failed_build(attribute_name, [BuildFailure(FailureKind.GEOMETRY, f"cannot index polygons: {e}")], skipped)

    missing = sum(1 for r in records if r.attributes.get(attribute_name) is None)
    if missing:
        logger.warning(
            "%d of %d polygons have no %r attribute and will never appear in results",
            missing,
            len(records),
            attribute_name,
        )
    logger.info(
        "indexed %d polygons (%d non-polygonal features skipped), bounds=%s",
        len(entries),
        skipped,
        service.bounds,
    )
    return BuildOutcome(service=service, skipped=skipped)
