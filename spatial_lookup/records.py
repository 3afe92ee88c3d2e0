from __future__ import annotations

"""Polygon records: the immutable (geometry, attributes) pairs that get indexed.

Raw features come from the input layer (see ``geojson.py``) as a geometry
mapping plus a property mapping. Only polygonal geometries become records;
everything else is "not applicable" and the caller skips it.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

from .errors import GeometryError


POLYGONAL_TYPES = ("Polygon", "MultiPolygon")


@dataclass(frozen=True)
class RawFeature:
    """One input feature, as handed over by the parsing layer."""

    geometry: Any
    properties: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_geojson(cls, obj: Any) -> "RawFeature":
        if not isinstance(obj, Mapping):
            return cls(geometry=None, properties={})
        props = obj.get("properties")
        return cls(
            geometry=obj.get("geometry"),
            properties=props if isinstance(props, Mapping) else {},
        )


@dataclass(frozen=True)
class PolygonRecord:
    geometry: BaseGeometry  # Polygon | MultiPolygon
    attributes: Mapping[str, Any]

    @property
    def bounds(self):
        return self.geometry.bounds


def _geometry_type(geom_obj: Any) -> Optional[str]:
    if isinstance(geom_obj, BaseGeometry):
        return geom_obj.geom_type
    if isinstance(geom_obj, Mapping):
        t = geom_obj.get("type")
        return t if isinstance(t, str) else None
    return None


def _to_geometry(geom_obj: Any) -> BaseGeometry:
    if isinstance(geom_obj, BaseGeometry):
        return geom_obj
    try:
        return shape(geom_obj)
    except Exception as e:
        # shape() raises ValueError, TypeError, KeyError or GEOSException
        # depending on how the coordinates are broken
        raise GeometryError(f"invalid {_geometry_type(geom_obj)} geometry: {e}") from e


def polygon_record(feature: RawFeature) -> Optional[PolygonRecord]:
    """Build a PolygonRecord, or return None when the feature is not polygonal.

    Missing, non-polygonal and empty geometries are "not applicable".
    Polygonal geometries whose coordinates cannot be parsed raise GeometryError.
    Self-intersecting or zero-area polygons are accepted as given.
    """
    geom_type = _geometry_type(feature.geometry)
    if geom_type not in POLYGONAL_TYPES:
        return None

    geom = _to_geometry(feature.geometry)
    if not isinstance(geom, (Polygon, MultiPolygon)) or geom.is_empty:
        return None

    return PolygonRecord(
        geometry=geom,
        attributes=MappingProxyType(dict(feature.properties or {})),
    )
