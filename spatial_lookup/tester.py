from __future__ import annotations

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep


class ContainmentTester:
    """Prepared point-in-polygon test for one fixed polygon.

    The geometry is prepared once (GEOS PreparedGeometry builds its edge
    index lazily on the first predicate call, so the constructor forces it)
    and reused for every query.

    Boundary policy: a point on an edge or a vertex is inside. Points inside
    a hole are outside.
    """

    __slots__ = ("_geometry", "_prepared")

    def __init__(self, geometry: BaseGeometry) -> None:
        self._geometry = geometry
        self._prepared = prep(geometry)
        # warm the prepared structure so concurrent readers never race to build it
        self._prepared.intersects(Point(geometry.bounds[0], geometry.bounds[1]))

    @property
    def geometry(self) -> BaseGeometry:
        return self._geometry

    def intersects(self, x: float, y: float) -> bool:
        return bool(self._prepared.intersects(Point(x, y)))
