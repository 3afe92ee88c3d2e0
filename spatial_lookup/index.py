from __future__ import annotations

"""Bounding-box index: a static STR tree over axis-aligned rectangles.

The tree is bulk-loaded once in the constructor (Sort-Tile-Recursive packing,
done by GEOS through shapely's STRtree) and never changes afterwards. There
is no insert/remove and no "unbuilt" state, so an index object is always
safe to query, from any number of threads.

Leaves hold integer positions into the sequence of boxes the index was built
from; callers keep their own arena of payloads and use the positions to
address it.
"""

import math
from typing import Iterator, Optional, Sequence, Tuple

from shapely.geometry import Point, box
from shapely.strtree import STRtree


Bounds = Tuple[float, float, float, float]  # (min_x, min_y, max_x, max_y)

DEFAULT_NODE_CAPACITY = 10


def _check_bounds(b: Sequence[float]) -> Bounds:
    if len(b) != 4:
        raise ValueError(f"bounding box must have 4 values, got {len(b)}")
    min_x, min_y, max_x, max_y = (float(v) for v in b)
    if not all(math.isfinite(v) for v in (min_x, min_y, max_x, max_y)):
        raise ValueError(f"bounding box has non-finite values: {tuple(b)}")
    if min_x > max_x or min_y > max_y:
        raise ValueError(f"bounding box has min > max: {tuple(b)}")
    return min_x, min_y, max_x, max_y


def _envelope(b: Bounds):
    min_x, min_y, max_x, max_y = b
    if min_x == max_x and min_y == max_y:
        return Point(min_x, min_y)
    return box(min_x, min_y, max_x, max_y)


def union_bounds(boxes: Sequence[Bounds]) -> Optional[Bounds]:
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )


class BoundingBoxIndex:
    def __init__(self, boxes: Sequence[Sequence[float]], node_capacity: int = DEFAULT_NODE_CAPACITY) -> None:
        if int(node_capacity) < 2:
            raise ValueError(f"node_capacity must be >= 2, got {node_capacity}")
        self._node_capacity = int(node_capacity)
        self._boxes: Tuple[Bounds, ...] = tuple(_check_bounds(b) for b in boxes)
        self._bounds = union_bounds(self._boxes)
        # no tree at all for an empty index
        self._tree: Optional[STRtree] = (
            STRtree([_envelope(b) for b in self._boxes], node_capacity=self._node_capacity)
            if self._boxes
            else None
        )

    def __len__(self) -> int:
        return len(self._boxes)

    def __repr__(self) -> str:
        return f"BoundingBoxIndex(entries={len(self)}, node_capacity={self._node_capacity})"

    @property
    def node_capacity(self) -> int:
        return self._node_capacity

    @property
    def bounds(self) -> Optional[Bounds]:
        """Union of every indexed box, or None for an empty index."""
        return self._bounds

    def box(self, position: int) -> Bounds:
        return self._boxes[position]

    def query(self, bounds: Sequence[float]) -> Iterator[int]:
        """Yield the positions of all boxes overlapping ``bounds``.

        Touching counts as overlapping. Positions come out in tree-discovery
        order; no other ordering is promised.
        """
        if self._tree is None:
            return
        q = _check_bounds(bounds)
        if not self._overlaps(self._bounds, q):
            return
        for i in self._tree.query(_envelope(q)):
            yield int(i)

    def query_point(self, x: float, y: float) -> Iterator[int]:
        return self.query((x, y, x, y))

    @staticmethod
    def _overlaps(a: Bounds, b: Bounds) -> bool:
        return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]
