from __future__ import annotations

"""Optional reprojection of query coordinates into the data CRS.

The index works in whatever CRS the GeoJSON was written in (normally
EPSG:4326 lon/lat). When clients send coordinates in another CRS the serving
layer reprojects each query point before the lookup.
"""

from typing import Callable, Optional, Tuple

from pyproj import CRS, Transformer


PointTransform = Callable[[float, float], Tuple[float, float]]


def point_transform(query_crs: Optional[str], data_crs: Optional[str]) -> Optional[PointTransform]:
    """Return an (x, y) -> (x, y) transform, or None when no reprojection is needed.

    Axis order is always x/lon first (always_xy=True). Invalid CRS strings
    raise pyproj.exceptions.CRSError.
    """
    if not query_crs or not data_crs:
        return None
    src = CRS.from_user_input(query_crs)
    dst = CRS.from_user_input(data_crs)
    if src == dst:
        return None
    transformer = Transformer.from_crs(src, dst, always_xy=True)

    def _transform(x: float, y: float) -> Tuple[float, float]:
        tx, ty = transformer.transform(x, y)
        return float(tx), float(ty)

    return _transform
