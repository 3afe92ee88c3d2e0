"""
HTTP endpoint for the spatial lookup service.

GET /lookup?x=<float>&y=<float>  ->  JSON array of attribute values
GET /health                      ->  readiness and index summary
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Query
from pydantic import BaseModel

from . import __version__
from .projection import PointTransform
from .service import SpatialLookupService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    ready: bool
    entries: int
    attribute: str
    bounds: Optional[List[float]] = None


def create_app(service: SpatialLookupService, transform: Optional[PointTransform] = None) -> FastAPI:
    """Build the FastAPI app around an already built service.

    ``transform`` reprojects incoming coordinates into the data CRS; see
    ``projection.point_transform``.
    """
    app = FastAPI(
        title="Spatial Lookup",
        description="Point-in-polygon reverse geocoding over a static polygon set",
        version=__version__,
    )
    app.state.service = service

    @app.get("/lookup", response_model=List[str])
    def lookup(
        x: float = Query(..., description="X / longitude"),
        y: float = Query(..., description="Y / latitude"),
    ) -> List[str]:
        if transform is not None:
            try:
                x, y = transform(x, y)
            except Exception:
                logger.exception("cannot reproject (%r, %r)", x, y)
                return []
        return service.lookup(x, y)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        bounds = service.bounds
        return HealthResponse(
            ready=service.ready(),
            entries=len(service),
            attribute=service.attribute_name,
            bounds=list(bounds) if bounds is not None else None,
        )

    return app
