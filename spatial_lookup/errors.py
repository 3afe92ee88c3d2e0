from __future__ import annotations


class SpatialLookupError(Exception):
    """Base class for every error raised by spatial_lookup."""


class InputError(SpatialLookupError):
    """Input file is missing, unreadable or not GeoJSON."""


class GeometryError(SpatialLookupError):
    """A feature geometry could not be turned into a shapely geometry."""


class BuildError(SpatialLookupError):
    """Raised by BuildOutcome.raise_for_failure() when the index was not built."""

    def __init__(self, failures):
        self.failures = tuple(failures)
        summary = "; ".join(f.message for f in self.failures[:5])
        if len(self.failures) > 5:
            summary += f" (+{len(self.failures) - 5} more)"
        super().__init__(summary or "build failed")


class ConfigError(SpatialLookupError, RuntimeError):
    pass
