"""Terrain Bounded Context - Error Hierarchy.

Custom exceptions for terrain operations.
"""

from __future__ import annotations


class TerrainError(Exception):
    """Base error for terrain operations."""


class ElevationUnavailableError(TerrainError):
    """Elevation could not be obtained for a coordinate.

    Raised by elevation adapters on transport errors, malformed payloads or
    missing data. Consumers treat it as a soft failure.

    Attributes:
        latitude: Latitude of the failed lookup
        longitude: Longitude of the failed lookup
        reason: Short human-readable cause
    """

    def __init__(self, latitude: float, longitude: float, reason: str) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason
        super().__init__(
            f"Elevation unavailable at ({latitude:.6f}, {longitude:.6f}): {reason}"
        )


# ---------------------------------------------------------------------------
# DEM loading errors (local GeoTIFF elevation source)
# ---------------------------------------------------------------------------
class InvalidRasterError(TerrainError):
    """File is not a valid raster, wrong format, or corrupted."""


class MissingCRSError(TerrainError):
    """Raster has no CRS defined."""


class UnsupportedCRSError(TerrainError):
    """Raster is not in geographic WGS84 (EPSG:4326)."""


class AllNoDataError(TerrainError):
    """Raster contains 100% NoData pixels - unusable."""
