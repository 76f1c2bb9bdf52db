"""Domain Port(s) for elevation lookups.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from typing import Protocol


class ElevationRepository(Protocol):
    """Port for obtaining ground elevation at a coordinate.

    Implementations live in infrastructure (Open-Elevation HTTP client,
    GeoTIFF DEM sampler). Return None when the source has no data for the
    point; raise ElevationUnavailableError on transport or payload failures.
    """

    def get_elevation(self, latitude: float, longitude: float) -> float | None:
        """Return elevation in meters above sea level, or None."""
        ...


class AsyncElevationRepository(Protocol):
    """Awaitable variant of ElevationRepository for cooperative callers."""

    async def get_elevation_async(
        self, latitude: float, longitude: float
    ) -> float | None:
        """Return elevation in meters above sea level, or None."""
        ...
