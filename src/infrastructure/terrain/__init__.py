"""Infrastructure adapters for the terrain bounded context.

Elevation sources implementing ElevationRepository / AsyncElevationRepository,
and a factory that picks one from ElevationSettings.
"""

from __future__ import annotations

from infrastructure.config import ElevationSettings

from .geotiff_elevation_adapter import GeoTiffElevationSource
from .open_elevation_adapter import OpenElevationClient


def build_elevation_source(
    settings: ElevationSettings,
) -> OpenElevationClient | GeoTiffElevationSource | None:
    """Instantiate the elevation adapter selected by settings.provider."""
    if settings.provider == "open-elevation":
        return OpenElevationClient(
            base_url=settings.base_url,
            timeout_s=settings.timeout_s,
            retries=settings.retries,
            backoff_s=settings.backoff_s,
        )
    if settings.provider == "geotiff":
        # dem_path presence is enforced by ElevationSettings
        return GeoTiffElevationSource(settings.dem_path)
    return None


__all__ = ["GeoTiffElevationSource", "OpenElevationClient", "build_elevation_source"]
