"""GeoTIFF adapter for ElevationRepository.

Serves elevations from a local single-band DEM in EPSG:4326, for offline
planning or as a stand-in for the HTTP service.

Lifecycle:
1) Open dataset with context manager (rasterio.open)
2) Validate band count, CRS and geotransform
3) Read band 1 as float32, converting nodata -> np.nan
4) Keep the array and the inverse affine transform in memory
5) Sample with bilinear interpolation on pixel centres
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import numpy as np
import rasterio
from affine import Affine
from numpy.typing import NDArray
from rasterio.crs import CRS
from rasterio.errors import RasterioError

from domain.terrain.errors import (
    AllNoDataError,
    InvalidRasterError,
    MissingCRSError,
    UnsupportedCRSError,
)

logger = logging.getLogger(__name__)

_TARGET_CRS = CRS.from_epsg(4326)


def _is_wgs84(crs: Any) -> bool:
    """Check if CRS is WGS84 (EPSG:4326 or equivalent)."""
    if crs is None:
        return False
    if crs == _TARGET_CRS:
        return True
    return str(crs).upper() in ("EPSG:4326", "OGC:CRS84")


def _read_band(src: Any) -> NDArray[np.float32]:
    data = src.read(1, masked=True, out_dtype="float32")
    if hasattr(data, "mask") and np.any(data.mask):
        return np.where(data.mask, np.float32(np.nan), data.data).astype(np.float32)
    data = np.asarray(data, dtype=np.float32)
    if src.nodata is not None:
        # GeoTIFF nodata is an exact value in file metadata
        data = np.where(data == src.nodata, np.float32(np.nan), data)
    return data


class GeoTiffElevationSource:
    """Elevation lookups backed by an in-memory GeoTIFF DEM.

    Parameters
    ----------
    file_path: Path | str
        Single-band GeoTIFF in EPSG:4326.

    Raises
    ------
    FileNotFoundError, InvalidRasterError, MissingCRSError,
    UnsupportedCRSError, AllNoDataError
    """

    def __init__(self, file_path: Path | str) -> None:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(str(path))
        if path.suffix.lower() not in (".tif", ".tiff"):
            raise InvalidRasterError(f"Unsupported file extension: {path.suffix}")

        try:
            with rasterio.open(path) as src:
                if src.count != 1:
                    raise InvalidRasterError(f"Expected 1 band, got {src.count}")
                if src.crs is None:
                    raise MissingCRSError("Raster has no CRS defined")
                if not _is_wgs84(src.crs):
                    raise UnsupportedCRSError(
                        f"Expected EPSG:4326, got {src.crs.to_string()}"
                    )
                transform = src.transform
                if not isinstance(transform, Affine) or transform.is_degenerate:
                    raise InvalidRasterError("Missing or degenerate affine transform")
                data = _read_band(src)
        except RasterioError as e:
            raise InvalidRasterError(f"Corrupted or invalid raster: {e}") from e

        if np.isnan(data).all():
            raise AllNoDataError("Raster contains 100% NoData pixels - unusable")

        data.flags.writeable = False
        self.data = data
        self.transform = transform
        self._inverse = ~transform

        # SEC: log only the filename, not the full path
        logger.debug(
            "DEM %s: Loaded %dx%d grid for elevation lookups",
            path.name,
            data.shape[1],
            data.shape[0],
        )

    def get_elevation(self, latitude: float, longitude: float) -> float | None:
        """Bilinear elevation at a point; None outside the grid or on NoData.

        Any NaN among the four neighbouring pixels yields None (no infill).
        Points within half a pixel of an edge use clamped indices.
        """
        col, row = self._inverse @ (longitude, latitude)
        height, width = self.data.shape
        if not (0 <= col <= width and 0 <= row <= height):
            return None

        # Fractional position relative to pixel centres
        px = col - 0.5
        py = row - 0.5
        x0 = int(math.floor(px))
        y0 = int(math.floor(py))
        fx = px - x0
        fy = py - y0

        x0c = max(0, min(x0, width - 1))
        x1c = max(0, min(x0 + 1, width - 1))
        y0c = max(0, min(y0, height - 1))
        y1c = max(0, min(y0 + 1, height - 1))

        q11 = float(self.data[y0c, x0c])
        q21 = float(self.data[y0c, x1c])
        q12 = float(self.data[y1c, x0c])
        q22 = float(self.data[y1c, x1c])
        if any(math.isnan(q) for q in (q11, q21, q12, q22)):
            return None

        return float(
            q11 * (1 - fx) * (1 - fy)
            + q21 * fx * (1 - fy)
            + q12 * (1 - fx) * fy
            + q22 * fx * fy
        )
