"""Tests for GeoTiffElevationSource with a monkeypatched rasterio.open.

The fake dataset exposes real rasterio CRS and affine.Affine objects; only the
file access is replaced.
"""

from __future__ import annotations

import numpy as np
import numpy.ma as ma
import pytest
from affine import Affine
from rasterio.crs import CRS
from rasterio.errors import RasterioIOError

from domain.terrain.errors import (
    AllNoDataError,
    InvalidRasterError,
    MissingCRSError,
    UnsupportedCRSError,
)
from infrastructure.terrain.geotiff_elevation_adapter import GeoTiffElevationSource

# 100 x 100 pixels of 0.01 deg covering lon [-77, -76], lat [39, 40]
TRANSFORM = Affine.translation(-77.0, 40.0) @ Affine.scale(0.01, -0.01)


def _gradient() -> np.ndarray:
    # elevation equals the column index: linear in longitude
    return np.tile(np.arange(100, dtype=np.float32), (100, 1))


class FakeDataset:
    def __init__(
        self,
        data,
        *,
        count=1,
        crs="EPSG:4326",
        transform=TRANSFORM,
        nodata=None,
        masked=None,
    ):
        self.count = count
        self.crs = CRS.from_string(crs) if crs is not None else None
        self.transform = transform
        self.nodata = nodata
        self._data = data
        self._mask = masked

    def read(self, band, *, masked, out_dtype):
        data = self._data.astype(out_dtype)
        if masked and self._mask is not None:
            return ma.MaskedArray(data, mask=self._mask)
        return data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def dem_file(tmp_path):
    p = tmp_path / "dem.tif"
    p.write_bytes(b"x")
    return p


def _open_with(monkeypatch, ds):
    monkeypatch.setattr("rasterio.open", lambda path: ds)


# ===========================================================================
# Sampling
# ===========================================================================
def test_samples_bilinear_between_pixel_centres(monkeypatch, dem_file):
    _open_with(monkeypatch, FakeDataset(_gradient()))
    source = GeoTiffElevationSource(dem_file)

    # centre of column 40 is lon -77 + 0.405
    assert source.get_elevation(39.5, -76.595) == pytest.approx(40.0, abs=1e-6)
    # halfway between centres of columns 40 and 41
    assert source.get_elevation(39.5, -76.59) == pytest.approx(40.5, abs=1e-6)


def test_edges_use_clamped_pixels(monkeypatch, dem_file):
    _open_with(monkeypatch, FakeDataset(_gradient()))
    source = GeoTiffElevationSource(dem_file)
    assert source.get_elevation(39.5, -77.0) == pytest.approx(0.0, abs=1e-6)
    assert source.get_elevation(39.5, -76.0) == pytest.approx(99.0, abs=1e-6)


@pytest.mark.parametrize("lat, lon", [(40.5, -76.5), (39.5, -78.0), (38.99, -76.5)])
def test_outside_grid_is_none(monkeypatch, dem_file, lat, lon):
    _open_with(monkeypatch, FakeDataset(_gradient()))
    assert GeoTiffElevationSource(dem_file).get_elevation(lat, lon) is None


def test_nodata_neighbour_is_none(monkeypatch, dem_file):
    data = _gradient()
    data[50, 40] = -9999
    _open_with(monkeypatch, FakeDataset(data, nodata=-9999))
    source = GeoTiffElevationSource(dem_file)

    # row 50 centre is lat 40 - 0.505
    assert source.get_elevation(39.495, -76.595) is None
    assert source.get_elevation(39.2, -76.2) is not None


def test_masked_pixels_become_nodata(monkeypatch, dem_file):
    mask = np.zeros((100, 100), dtype=bool)
    mask[10, 10] = True
    _open_with(monkeypatch, FakeDataset(_gradient(), masked=mask))
    source = GeoTiffElevationSource(dem_file)
    assert np.isnan(source.data[10, 10])
    assert source.get_elevation(39.895, -76.895) is None


def test_grid_is_read_only(monkeypatch, dem_file):
    _open_with(monkeypatch, FakeDataset(_gradient()))
    source = GeoTiffElevationSource(dem_file)
    with pytest.raises(ValueError):
        source.data[0, 0] = 1.0


# ===========================================================================
# Rejections
# ===========================================================================
def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        GeoTiffElevationSource(tmp_path / "missing.tif")


def test_wrong_extension(tmp_path):
    p = tmp_path / "dem.png"
    p.write_bytes(b"x")
    with pytest.raises(InvalidRasterError):
        GeoTiffElevationSource(p)


def test_multiband_rejected(monkeypatch, dem_file):
    _open_with(monkeypatch, FakeDataset(_gradient(), count=3))
    with pytest.raises(InvalidRasterError, match="Expected 1 band"):
        GeoTiffElevationSource(dem_file)


def test_missing_crs_rejected(monkeypatch, dem_file):
    _open_with(monkeypatch, FakeDataset(_gradient(), crs=None))
    with pytest.raises(MissingCRSError):
        GeoTiffElevationSource(dem_file)


def test_projected_crs_rejected(monkeypatch, dem_file):
    _open_with(monkeypatch, FakeDataset(_gradient(), crs="EPSG:32618"))
    with pytest.raises(UnsupportedCRSError):
        GeoTiffElevationSource(dem_file)


def test_degenerate_transform_rejected(monkeypatch, dem_file):
    ds = FakeDataset(_gradient(), transform=Affine.scale(0.0, -0.01))
    _open_with(monkeypatch, ds)
    with pytest.raises(InvalidRasterError, match="transform"):
        GeoTiffElevationSource(dem_file)


def test_all_nodata_rejected(monkeypatch, dem_file):
    data = np.full((10, 10), -1, dtype=np.float32)
    _open_with(monkeypatch, FakeDataset(data, nodata=-1))
    with pytest.raises(AllNoDataError):
        GeoTiffElevationSource(dem_file)


def test_rasterio_errors_are_wrapped(monkeypatch, dem_file):
    def _raise(path):
        raise RasterioIOError("not a TIFF")

    monkeypatch.setattr("rasterio.open", _raise)
    with pytest.raises(InvalidRasterError, match="not a TIFF"):
        GeoTiffElevationSource(dem_file)
