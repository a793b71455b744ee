"""
Unit tests for scripts/build_catalog.py (requires rasterio)
"""

import json
import os
import sys

import numpy as np
import pytest

rasterio = pytest.importorskip("rasterio")
from rasterio.transform import from_bounds

sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "scripts"))

import build_catalog


def _write_tif(path, bounds, crs="EPSG:4326", size=(8, 8)):
    w, h = size
    profile = {
        "driver": "GTiff",
        "height": h,
        "width": w,
        "count": 1,
        "dtype": rasterio.uint8,
        "crs": crs,
        "transform": from_bounds(*bounds, w, h),
    }
    with rasterio.open(path, "w", **profile) as dst:
        dst.write(np.zeros((h, w), dtype=np.uint8), 1)


class TestBuildCatalog:
    """GeoTIFF scanning into a catalog description"""

    def test_bounds_and_relative_names(self, tmp_path):
        (tmp_path / "sub").mkdir()
        _write_tif(tmp_path / "a.tif", (0, 0, 10, 10))
        _write_tif(tmp_path / "sub" / "b.tif", (2, 2, 4, 4))

        crs, desc = build_catalog.build_catalog(tmp_path)

        assert crs == "EPSG:4326"
        assert list(desc) == ["a.tif", "sub/b.tif"]
        assert desc["sub/b.tif"] == pytest.approx([2, 2, 4, 4])
        json.dumps(desc)

    def test_other_crs_is_skipped(self, tmp_path):
        _write_tif(tmp_path / "a.tif", (0, 0, 10, 10))
        _write_tif(tmp_path / "b.tif", (0, 0, 1000, 1000), crs="EPSG:3857")

        _, desc = build_catalog.build_catalog(tmp_path, "EPSG:4326")

        assert list(desc) == ["a.tif"]

    def test_empty_directory(self, tmp_path):
        with pytest.raises(SystemExit):
            build_catalog.build_catalog(tmp_path)
