#!/usr/bin/env python3
"""
Build a static imagery catalog description from a directory of GeoTIFFs.

Writes {src}/metadata.json mapping each image file name (relative to the
description) to its bounds [xmin, ymin, xmax, ymax] in the catalog CRS.
Files in another CRS are skipped (no reprojection is done here).

Examples:
  python scripts/build_catalog.py --src data/catalog
  python scripts/build_catalog.py --src data/catalog --crs EPSG:4326 --out data/catalog/metadata.json
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import rasterio

# Allow running as a plain script from the repo root
sys.path.append(str(Path(__file__).resolve().parent.parent))

from common.logging_setup import get_logger, setup_logging  # noqa: E402
from common.types import DEFAULT_CATALOG_NAME  # noqa: E402


log = get_logger("build_catalog")

RASTER_SUFFIXES = (".tif", ".tiff")


def read_bounds(path: Path) -> Tuple[Optional[str], List[float]]:
    """Return (crs string or None, [xmin, ymin, xmax, ymax]) for one raster."""
    with rasterio.open(path) as ds:
        b = ds.bounds
        crs = ds.crs.to_string() if ds.crs is not None else None
        return crs, [float(b.left), float(b.bottom), float(b.right), float(b.top)]


def build_catalog(src: Path, crs: Optional[str] = None) -> Tuple[str, Dict[str, List[float]]]:
    """
    Scan `src` for rasters and return (catalog_crs, description).
    Without `crs`, the first georeferenced file fixes the catalog CRS.
    """
    out: Dict[str, List[float]] = {}
    catalog_crs = crs
    for path in sorted(p for p in src.rglob("*") if p.suffix.lower() in RASTER_SUFFIXES):
        file_crs, bounds = read_bounds(path)
        if file_crs is None:
            log.warning("Skipping raster without CRS", extra={"extra": {"file": str(path)}})
            continue
        if catalog_crs is None:
            catalog_crs = file_crs
        if file_crs != catalog_crs:
            log.warning(
                "Skipping raster in another CRS",
                extra={"extra": {"file": str(path), "crs": file_crs, "catalog_crs": catalog_crs}},
            )
            continue
        out[path.relative_to(src).as_posix()] = bounds
    if catalog_crs is None:
        raise SystemExit(f"No georeferenced rasters found under {src}")
    return catalog_crs, out


def main() -> None:
    ap = argparse.ArgumentParser(description="Build a static imagery catalog (metadata.json)")
    ap.add_argument("--src", required=True, help="Directory containing GeoTIFF images")
    ap.add_argument("--out", default="", help=f"Output path (default: SRC/{DEFAULT_CATALOG_NAME})")
    ap.add_argument("--crs", default=None, help="Catalog CRS (default: CRS of the first raster)")
    ap.add_argument("--log-level", default=None)
    args = ap.parse_args()

    setup_logging(args.log_level, force=True)
    src = Path(args.src)
    out = Path(args.out) if args.out else src / DEFAULT_CATALOG_NAME

    catalog_crs, description = build_catalog(src, args.crs)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(description, indent=2))
    log.info("Catalog written", extra={"extra": {"out": str(out), "crs": catalog_crs, "images": len(description)}})
    print(f"[ok] wrote {out} ({len(description)} images, {catalog_crs})")


if __name__ == "__main__":
    main()
