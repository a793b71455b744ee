from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


# -------------------------
# Extent (axis-aligned bbox tagged with a CRS)
# -------------------------
@dataclass(frozen=True)
class Extent:
    """
    Axis-aligned bounding rectangle in a named spatial reference system.

    Bounds follow the bbox convention used across this project:
      [xmin, ymin, xmax, ymax]  (lon_min, lat_min, lon_max, lat_max for EPSG:4326)
    """
    crs: str
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_bounds(cls, crs: str, bounds: Sequence[float]) -> "Extent":
        if len(bounds) != 4:
            raise ValueError(f"Expected 4 bounds [xmin, ymin, xmax, ymax], got {len(bounds)}")
        xmin, ymin, xmax, ymax = (float(b) for b in bounds)
        if not all(math.isfinite(v) for v in (xmin, ymin, xmax, ymax)):
            raise ValueError("Bounds must be finite numbers")
        if xmin > xmax or ymin > ymax:
            raise ValueError(f"Inverted bounds: {list(bounds)}")
        return cls(crs=str(crs), xmin=xmin, ymin=ymin, xmax=xmax, ymax=ymax)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)

    @property
    def width(self) -> float:
        return abs(self.xmax - self.xmin)

    @property
    def height(self) -> float:
        return abs(self.ymax - self.ymin)

    def dimensions(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def is_inside(self, other: "Extent", epsilon: float = 0.0) -> bool:
        """True if this extent lies entirely within `other` (edges inclusive)."""
        _check_same_crs(self, other)
        return (
            self.xmin >= other.xmin - epsilon
            and self.xmax <= other.xmax + epsilon
            and self.ymin >= other.ymin - epsilon
            and self.ymax <= other.ymax + epsilon
        )

    def offset_to_parent(self, parent: "Extent") -> np.ndarray:
        """
        Placement of this extent within `parent`, as (origin_x, origin_y, scale).

        origin_x is measured from the parent's west edge, origin_y from its north
        edge (image rows grow downward), both as fractions of the parent size.
        scale is this width over the parent width; non-square ratios are not handled.
        """
        _check_same_crs(self, parent)
        pw, ph = parent.dimensions()
        if pw == 0 or ph == 0:
            raise ValueError(f"Degenerate parent extent: {parent}")
        origin_x = (self.xmin - parent.xmin) / pw
        origin_y = (parent.ymax - self.ymax) / ph
        scale = self.width / pw
        return np.array([origin_x, origin_y, scale], dtype=float)

    def to_dict(self) -> dict:
        return {"crs": self.crs, "bbox": list(self.bounds)}

    def __str__(self) -> str:
        return f"{self.crs}[{self.xmin}, {self.ymin}, {self.xmax}, {self.ymax}]"


def _check_same_crs(a: Extent, b: Extent) -> None:
    if a.crs != b.crs:
        raise ValueError(f"Unsupported CRS mix: {a.crs} vs {b.crs}")


def parse_bbox(text: str) -> Tuple[float, float, float, float]:
    """Parse 'xmin,ymin,xmax,ymax' (as used by query strings) into floats."""
    parts = [p for p in text.replace(" ", "").split(",") if p]
    if len(parts) != 4:
        raise ValueError("bbox must be xmin,ymin,xmax,ymax")
    xmin, ymin, xmax, ymax = (float(p) for p in parts)
    return xmin, ymin, xmax, ymax
