from __future__ import annotations

from typing import Iterable, Optional

from common.geo import Extent
from common.types import CatalogEntry, Layer, TextureBinding, Tile


def select_best_image(catalog: Iterable[CatalogEntry], extent: Extent) -> Optional[CatalogEntry]:
    """
    Return the smallest catalog entry that fully covers `extent`, or None.

    "Smallest" is pairwise dominance: a covering candidate replaces the running
    best only if it is no wider AND no taller. When two covering entries are
    incomparable (one narrower but taller), the one seen first is kept.
    """
    selection: Optional[CatalogEntry] = None
    for entry in catalog:
        if not extent.is_inside(entry.extent):
            continue
        if selection is None:
            selection = entry
            continue
        bw, bh = selection.extent.dimensions()
        cw, ch = entry.extent.dimensions()
        if cw <= bw and ch <= bh:
            selection = entry
    return selection


def is_within_coverage(tile: Tile, layer: Layer) -> bool:
    """True if at least one catalog entry fully covers the tile (no catalog -> False)."""
    if layer.catalog is None:
        return False
    return any(tile.extent.is_inside(entry.extent) for entry in layer.catalog)


def should_improve(layer: Layer, tile: Tile, binding: Optional[TextureBinding] = None) -> bool:
    """
    Whether the tile's texture for `layer` should be replaced by a better fit.

    Identity only: True when nothing is bound yet, or when the best covering
    image differs from the bound one.
    """
    best = select_best_image(layer.catalog or (), tile.extent)
    if best is None:
        return False
    current = binding if binding is not None else tile.bindings.get(layer.id)
    if current is None or not current.source_file:
        return True
    return current.source_file != best.image
