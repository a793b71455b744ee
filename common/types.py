from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from common.geo import Extent


DEFAULT_CATALOG_NAME = "metadata.json"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One image of a static catalog and the geographic extent it covers."""
    image: str
    extent: Extent

    def to_dict(self) -> Dict[str, Any]:
        return {"image": self.image, "extent": self.extent.to_dict()}


Catalog = Tuple[CatalogEntry, ...]


@dataclass(slots=True)
class Layer:
    """
    A static imagery layer.

    Attributes:
        id: layer identifier, used as the key of per-tile texture bindings.
        projection: CRS name shared by the declared extent and every catalog entry.
        url: location of the catalog description; must end with `catalog_name`.
        extent: declared coverage. May be given as [xmin, ymin, xmax, ymax];
            it is normalized to an Extent when the layer is preprocessed.
        catalog: None until the catalog load completes, then an immutable tuple.
        network_options: extra keyword arguments for the fetcher (timeout, headers).
    """
    id: str
    projection: str
    url: str
    extent: Optional[Union[Extent, Sequence[float]]] = None
    catalog: Optional[Catalog] = None
    network_options: Dict[str, Any] = field(default_factory=dict)
    catalog_name: str = DEFAULT_CATALOG_NAME

    @property
    def is_loaded(self) -> bool:
        return self.catalog is not None

    def to_meta(self) -> Dict[str, Any]:
        ext = self.extent.to_dict() if isinstance(self.extent, Extent) else self.extent
        return {
            "id": self.id,
            "projection": self.projection,
            "url": self.url,
            "extent": ext,
            "images": None if self.catalog is None else len(self.catalog),
        }


@dataclass(slots=True)
class TextureBinding:
    """
    What a tile currently shows for one layer.

    coord_zoom only ever moves to a finer (numerically smaller) level; source_file
    and extent are stamped together with it.
    """
    source_file: Optional[str] = None
    extent: Optional[Extent] = None
    coord_zoom: Optional[int] = None


@dataclass(slots=True)
class Tile:
    """
    A unit of rendered surface.

    Attributes:
        extent: footprint of the tile.
        level: level of detail.
        surface: active rendering surface (material); None means nothing to texture.
        bindings: per-layer texture bindings, owned by this tile.
    """
    extent: Extent
    level: int
    surface: Optional[Any] = None
    bindings: Dict[str, TextureBinding] = field(default_factory=dict)

    def binding_for(self, layer_id: str) -> TextureBinding:
        return self.bindings.setdefault(layer_id, TextureBinding())

    def __str__(self) -> str:
        return f"Tile(level={self.level}, extent={self.extent})"


@dataclass(slots=True)
class RawTexture:
    """Decoded image returned by the fetcher (H,W,3 BGR uint8, as OpenCV decodes it)."""
    image: np.ndarray
    url: str

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self.image.shape)


@dataclass(slots=True)
class ResolvedTexture:
    """
    Result of a successful resolution.

    Attributes:
        texture: the fetched image.
        extent: geographic extent of the fetched image (the selected entry).
        coords: display coordinates; same extent as `extent`.
        pitch: (origin_x, origin_y, scale) of the tile within `extent`.
        source_file: identifier of the selected image.
    """
    texture: RawTexture
    extent: Extent
    coords: Extent
    pitch: np.ndarray = field(repr=False)
    source_file: str = ""

    def to_meta(self) -> Dict[str, Any]:
        return {
            "source_file": self.source_file,
            "extent": self.extent.to_dict(),
            "pitch": [float(v) for v in self.pitch],
            "shape": list(self.texture.shape),
        }


@dataclass(frozen=True, slots=True)
class NoOpOutcome:
    """Successful empty resolution: the tile has nothing to texture."""
    reason: str = "no_surface"
