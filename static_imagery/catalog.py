from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from common.errors import ConfigurationError
from common.geo import Extent
from common.logging_setup import get_logger
from common.types import Catalog, CatalogEntry, Layer
from static_imagery.fetcher import ImageFetcher


log = get_logger(__name__)


def validate_layer(layer: Layer) -> None:
    """
    Check what must hold before any network access, and normalize the declared extent.

    Raises ConfigurationError if the extent is missing or malformed, or if the
    layer URL does not end with the catalog file name (image URLs are derived
    by replacing that suffix).
    """
    if layer.extent is None:
        raise ConfigurationError(f"layer '{layer.id}': extent is required")
    if not isinstance(layer.extent, Extent):
        try:
            layer.extent = Extent.from_bounds(layer.projection, layer.extent)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"layer '{layer.id}': invalid extent {layer.extent!r}: {e}") from e
    elif layer.extent.crs != layer.projection:
        raise ConfigurationError(
            f"layer '{layer.id}': extent CRS {layer.extent.crs} differs from projection {layer.projection}"
        )
    if not layer.url.endswith(layer.catalog_name):
        raise ConfigurationError(f"layer '{layer.id}': url must end with '{layer.catalog_name}' (got {layer.url})")


def catalog_from_metadata(metadata: Mapping[str, Any], projection: str) -> Catalog:
    """
    Build a catalog from a description {image: [xmin, ymin, xmax, ymax]}.
    Entries keep the description's order.
    """
    if not isinstance(metadata, Mapping):
        raise ConfigurationError(f"catalog description must be an object, got {type(metadata).__name__}")
    entries: List[CatalogEntry] = []
    for image, bounds in metadata.items():
        try:
            extent = Extent.from_bounds(projection, bounds)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"catalog entry '{image}': invalid bounds {bounds!r}: {e}") from e
        if extent.width == 0 or extent.height == 0:
            raise ConfigurationError(f"catalog entry '{image}': degenerate bounds {bounds!r}")
        entries.append(CatalogEntry(image=str(image), extent=extent))
    return tuple(entries)


def image_url(layer: Layer, image: str) -> str:
    """URL of a cataloged image: the layer URL with its catalog file name replaced."""
    return layer.url[: len(layer.url) - len(layer.catalog_name)] + image


class CatalogLoader:
    """
    One-shot loader: fetches a layer's catalog description and builds the catalog.
    Re-loading a layer that is already loaded is not supported.
    """

    def __init__(self, fetcher: Optional[ImageFetcher] = None):
        self.fetcher = fetcher or ImageFetcher()

    async def load(self, layer: Layer) -> Catalog:
        validate_layer(layer)
        metadata: Dict[str, Any] = await self.fetcher.fetch_json(layer.url, layer.network_options)
        catalog = catalog_from_metadata(metadata, layer.projection)
        log.info("Catalog loaded", extra={"extra": {"layer": layer.id, "images": len(catalog)}})
        return catalog
