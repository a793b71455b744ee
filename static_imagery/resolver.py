from __future__ import annotations

from typing import Optional, Union

from common.errors import CoverageError, SelectionError
from common.logging_setup import get_logger
from common.types import Layer, NoOpOutcome, ResolvedTexture, Tile
from static_imagery.catalog import image_url
from static_imagery.fetcher import ImageFetcher
from static_imagery.selection import is_within_coverage, select_best_image


log = get_logger(__name__)


class TextureResolver:
    """
    Turns a (tile, layer) pair into a placed texture.

    The layer's catalog must be loaded before resolve() is called for it; this
    is a caller precondition, nothing here waits for a pending load, and an
    unloaded layer is a SelectionError. Each call
    mutates only `tile.bindings[layer.id]`.
    """

    def __init__(self, fetcher: Optional[ImageFetcher] = None):
        self.fetcher = fetcher or ImageFetcher()

    async def resolve(self, tile: Tile, layer: Layer) -> Union[ResolvedTexture, NoOpOutcome]:
        if layer.catalog is None:
            raise SelectionError("no catalog")

        if not is_within_coverage(tile, layer):
            log.debug("Tile outside layer coverage", extra={"extra": {"layer": layer.id, "tile": str(tile)}})
            raise CoverageError(f"Tile '{tile}' is outside layer bbox {layer.extent}")

        if tile.surface is None:
            return NoOpOutcome()

        selection = select_best_image(layer.catalog, tile.extent)
        if selection is None:
            raise SelectionError("no covering image")
        log.debug(
            "Image selected",
            extra={"extra": {"layer": layer.id, "image": selection.image, "level": tile.level}},
        )

        texture = await self.fetcher.fetch_texture(image_url(layer, selection.image), layer.network_options)

        binding = tile.binding_for(layer.id)
        if binding.coord_zoom is None or binding.coord_zoom > tile.level:
            binding.extent = selection.extent
            binding.coord_zoom = tile.level
            binding.source_file = selection.image
            log.debug(
                "Binding refined",
                extra={"extra": {"layer": layer.id, "image": selection.image, "zoom": tile.level}},
            )

        # TODO: separate x/y scale for tiles whose aspect ratio differs from the image
        pitch = tile.extent.offset_to_parent(selection.extent)

        return ResolvedTexture(
            texture=texture,
            extent=selection.extent,
            coords=selection.extent,
            pitch=pitch,
            source_file=selection.image,
        )
