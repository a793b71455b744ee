from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Optional, Union

from common.types import Layer, NoOpOutcome, ResolvedTexture, Tile
from static_imagery.catalog import CatalogLoader, validate_layer
from static_imagery.fetcher import ImageFetcher
from static_imagery.resolver import TextureResolver
from static_imagery.selection import is_within_coverage, should_improve


Resolution = Union[ResolvedTexture, NoOpOutcome]


@dataclass
class Command:
    """Scheduled unit of work: texture `requester` (a tile) for `layer`."""
    requester: Tile
    layer: Layer


class StaticImageryProvider:
    """
    Public operations consumed by the scheduler/renderer.

    A single fetcher is shared by the catalog loader and the resolver unless
    explicit collaborators are passed.
    """

    def __init__(
        self,
        fetcher: Optional[ImageFetcher] = None,
        catalog_loader: Optional[CatalogLoader] = None,
        resolver: Optional[TextureResolver] = None,
    ):
        self.fetcher = fetcher or ImageFetcher()
        self.catalog_loader = catalog_loader or CatalogLoader(self.fetcher)
        self.resolver = resolver or TextureResolver(self.fetcher)

    def preprocess_layer(self, layer: Layer) -> Awaitable[None]:
        """
        Validate the layer now (ConfigurationError is raised at the call site,
        before any fetch) and return an awaitable that loads and attaches its catalog.
        """
        validate_layer(layer)
        return self._load_and_attach(layer)

    async def _load_and_attach(self, layer: Layer) -> None:
        layer.catalog = await self.catalog_loader.load(layer)

    def is_within_coverage(self, tile: Tile, layer: Layer) -> bool:
        return is_within_coverage(tile, layer)

    def should_improve(self, layer: Layer, tile: Tile) -> bool:
        return should_improve(layer, tile)

    def resolve_color_texture(self, tile: Tile, layer: Layer) -> Awaitable[Resolution]:
        return self.resolver.resolve(tile, layer)

    def execute(self, command: Command) -> Awaitable[Resolution]:
        return self.resolve_color_texture(command.requester, command.layer)
