"""
Static Imagery Provider

Textures tiles from a fixed catalog of geo-referenced images:
- Loads `metadata.json`-style catalogs ({image: [xmin, ymin, xmax, ymax]})
- Picks the smallest cataloged image fully covering a tile
- Fetches/decodes it and computes the tile's placement (pitch) inside it
- Optional HTTP service in server.py (/coverage, /best, /texture)

Usage:
    from static_imagery import StaticImageryProvider, Command
    provider = StaticImageryProvider()
    await provider.preprocess_layer(layer)
    result = await provider.resolve_color_texture(tile, layer)
"""
from .provider import Command, StaticImageryProvider
from .selection import is_within_coverage, select_best_image, should_improve

__all__ = [
    "Command",
    "StaticImageryProvider",
    "is_within_coverage",
    "select_best_image",
    "should_improve",
]
