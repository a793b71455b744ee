from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from typing import Dict, Optional

import cv2
import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from common.errors import ProviderError
from common.geo import Extent, parse_bbox
from common.logging_setup import get_logger, setup_logging
from common.types import Layer, NoOpOutcome, Tile
from static_imagery.config import layers_from_config, load_config
from static_imagery.fetcher import ImageFetcher
from static_imagery.provider import StaticImageryProvider
from static_imagery.selection import select_best_image


log = get_logger("static_imagery.server")


def _tile_from_query(layer: Layer, bbox: str, level: int) -> Tile:
    try:
        extent = Extent.from_bounds(layer.projection, parse_bbox(bbox))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"invalid bbox: {e}")
    # HTTP callers always have a surface to texture
    return Tile(extent=extent, level=int(level), surface="http")


async def _preprocess_all(provider: StaticImageryProvider, layers: Dict[str, Layer]) -> None:
    async def one(layer: Layer) -> None:
        try:
            await provider.preprocess_layer(layer)
        except Exception:
            log.exception("Layer setup failed", extra={"extra": {"layer": layer.id}})

    await asyncio.gather(*(one(l) for l in layers.values()))


def create_app(P: Optional[Dict] = None, provider: Optional[StaticImageryProvider] = None) -> FastAPI:
    P = P if P is not None else load_config()
    setup_logging(P.get("logging", {}).get("level"), force=True)

    if provider is None:
        provider = StaticImageryProvider(ImageFetcher(timeout=float(P.get("fetch", {}).get("timeout_s", 10.0))))
    layers: Dict[str, Layer] = {l.id: l for l in layers_from_config(P)}

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await _preprocess_all(provider, layers)
        yield

    app = FastAPI(title="Static Imagery API", version="1.0.0", lifespan=lifespan)
    app.state.provider = provider
    app.state.layers = layers

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _layer(layer_id: str) -> Layer:
        layer = layers.get(layer_id)
        if layer is None:
            raise HTTPException(status_code=404, detail="unknown_layer")
        return layer

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "layers": {lid: (None if l.catalog is None else len(l.catalog)) for lid, l in layers.items()},
        }

    @app.get("/layers")
    def list_layers():
        return {"layers": [l.to_meta() for l in layers.values()]}

    @app.get("/coverage")
    def coverage(layer: str = Query(...), bbox: str = Query(...)):
        lyr = _layer(layer)
        tile = _tile_from_query(lyr, bbox, 0)
        return {"layer": lyr.id, "within": provider.is_within_coverage(tile, lyr)}

    @app.get("/best")
    def best(layer: str = Query(...), bbox: str = Query(...)):
        lyr = _layer(layer)
        tile = _tile_from_query(lyr, bbox, 0)
        entry = select_best_image(lyr.catalog or (), tile.extent)
        if entry is None:
            raise HTTPException(status_code=404, detail="no_image")
        return {"layer": lyr.id, **entry.to_dict()}

    @app.get("/texture")
    async def texture(layer: str = Query(...), bbox: str = Query(...), level: int = Query(0)):
        """
        Return the resolved image as PNG with its placement in headers:
          X-Texture-Source (image id), X-Texture-Extent (JSON), X-Texture-Pitch (JSON)
        """
        lyr = _layer(layer)
        tile = _tile_from_query(lyr, bbox, level)
        try:
            result = await provider.resolve_color_texture(tile, lyr)
        except ProviderError as e:
            return JSONResponse(e.to_dict(), status_code=404)
        except RuntimeError as e:
            return JSONResponse({"error": "fetch_failed", "detail": str(e)}, status_code=502)
        if isinstance(result, NoOpOutcome):
            return Response(status_code=204)

        ok, png = cv2.imencode(".png", result.texture.image)
        if not ok:
            return JSONResponse({"error": "encode_failed"}, status_code=500)
        headers = {
            "X-Texture-Source": result.source_file,
            "X-Texture-Extent": json.dumps(result.extent.to_dict()),
            "X-Texture-Pitch": json.dumps([float(v) for v in result.pitch]),
            "Cache-Control": "public, max-age=60",
        }
        return Response(content=png.tobytes(), media_type="image/png", headers=headers)

    return app


app = create_app()


# -------- local dev entrypoint --------
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
