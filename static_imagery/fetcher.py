from __future__ import annotations

"""
Fetch/decode collaborator for the static imagery provider.

Two targets are supported:
- http(s) URLs, fetched with a shared requests.Session
- file:// URLs and plain filesystem paths, read from disk (offline catalogs)

Blocking I/O runs in a worker thread (asyncio.to_thread) so many resolutions can
be in flight on one event loop. Failures raise RuntimeError; there is no retry.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlparse

import cv2
import numpy as np
import requests

from common.logging_setup import get_logger
from common.types import RawTexture


log = get_logger(__name__)

DEFAULT_TIMEOUT_S = 10.0


def _is_remote(url: str) -> bool:
    return urlparse(url).scheme in ("http", "https")


def _local_path(url: str) -> Path:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(url)


def decode_image(data: bytes, url: str = "") -> np.ndarray:
    """Decode PNG/JPEG bytes to a BGR uint8 array."""
    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR) if arr.size else None
    if img is None:
        raise RuntimeError(f"Failed to decode image from {url or '<bytes>'}")
    return img


class ImageFetcher:
    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT_S):
        """
        Params:
            session: optional requests.Session for connection reuse
            timeout: default per-request timeout (seconds); overridable via network_options
        """
        self.session = session or requests.Session()
        self.timeout = float(timeout)

    # ----------------------------
    # Public API (async)
    # ----------------------------
    async def fetch_json(self, url: str, network_options: Optional[Dict[str, Any]] = None) -> Any:
        data = await asyncio.to_thread(self.read_bytes, url, network_options)
        try:
            return json.loads(data)
        except ValueError as e:
            raise RuntimeError(f"Invalid JSON at {url}: {e}") from e

    async def fetch_texture(self, url: str, network_options: Optional[Dict[str, Any]] = None) -> RawTexture:
        data = await asyncio.to_thread(self.read_bytes, url, network_options)
        image = decode_image(data, url)
        log.debug("Texture decoded", extra={"extra": {"url": url, "shape": list(image.shape)}})
        return RawTexture(image=image, url=url)

    # ----------------------------
    # Blocking I/O
    # ----------------------------
    def read_bytes(self, url: str, network_options: Optional[Dict[str, Any]] = None) -> bytes:
        if not _is_remote(url):
            path = _local_path(url)
            if not path.is_file():
                raise RuntimeError(f"File not found: {path}")
            return path.read_bytes()

        opts = dict(network_options or {})
        opts.setdefault("timeout", self.timeout)
        r = self.session.get(url, **opts)
        if r.status_code != 200:
            log.warning("Fetch failed", extra={"extra": {"url": url, "status": r.status_code}})
            raise RuntimeError(f"Fetch error {r.status_code} for {url}: {r.text[:200]}")
        return r.content
