from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml

from common.errors import ConfigurationError
from common.types import DEFAULT_CATALOG_NAME, Layer


DEFAULT_CONFIG_PATH = "config/params.yaml"


def _defaults() -> Dict[str, Any]:
    return {
        "logging": {"level": "INFO"},
        "fetch": {"timeout_s": 10.0},
        "layers": [],
    }


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Read the YAML config; missing file -> built-in defaults (no layers)."""
    if not Path(path).exists():
        return _defaults()
    with open(path, "r") as f:
        P = yaml.safe_load(f) or {}
    for k, v in _defaults().items():
        P.setdefault(k, v)
    return P


def layers_from_config(P: Dict[str, Any]) -> List[Layer]:
    """
    Build Layer objects from the `layers:` section.

    The fetch timeout is merged into each layer's network_options unless the
    layer sets its own. A missing extent is left for preprocessing to reject.
    """
    timeout = float(P.get("fetch", {}).get("timeout_s", 10.0))
    layers: List[Layer] = []
    seen = set()
    for i, item in enumerate(P.get("layers") or []):
        lid = item.get("id")
        url = item.get("url")
        if not lid or not url:
            raise ConfigurationError(f"layers[{i}]: 'id' and 'url' are required")
        if lid in seen:
            raise ConfigurationError(f"layers[{i}]: duplicate layer id '{lid}'")
        seen.add(lid)

        net = dict(item.get("network_options") or {})
        net.setdefault("timeout", timeout)
        layers.append(
            Layer(
                id=str(lid),
                projection=str(item.get("projection", "EPSG:4326")),
                url=str(url),
                extent=item.get("extent"),
                network_options=net,
                catalog_name=str(item.get("catalog_name", DEFAULT_CATALOG_NAME)),
            )
        )
    return layers
