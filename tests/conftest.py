"""
Shared fixtures for the static imagery tests.
"""

import os
import sys
from typing import Any, Dict

import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(project_root)

from common.types import Layer
from tests.fakes import CRS, FakeFetcher


@pytest.fixture
def scenario_metadata() -> Dict[str, Any]:
    return {"img1": [0, 0, 10, 10], "img2": [2, 2, 4, 4]}


@pytest.fixture
def fake_fetcher(scenario_metadata) -> FakeFetcher:
    return FakeFetcher(scenario_metadata)


@pytest.fixture
def layer() -> Layer:
    return Layer(
        id="ortho",
        projection=CRS,
        url="https://example.test/imagery/metadata.json",
        extent=[0, 0, 10, 10],
    )
