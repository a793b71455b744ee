from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    COVERAGE = "coverage"
    SELECTION = "selection"


class ProviderError(Exception):
    """
    Single tagged error type raised by the static imagery provider.

    Callers may branch on `kind` instead of the subclass; both carry the same
    information. `to_dict()` gives the payload used by the HTTP service.
    """
    kind: ErrorKind = ErrorKind.SELECTION

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind.value, "detail": self.message}


class ConfigurationError(ProviderError):
    """Layer setup is invalid (e.g. missing extent). Fatal for that layer."""
    kind = ErrorKind.CONFIGURATION


class CoverageError(ProviderError):
    """Tile lies outside every catalog entry of the layer."""
    kind = ErrorKind.COVERAGE


class SelectionError(ProviderError):
    """No catalog loaded, or no entry covers the tile."""
    kind = ErrorKind.SELECTION
