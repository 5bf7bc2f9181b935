"""Exception taxonomy for maze generation.

Dimension problems are rejected up front, connectivity problems that repair
cannot handle fail loudly, and exhausting the retry budget surfaces a
``GenerationError`` carrying the last diagnostics.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class MazeError(Exception):
    """Base class for all maze generation errors."""


class DimensionError(MazeError, ValueError):
    def __init__(self, width: int, height: int, minimum: int):
        super().__init__(f"maze must be at least {minimum}x{minimum}, got {width}x{height}")
        self.width = width
        self.height = height
        self.minimum = minimum


class ConnectivityError(MazeError):
    """Raised when the reference cell for a flood fill is not a passage."""

    def __init__(self, reference, message: str):
        super().__init__(message)
        self.reference = reference


class GenerationError(MazeError):
    def __init__(self, message: str, attempts: int, diagnostics: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.attempts = attempts
        self.diagnostics = diagnostics or {}


class ArtifactError(MazeError, ValueError):
    """Raised by consumers when a maze artifact breaks its invariants."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


__all__ = ["MazeError", "DimensionError", "ConnectivityError", "GenerationError", "ArtifactError"]
