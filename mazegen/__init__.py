"""Public maze generation package interface."""

from .artifact import MazeArtifact, PathCheck, validate_path  # noqa: F401
from .config import MazeConfig, PlacementWeights, VARIANTS  # noqa: F401
from .errors import (  # noqa: F401
    ArtifactError,
    ConnectivityError,
    DimensionError,
    GenerationError,
    MazeError,
)
from .grid import Grid  # noqa: F401
from .pipeline import MazePipeline, generate_maze  # noqa: F401
from .tiles import PASSAGE, WALL  # noqa: F401

__all__ = [
    "MazeArtifact",
    "PathCheck",
    "validate_path",
    "MazeConfig",
    "PlacementWeights",
    "VARIANTS",
    "MazeError",
    "DimensionError",
    "ConnectivityError",
    "GenerationError",
    "ArtifactError",
    "Grid",
    "MazePipeline",
    "generate_maze",
    "PASSAGE",
    "WALL",
]
