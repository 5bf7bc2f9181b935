"""Structural diagnostics for a finished maze artifact.

Used by ``scripts/diagnose_seeds.py`` and handy in tests when a seed
misbehaves. Nothing here mutates the artifact.
"""
from __future__ import annotations

from typing import Any, Dict

from .artifact import MazeArtifact
from .errors import ArtifactError
from .placement import is_separated, min_path_length


def analyze(artifact: MazeArtifact) -> Dict[str, Any]:
    grid = artifact.to_grid()
    start = grid.to_internal(artifact.start)
    end = grid.to_internal(artifact.end)
    try:
        artifact.validate()
        endpoint_error = None
    except ArtifactError as exc:
        endpoint_error = str(exc)
    reachable = grid.reachable_from(start) if grid.is_passage(start) else set()
    unreachable = [grid.to_external(c) for c in grid.passages() if c not in reachable]
    open_blocks = [
        (r + 1, c + 1)
        for r in range(grid.height - 1)
        for c in range(grid.width - 1)
        if all(grid.is_passage(b) for b in ((r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1)))
    ]
    path_length = grid.path_length(start, end) if endpoint_error is None else None
    return {
        "endpoint_error": endpoint_error,
        "unreachable_cells": unreachable,
        "path_length": path_length,
        "min_path_length": min_path_length(grid),
        "separated": is_separated(grid, start, end),
        "open_2x2_blocks": open_blocks,
        "open_cells": grid.open_count(),
    }
