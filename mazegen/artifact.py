"""Maze artifact: the immutable output of a generation run.

JSON shape::

    {"width": W, "height": H, "start": [r, c], "end": [r, c], "walls": [[r, c], ...]}

All coordinates are 1-indexed ``(row, col)``. Readers tolerate duplicate
wall entries. ``validate_path`` checks a submitted solution against an
artifact the same way a competition judge would.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .errors import ArtifactError
from .grid import Coord, Grid


@dataclass(frozen=True)
class MazeArtifact:
    width: int
    height: int
    start: Coord
    end: Coord
    walls: Tuple[Coord, ...]
    metrics: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_grid(cls, grid: Grid, start: Coord, end: Coord, metrics: Optional[Dict[str, Any]] = None) -> "MazeArtifact":
        """Snapshot ``grid`` with 0-indexed ``start``/``end``."""
        return cls(
            width=grid.width,
            height=grid.height,
            start=Grid.to_external(start),
            end=Grid.to_external(end),
            walls=tuple(Grid.to_external(w) for w in grid.walls()),
            metrics=metrics,
        )

    def to_grid(self) -> Grid:
        return Grid.from_walls(self.width, self.height, self.walls)

    def wall_set(self) -> FrozenSet[Coord]:
        return frozenset(self.walls)

    @property
    def open_cells(self) -> int:
        return self.width * self.height - len(self.wall_set())

    def validate(self) -> None:
        """Raise ArtifactError when start/end are out of bounds, on a wall, or equal."""
        walls = self.wall_set()
        for name, (r, c) in (("start", self.start), ("end", self.end)):
            if not (1 <= r <= self.height and 1 <= c <= self.width):
                raise ArtifactError(name, f"({r}, {c}) is outside the {self.width}x{self.height} maze")
            if (r, c) in walls:
                raise ArtifactError(name, f"({r}, {c}) is a wall")
        if self.start == self.end:
            raise ArtifactError("end", "start and end are the same cell")

    # ---------------- JSON codec ----------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "start": list(self.start),
            "end": list(self.end),
            "walls": [list(w) for w in self.walls],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MazeArtifact":
        if not isinstance(data, dict):
            raise ArtifactError("artifact", "expected a JSON object")
        for key in ("width", "height", "start", "end", "walls"):
            if key not in data:
                raise ArtifactError(key, "missing")
        width = _as_int("width", data["width"])
        height = _as_int("height", data["height"])
        if width < 1 or height < 1:
            raise ArtifactError("width" if width < 1 else "height", "must be positive")
        if not isinstance(data["walls"], list):
            raise ArtifactError("walls", "expected a list of [row, col] pairs")
        artifact = cls(
            width=width,
            height=height,
            start=_as_coord("start", data["start"]),
            end=_as_coord("end", data["end"]),
            walls=tuple(_as_coord("walls", w) for w in data["walls"]),
        )
        artifact.validate()
        return artifact

    @classmethod
    def from_json(cls, text: str) -> "MazeArtifact":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ArtifactError("artifact", f"invalid JSON: {exc.msg}") from exc
        return cls.from_dict(data)


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArtifactError(name, f"expected an integer, got {value!r}")
    return value


def _as_coord(name: str, value: Any) -> Coord:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ArtifactError(name, f"expected [row, col], got {value!r}")
    return _as_int(name, value[0]), _as_int(name, value[1])


@dataclass
class PathCheck:
    valid: bool
    error: Optional[str] = None
    invalid_step: Optional[Coord] = None


def validate_path(artifact: MazeArtifact, path: Sequence[Iterable[int]]) -> PathCheck:
    """Check a 1-indexed solution path: starts at start, ends at end, unit steps through open cells."""
    steps: List[Coord] = [tuple(p) for p in path]  # type: ignore[misc]
    if not steps:
        return PathCheck(False, "Path is empty")
    if steps[0] != tuple(artifact.start):
        return PathCheck(False, "Path does not start at the maze start point", steps[0])
    if steps[-1] != tuple(artifact.end):
        return PathCheck(False, "Path does not end at the maze end point", steps[-1])
    walls = artifact.wall_set()
    for cur, nxt in zip(steps, steps[1:]):
        if nxt in walls:
            return PathCheck(False, "Path goes through a wall", nxt)
        if abs(cur[0] - nxt[0]) + abs(cur[1] - nxt[1]) != 1:
            return PathCheck(False, "Invalid move: steps must be to adjacent cells (not diagonal)", nxt)
        if not (1 <= nxt[0] <= artifact.height and 1 <= nxt[1] <= artifact.width):
            return PathCheck(False, "Path goes outside maze boundaries", nxt)
    return PathCheck(True)


__all__ = ["MazeArtifact", "PathCheck", "validate_path"]
