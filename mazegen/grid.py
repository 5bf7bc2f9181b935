"""Grid model shared by every generation stage.

Cells are addressed ``(row, col)``, 0-indexed and row-major. The exported
artifact uses 1-indexed coordinates; ``to_external``/``to_internal`` convert
between the two. The grid also owns the BFS helpers every stage relies on so
traversal rules (4-directional moves over PASSAGE cells) live in one place.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .tiles import DIRECTIONS, PASSAGE, WALL

Coord = Tuple[int, int]


class Grid:
    __slots__ = ("width", "height", "cells")

    def __init__(self, width: int, height: int, fill: int = WALL):
        self.width = width
        self.height = height
        self.cells: List[List[int]] = [[fill for _ in range(width)] for _ in range(height)]

    @classmethod
    def from_rows(cls, rows: List[List[int]]) -> "Grid":
        grid = cls(len(rows[0]), len(rows))
        grid.cells = [list(r) for r in rows]
        return grid

    @classmethod
    def from_walls(cls, width: int, height: int, walls: Iterable[Iterable[int]]) -> "Grid":
        """Rebuild from 1-indexed wall coordinates; duplicates and out-of-range entries are ignored."""
        grid = cls(width, height, fill=PASSAGE)
        for row, col in walls:
            if 1 <= row <= height and 1 <= col <= width:
                grid.cells[row - 1][col - 1] = WALL
        return grid

    def copy(self) -> "Grid":
        return Grid.from_rows(self.cells)

    # ---------------- cell access ----------------
    def in_bounds(self, cell: Coord) -> bool:
        r, c = cell
        return 0 <= r < self.height and 0 <= c < self.width

    def is_interior(self, cell: Coord) -> bool:
        r, c = cell
        return 0 < r < self.height - 1 and 0 < c < self.width - 1

    def get(self, cell: Coord) -> int:
        return self.cells[cell[0]][cell[1]]

    def set(self, cell: Coord, value: int) -> None:
        self.cells[cell[0]][cell[1]] = value

    def is_passage(self, cell: Coord) -> bool:
        return self.in_bounds(cell) and self.cells[cell[0]][cell[1]] == PASSAGE

    def is_wall(self, cell: Coord) -> bool:
        return self.in_bounds(cell) and self.cells[cell[0]][cell[1]] == WALL

    def carve(self, cell: Coord) -> bool:
        """Make ``cell`` a passage; returns True when it was a wall."""
        r, c = cell
        if self.cells[r][c] == WALL:
            self.cells[r][c] = PASSAGE
            return True
        return False

    def fill(self, cell: Coord) -> bool:
        """Make ``cell`` a wall; returns True when it was a passage."""
        r, c = cell
        if self.cells[r][c] == PASSAGE:
            self.cells[r][c] = WALL
            return True
        return False

    def neighbors(self, cell: Coord) -> Iterator[Coord]:
        r, c = cell
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < self.height and 0 <= nc < self.width:
                yield nr, nc

    def open_neighbors(self, cell: Coord) -> int:
        return sum(1 for n in self.neighbors(cell) if self.cells[n[0]][n[1]] == PASSAGE)

    def wall_neighbors(self, cell: Coord) -> int:
        """Adjacent walls, counting out-of-bounds sides as walls."""
        return 4 - self.open_neighbors(cell)

    def passages(self, interior_only: bool = False) -> List[Coord]:
        lo = 1 if interior_only else 0
        return [
            (r, c)
            for r in range(lo, self.height - lo)
            for c in range(lo, self.width - lo)
            if self.cells[r][c] == PASSAGE
        ]

    def open_count(self) -> int:
        return sum(row.count(PASSAGE) for row in self.cells)

    def walls(self) -> List[Coord]:
        return [(r, c) for r in range(self.height) for c in range(self.width) if self.cells[r][c] == WALL]

    def seal_border(self) -> None:
        for r in range(self.height):
            self.cells[r][0] = WALL
            self.cells[r][self.width - 1] = WALL
        for c in range(self.width):
            self.cells[0][c] = WALL
            self.cells[self.height - 1][c] = WALL

    # ---------------- coordinates ----------------
    @staticmethod
    def to_external(cell: Coord) -> Coord:
        return cell[0] + 1, cell[1] + 1

    @staticmethod
    def to_internal(cell: Iterable[int]) -> Coord:
        r, c = cell
        return r - 1, c - 1

    # ---------------- traversal ----------------
    def distances_from(self, source: Coord) -> Dict[Coord, int]:
        """Single-source BFS distances to every passage reachable from ``source``."""
        if not self.is_passage(source):
            return {}
        dist = {source: 0}
        q = deque([source])
        cells = self.cells
        h, w = self.height, self.width
        while q:
            cur = q.popleft()
            r, c = cur
            d = dist[cur] + 1
            for dr, dc in DIRECTIONS:
                nr, nc = r + dr, c + dc
                if 0 <= nr < h and 0 <= nc < w and cells[nr][nc] == PASSAGE and (nr, nc) not in dist:
                    dist[(nr, nc)] = d
                    q.append((nr, nc))
        return dist

    def reachable_from(self, source: Coord) -> Set[Coord]:
        return set(self.distances_from(source))

    def path_length(self, a: Coord, b: Coord) -> Optional[int]:
        """Shortest path length in steps, or None when ``b`` is unreachable from ``a``."""
        path = self.shortest_path(a, b)
        return len(path) - 1 if path else None

    def shortest_path(self, a: Coord, b: Coord) -> List[Coord]:
        if not (self.is_passage(a) and self.is_passage(b)):
            return []
        parent: Dict[Coord, Optional[Coord]] = {a: None}
        q = deque([a])
        while q:
            cur = q.popleft()
            if cur == b:
                break
            for n in self.neighbors(cur):
                if n not in parent and self.cells[n[0]][n[1]] == PASSAGE:
                    parent[n] = cur
                    q.append(n)
        if b not in parent:
            return []
        path: List[Coord] = []
        node: Optional[Coord] = b
        while node is not None:
            path.append(node)
            node = parent[node]
        path.reverse()
        return path

    def render(self, start: Optional[Coord] = None, end: Optional[Coord] = None) -> str:
        """Plain text dump for assertion messages and debugging."""
        out = []
        for r in range(self.height):
            line = []
            for c in range(self.width):
                if (r, c) == start:
                    line.append("S")
                elif (r, c) == end:
                    line.append("E")
                else:
                    line.append("#" if self.cells[r][c] == WALL else ".")
            out.append("".join(line))
        return "\n".join(out)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, open={self.open_count()})"


__all__ = ["Grid", "Coord"]
