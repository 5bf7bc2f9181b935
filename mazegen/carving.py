"""Base carving: perfect-maze skeletons over the odd-coordinate lattice.

Both strategies treat cells with odd row and odd column strictly inside the
border as lattice nodes and carve the wall cell between two nodes when
joining them, so corridors are one cell wide. The result is a spanning tree
over the lattice: exactly one path joins any two passage cells.

The remaining helpers shape the skeleton for specific maze variants and
deliberately break the perfect-maze property; connectivity repair runs after
them.
"""
from __future__ import annotations

import math
import random
from typing import Callable, Dict, List, Tuple

from .grid import Coord, Grid
from .tiles import DIRECTIONS, WALL

_STEPS = tuple((dr * 2, dc * 2) for dr, dc in DIRECTIONS)


def _lattice_node(grid: Grid, cell: Coord) -> bool:
    r, c = cell
    return r % 2 == 1 and c % 2 == 1 and 0 < r < grid.height - 1 and 0 < c < grid.width - 1


def _random_node(grid: Grid, rng: random.Random) -> Coord:
    rows = (grid.height - 1) // 2
    cols = (grid.width - 1) // 2
    return 1 + 2 * rng.randrange(rows), 1 + 2 * rng.randrange(cols)


def carve_dfs(grid: Grid, rng: random.Random) -> int:
    """Randomized depth-first carving with an explicit stack.

    Returns the number of lattice nodes visited.
    """
    start = _random_node(grid, rng)
    visited = {start}
    grid.carve(start)
    stack: List[Coord] = [start]
    while stack:
        r, c = stack[-1]
        steps = list(_STEPS)
        rng.shuffle(steps)
        for dr, dc in steps:
            nxt = (r + dr, c + dc)
            if nxt in visited or not _lattice_node(grid, nxt):
                continue
            grid.carve((r + dr // 2, c + dc // 2))
            grid.carve(nxt)
            visited.add(nxt)
            stack.append(nxt)
            break
        else:
            stack.pop()
    return len(visited)


def carve_prim(grid: Grid, rng: random.Random) -> int:
    """Randomized Prim's carving from a frontier list of walls.

    Each frontier entry is ``(wall, beyond)``; popping one at random carves
    through when ``beyond`` has not joined the tree yet.
    """
    start = _random_node(grid, rng)
    grid.carve(start)
    in_tree = {start}
    frontier: List[Tuple[Coord, Coord]] = []

    def push_walls(node: Coord) -> None:
        r, c = node
        for dr, dc in _STEPS:
            beyond = (r + dr, c + dc)
            if _lattice_node(grid, beyond) and beyond not in in_tree:
                frontier.append(((r + dr // 2, c + dc // 2), beyond))

    push_walls(start)
    while frontier:
        idx = rng.randrange(len(frontier))
        # swap-pop keeps removal O(1); order in the list carries no meaning
        frontier[idx], frontier[-1] = frontier[-1], frontier[idx]
        wall, beyond = frontier.pop()
        if beyond in in_tree:
            continue
        grid.carve(wall)
        grid.carve(beyond)
        in_tree.add(beyond)
        push_walls(beyond)
    return len(in_tree)


CARVERS: Dict[str, Callable[[Grid, random.Random], int]] = {
    "dfs": carve_dfs,
    "prim": carve_prim,
}


def open_borders(grid: Grid, rng: random.Random) -> int:
    """Punch two-cell stubs through the outer border on random sides."""
    w, h = grid.width, grid.height
    openings = max(4, int(math.sqrt(max(w, h))))
    for _ in range(openings):
        side = rng.randrange(4)
        if side == 0:
            x = 1 + rng.randrange(w - 2)
            grid.carve((0, x)); grid.carve((1, x))
        elif side == 1:
            y = 1 + rng.randrange(h - 2)
            grid.carve((y, w - 1)); grid.carve((y, w - 2))
        elif side == 2:
            x = 1 + rng.randrange(w - 2)
            grid.carve((h - 1, x)); grid.carve((h - 2, x))
        else:
            y = 1 + rng.randrange(h - 2)
            grid.carve((y, 0)); grid.carve((y, 1))
    return openings


def add_random_openings(grid: Grid, rng: random.Random, ratio: float = 0.05) -> int:
    """Carve random interior cells so the skeleton is no longer a tree."""
    carved = 0
    for _ in range(int(grid.width * grid.height * ratio)):
        cell = (1 + rng.randrange(grid.height - 2), 1 + rng.randrange(grid.width - 2))
        carved += grid.carve(cell)
    return carved


def add_open_area(grid: Grid, rng: random.Random) -> int:
    """Open a mostly empty square in the middle, then scatter a few walls back."""
    cy, cx = grid.height // 2, grid.width // 2
    radius = int(min(grid.width, grid.height) * 0.15)
    area = [
        (y, x)
        for y in range(cy - radius, cy + radius + 1)
        for x in range(cx - radius, cx + radius + 1)
        if grid.is_interior((y, x))
    ]
    carved = 0
    for cell in area:
        if rng.random() < 0.8:
            carved += grid.carve(cell)
    for cell in area:
        if grid.get(cell) != WALL and rng.random() < 0.15:
            grid.fill(cell)
    return carved


__all__ = ["carve_dfs", "carve_prim", "CARVERS", "open_borders", "add_random_openings", "add_open_area"]
