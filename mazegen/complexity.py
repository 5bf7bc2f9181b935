"""Structural complexity for hedge mazes.

Stages run in a fixed order and each is followed by a connectivity repair
rooted at ``start``, so any stage may wall off passages without breaking
solvability. ``start`` and ``end`` are never walled.
"""
from __future__ import annotations

import random
from typing import Any, Callable, Dict, List, Optional, Tuple

from .connectivity import repair
from .grid import Coord, Grid
from .logging_utils import get_logger
from .metrics import bump
from .tiles import DIRECTIONS

log = get_logger("mazegen.complexity")

StageFn = Callable[[Grid, random.Random, Coord, Coord], int]


def size_factor(grid: Grid, floor: float = 0.0) -> float:
    return max(min(1.0, 15 / max(grid.width, grid.height)), floor)


def _random_cell(grid: Grid, rng: random.Random, margin: int = 1) -> Coord:
    # margin=2 keeps a full neighbourhood inside the border
    span_r = max(1, grid.height - 2 * margin)
    span_c = max(1, grid.width - 2 * margin)
    return margin + rng.randrange(span_r), margin + rng.randrange(span_c)


def add_dead_ends(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    added = 0
    for _ in range(int(grid.width * grid.height * 0.08 * size_factor(grid, 0.4))):
        cell = _random_cell(grid, rng)
        if cell in (start, end) or not grid.is_passage(cell):
            continue
        if grid.open_neighbors(cell) >= 3:
            grid.fill(cell)
            added += 1
    return added


def add_path_obstacles(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Wall junction cells jittered along the straight line from start to end."""
    added = 0
    for _ in range(int(max(grid.width, grid.height) * 0.3)):
        t = rng.random()
        r = int(start[0] + t * (end[0] - start[0])) + rng.randint(-1, 1)
        c = int(start[1] + t * (end[1] - start[1])) + rng.randint(-1, 1)
        cell = (r, c)
        if not grid.is_interior(cell) or cell in (start, end) or not grid.is_passage(cell):
            continue
        if grid.open_neighbors(cell) >= 3:
            grid.fill(cell)
            added += 1
    return added


def add_loops(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    added = 0
    for _ in range(int(grid.width * grid.height * 0.02 * size_factor(grid, 0.4))):
        cell = _random_cell(grid, rng)
        if grid.is_wall(cell) and grid.open_neighbors(cell) >= 2:
            grid.carve(cell)
            added += 1
    return added


def add_hedge_islands(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    added = 0
    for _ in range(int(grid.width * grid.height * 0.03 * size_factor(grid, 0.4))):
        cell = _random_cell(grid, rng, margin=2)
        if cell in (start, end) or not grid.is_passage(cell) or grid.open_neighbors(cell) < 3:
            continue
        grid.fill(cell)
        added += 1
        if rng.random() < 0.3:
            dr, dc = rng.choice(DIRECTIONS)
            ext = (cell[0] + dr, cell[1] + dc)
            if grid.is_interior(ext) and ext not in (start, end) and grid.is_passage(ext):
                grid.fill(ext)
    return added


def _break_run(grid: Grid, line: List[Coord], inward: Coord, limit: int, keep: Tuple[Coord, Coord]) -> int:
    broken = 0
    run_start = None
    for i, cell in enumerate(line):
        if not grid.is_passage(cell):
            run_start = None
            continue
        if run_start is None:
            run_start = i
        elif i - run_start >= limit:
            mid = line[run_start + (i - run_start) // 2]
            if mid not in keep:
                grid.fill(mid)
                side = (mid[0] + inward[0], mid[1] + inward[1])
                if grid.is_interior(side):
                    grid.carve(side)
                broken += 1
            run_start = i
    return broken


def break_edge_runs(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Split long straight passages hugging the border with a wall and an inward stub."""
    h, w = grid.height, grid.width
    limit = max(3, min(w, h) // 5)
    keep = (start, end)
    broken = 0
    broken += _break_run(grid, [(1, c) for c in range(1, w - 1)], (1, 0), limit, keep)
    broken += _break_run(grid, [(h - 2, c) for c in range(1, w - 1)], (-1, 0), limit, keep)
    broken += _break_run(grid, [(r, 1) for r in range(1, h - 1)], (0, 1), limit, keep)
    broken += _break_run(grid, [(r, w - 2) for r in range(1, h - 1)], (0, -1), limit, keep)
    return broken


def add_hedge_branches(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    added = 0
    for _ in range(int(grid.width * grid.height * 0.03 * size_factor(grid))):
        cell = _random_cell(grid, rng, margin=2)
        if not grid.is_passage(cell) or grid.wall_neighbors(cell) < 2:
            continue
        dr, dc = rng.choice(DIRECTIONS)
        side = (cell[0] + dr, cell[1] + dc)
        if grid.is_interior(side) and side not in (start, end) and grid.fill(side):
            added += 1
    return added


def break_open_areas(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Wall one random cell of every fully open 2x2 block."""
    broken = 0
    for r in range(1, grid.height - 2):
        for c in range(1, grid.width - 2):
            block = [(r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1)]
            if not all(grid.is_passage(b) for b in block):
                continue
            choices = [b for b in block if b not in (start, end)]
            grid.fill(rng.choice(choices))
            broken += 1
    return broken


STAGES: Tuple[Tuple[str, StageFn, str], ...] = (
    ("dead_ends", add_dead_ends, "dead_ends_added"),
    ("path_obstacles", add_path_obstacles, "path_obstacles_added"),
    ("loops", add_loops, "loops_added"),
    ("hedge_islands", add_hedge_islands, "hedge_islands_added"),
    ("edge_runs", break_edge_runs, "edge_runs_broken"),
    ("hedge_branches", add_hedge_branches, "hedge_branches_added"),
    ("open_areas", break_open_areas, "open_areas_broken"),
)


def inject_complexity(
    grid: Grid,
    rng: random.Random,
    start: Coord,
    end: Coord,
    metrics: Optional[Dict[str, Any]] = None,
) -> Dict[str, int]:
    """Run every stage in order, repairing connectivity after each.

    Returns the per-stage feature counts.
    """
    counts: Dict[str, int] = {}
    for name, stage, metric_key in STAGES:
        counts[name] = stage(grid, rng, start, end)
        bump(metrics, metric_key, counts[name])
        carved = repair(grid, start, metrics)
        if carved:
            log.debug(event="stage_repair", stage=name, carved=carved)
    return counts


__all__ = [
    "inject_complexity",
    "STAGES",
    "size_factor",
    "add_dead_ends",
    "add_path_obstacles",
    "add_loops",
    "add_hedge_islands",
    "break_edge_runs",
    "add_hedge_branches",
    "break_open_areas",
]
