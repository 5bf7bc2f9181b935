"""Adversarial structures that slow heuristic search without breaking solvability.

Each generator takes ``(grid, rng, start, end)`` and returns how many
features it added. Carving and walling are confined to the interior, and
``start``/``end`` are never walled. Generators reconnect what they build
where it matters; the pipeline still runs a full repair after each one.
"""
from __future__ import annotations

import math
import random
from collections import deque
from typing import List, Optional, Tuple

from .connectivity import carve_corridor, connect_to_main
from .grid import Coord, Grid
from .tiles import DIRECTIONS


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def _open(grid: Grid, cell: Coord) -> bool:
    if grid.is_interior(cell):
        grid.carve(cell)
        return True
    return False


def _wall(grid: Grid, cell: Coord, start: Coord, end: Coord) -> None:
    if grid.is_interior(cell) and cell not in (start, end):
        grid.fill(cell)


def _lerp(a: Coord, b: Coord, t: float) -> Coord:
    return int(a[0] + (b[0] - a[0]) * t), int(a[1] + (b[1] - a[1]) * t)


def _toward(cur: Coord, goal: Coord) -> Coord:
    """One step along the axis with the larger remaining gap."""
    dr, dc = goal[0] - cur[0], goal[1] - cur[1]
    if abs(dr) > abs(dc):
        return cur[0] + _sign(dr), cur[1]
    return cur[0], cur[1] + _sign(dc)


def _manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _reconnect(grid: Grid, cell: Coord, start: Coord) -> int:
    return connect_to_main(grid, cell, grid.reachable_from(start))


def are_directly_connected(grid: Grid, a: Coord, b: Coord) -> bool:
    """Adjacent, or joined by a straight passage with no side branches."""
    if _manhattan(a, b) == 1:
        return True
    if a[0] == b[0]:
        r = a[0]
        for c in range(min(a[1], b[1]) + 1, max(a[1], b[1])):
            if not grid.is_passage((r, c)) or grid.is_passage((r - 1, c)) or grid.is_passage((r + 1, c)):
                return False
        return True
    if a[1] == b[1]:
        c = a[1]
        for r in range(min(a[0], b[0]) + 1, max(a[0], b[0])):
            if not grid.is_passage((r, c)) or grid.is_passage((r, c - 1)) or grid.is_passage((r, c + 1)):
                return False
        return True
    return False


def winding_path(grid: Grid, rng: random.Random, a: Coord, b: Coord, max_len: Optional[int] = None) -> List[Coord]:
    """Goal-biased random walk from ``a`` toward ``b`` clamped to the interior.

    Returns the visited cells (``a`` excluded); the walk stops early after
    ``max_len`` steps, so the last cell is not always ``b``.
    """
    if max_len is None:
        max_len = max(grid.width, grid.height) * 2
    path: List[Coord] = []
    r, c = a
    while (r, c) != b and len(path) <= max_len:
        if rng.random() < 0.6:
            r, c = _toward((r, c), b)
        elif rng.random() < 0.7:
            if rng.random() < 0.5 and r != b[0]:
                r += _sign(b[0] - r)
            elif c != b[1]:
                c += _sign(b[1] - c)
            else:
                r += _sign(b[0] - r)
        elif abs(r - b[0]) > abs(c - b[1]):
            c += rng.choice((-1, 1))
        else:
            r += rng.choice((-1, 1))
        r = min(max(r, 1), grid.height - 2)
        c = min(max(c, 1), grid.width - 2)
        path.append((r, c))
    return path


def add_deceptive_paths(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Corridors that head for the goal, dead-end, then escape away from it."""
    added = 0
    w, h = grid.width, grid.height
    length = max(w, h) / 4
    for _ in range(int(math.sqrt(max(w, h)))):
        cur = _lerp(start, end, 0.2 + rng.random() * 0.6)
        if not grid.is_passage(cur):
            continue
        steps = 0
        while steps < length:
            if rng.random() < 0.8:
                nxt = _toward(cur, end)
            else:
                dr, dc = rng.choice(DIRECTIONS)
                nxt = (cur[0] + dr, cur[1] + dc)
            if not _open(grid, nxt):
                break
            cur = nxt
            steps += 1
        tip = cur
        for dr, dc in DIRECTIONS:
            _wall(grid, (tip[0] + dr, tip[1] + dc), start, end)
        here = _manhattan(tip, end)
        best_gain, escape = None, None
        for dr, dc in DIRECTIONS:
            n = (tip[0] + dr, tip[1] + dc)
            if grid.is_interior(n) and (best_gain is None or _manhattan(n, end) - here > best_gain):
                best_gain, escape = _manhattan(n, end) - here, n
        if escape is None:
            continue
        grid.carve(escape)
        away = (_sign(end[0] - tip[0]), _sign(end[1] - tip[1]))
        cur = escape
        for _ in range(int(length * 1.5)):
            if rng.random() < 0.7:
                if abs(end[0] - cur[0]) < abs(end[1] - cur[1]):
                    nxt = (cur[0] - away[0], cur[1])
                else:
                    nxt = (cur[0], cur[1] - away[1])
            else:
                dr, dc = rng.choice(DIRECTIONS)
                nxt = (cur[0] + dr, cur[1] + dc)
            if not _open(grid, nxt):
                break
            cur = nxt
        _reconnect(grid, cur, start)
        added += 1
    return added


def _sub_branch(grid: Grid, rng: random.Random, origin: Coord, max_len: int) -> None:
    dr, dc = rng.choice(DIRECTIONS)
    cur = origin
    n = 0
    while n < max_len:
        cur = (cur[0] + dr, cur[1] + dc)
        if not _open(grid, cur):
            break
        n += 1
        if rng.random() < 0.3:
            tr, tc = rng.choice(DIRECTIONS)
            if (tr, tc) != (-dr, -dc):
                turn = (cur[0] + tr, cur[1] + tc)
                if _open(grid, turn):
                    cur = turn
                    n += 1


def extend_branch(grid: Grid, tip: Coord, heading: Coord, reach: int) -> int:
    """Carve on from a dead-end ``tip`` along ``heading`` into the next open cell.

    Returns the number of walls carved; 0 when the cell ahead is already
    open, or when the border or ``reach`` comes first (nothing is carved then).
    """
    walls: List[Coord] = []
    cur = tip
    for _ in range(reach):
        cur = (cur[0] + heading[0], cur[1] + heading[1])
        if not grid.is_interior(cur):
            return 0
        if grid.is_passage(cur):
            for cell in walls:
                grid.carve(cell)
            return len(walls)
        walls.append(cur)
    return 0


def add_heuristic_traps(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Goal-facing hubs with many dead-end branches."""
    w, h = grid.width, grid.height
    small = min(w, h)
    goal_dir = (_sign(end[0] - start[0]), _sign(end[1] - start[1]))
    added = 0
    for _ in range(max(5, int(math.sqrt(max(w, h)) * 1.5))):
        if rng.random() < 0.7:
            hub = _lerp(start, end, 0.2 + rng.random() * 0.6)
        else:
            hub = (rng.randrange(h), rng.randrange(w))
        if not grid.is_passage(hub) or _manhattan(hub, start) < w / 10 or _manhattan(hub, end) < w / 10:
            continue
        size = small // 10 + int(rng.random() * small / 10)
        cur, steps = hub, 0
        while steps < size / 2:
            if rng.random() < 0.8:
                nxt = _toward(cur, end)
            else:
                dr, dc = rng.choice(DIRECTIONS)
                nxt = (cur[0] + dr, cur[1] + dc)
            if not _open(grid, nxt):
                break
            cur = nxt
            steps += 1
        center = cur
        branches = 5 + rng.randrange(5)
        tips: List[Tuple[Coord, Coord]] = []
        for _ in range(branches):
            if rng.random() < 0.7:
                by = goal_dir[0] + rng.choice((-1, 1)) * rng.choice((0, 1))
                bx = goal_dir[1] + rng.choice((-1, 1)) * rng.choice((0, 1))
                heading = (_sign(by), 0) if abs(by) > abs(bx) else (0, _sign(bx))
                if heading == (0, 0):
                    heading = rng.choice(DIRECTIONS)
            else:
                heading = rng.choice(DIRECTIONS)
            cur = center
            blen = 0
            limit = size + int(rng.random() * size)
            while blen < limit:
                if rng.random() < 0.8:
                    nxt = (cur[0] + heading[0], cur[1] + heading[1])
                elif heading[0]:
                    nxt = (cur[0], cur[1] + rng.choice((-1, 1)))
                else:
                    nxt = (cur[0] + rng.choice((-1, 1)), cur[1])
                if not _open(grid, nxt):
                    break
                cur = nxt
                blen += 1
                if blen > 3 and rng.random() < 0.2:
                    _sub_branch(grid, rng, cur, size // 2)
            tips.append((cur, heading))
        if rng.random() < 0.1:
            rng.shuffle(tips)
            for tip, heading in tips:
                if extend_branch(grid, tip, heading, size + 2):
                    break
        added += 1
    return added


def _narrow_areas(grid: Grid, start: Coord, end: Coord) -> List[Tuple[int, int, int, int]]:
    h, w = grid.height, grid.width
    qr = abs(end[0] - start[0]) // 4
    qc = abs(end[1] - start[1]) // 4
    mid = (min(start[0], end[0]) + qr, max(start[0], end[0]) - qr, min(start[1], end[1]) + qc, max(start[1], end[1]) - qc)

    def around(cell: Coord) -> Tuple[int, int, int, int]:
        return cell[0] - h // 10, cell[0] + h // 10, cell[1] - w // 10, cell[1] + w // 10

    return [mid, around(start), around(end)]


def add_narrow_passages(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Winding one-cell corridors with forced walls on their flanks."""
    small = min(grid.width, grid.height)
    per_area = max(3, small // 10)
    added = 0
    for r0, r1, c0, c1 in _narrow_areas(grid, start, end):
        r0, r1 = max(1, r0), min(grid.height - 2, r1)
        c0, c1 = max(1, c0), min(grid.width - 2, c1)
        if r0 > r1 or c0 > c1:
            continue
        for _ in range(per_area):
            cur = (rng.randint(r0, r1), rng.randint(c0, c1))
            if not grid.is_passage(cur):
                continue
            length = small // 5 + int(rng.random() * small / 5)
            heading = rng.choice(DIRECTIONS)
            for _ in range(length):
                nxt = (cur[0] + heading[0], cur[1] + heading[1])
                if not _open(grid, nxt):
                    break
                cur = nxt
                vertical = heading[0] != 0
                if rng.random() < 0.3:
                    heading = rng.choice(((0, -1), (0, 1))) if vertical else rng.choice(((-1, 0), (1, 0)))
                if rng.random() < 0.7:
                    sides = ((0, -1), (0, 1)) if vertical else ((-1, 0), (1, 0))
                    for sr, sc in sides:
                        if rng.random() < 0.8:
                            _wall(grid, (cur[0] + sr, cur[1] + sc), start, end)
            if grid.is_passage(cur):
                _reconnect(grid, cur, start)
            added += 1
    return added


def add_memory_regions(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Dense lattices of interlinked cells that inflate a search frontier."""
    small = min(grid.width, grid.height)
    radius = max(5, small // 15)
    added = 0
    for _ in range(max(2, small // 20)):
        center = (rng.randrange(grid.height), rng.randrange(grid.width))
        if not grid.is_passage(center):
            continue
        cy, cx = center
        for y in range(cy - radius, cy + radius + 1, 2):
            for x in range(cx - radius, cx + radius + 1, 2):
                if not _open(grid, (y, x)):
                    continue
                for dr, dc in DIRECTIONS:
                    if rng.random() < 0.7:
                        _open(grid, (y + dr, x + dc))
        for y in range(cy - radius + 1, cy + radius):
            for x in range(cx - radius + 1, cx + radius):
                if grid.is_interior((y, x)) and grid.is_passage((y, x)) and rng.random() < 0.3:
                    _open(grid, (y, x + 1))
                    _open(grid, (y + 1, x))
                    _open(grid, (y + 1, x + 1))
        _reconnect(grid, center, start)
        added += 1
    return added


def _loop_target(grid: Grid, origin: Coord, radius: int) -> Optional[Coord]:
    seen = {origin}
    q = deque([(origin, 0)])
    while q:
        cell, d = q.popleft()
        if d >= radius:
            if grid.is_passage(cell) and not are_directly_connected(grid, origin, cell):
                return cell
            continue
        for n in grid.neighbors(cell):
            if n not in seen:
                seen.add(n)
                q.append((n, d + 1))
    return None


def add_strategic_loops(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Winding connectors between nearby passages that are not already directly joined."""
    small = min(grid.width, grid.height)
    radius = max(3, small // 15)
    added = 0
    for _ in range(max(10, small // 5)):
        origin = None
        for _ in range(100):
            cell = (rng.randrange(grid.height), rng.randrange(grid.width))
            if grid.is_passage(cell) and grid.wall_neighbors(cell) >= 2:
                origin = cell
                break
        if origin is None:
            continue
        target = _loop_target(grid, origin, radius)
        if target is None:
            continue
        path = winding_path(grid, rng, origin, target)
        for cell in path:
            grid.carve(cell)
        if path:
            added += 1
    return added


def ensure_path(grid: Grid, rng: random.Random, start: Coord, end: Coord) -> int:
    """Guarantee a start-to-end path, carving a winding one if needed; returns its length."""
    length = grid.path_length(start, end)
    if length is not None:
        return length
    path = winding_path(grid, rng, start, end)
    for cell in path:
        grid.carve(cell)
    last = path[-1] if path else start
    if last != end:
        carve_corridor(grid, last, end)
    return grid.path_length(start, end) or 0


GENERATORS = (
    ("deceptive_paths", add_deceptive_paths, "deceptive_paths_added"),
    ("heuristic_traps", add_heuristic_traps, "heuristic_traps_added"),
    ("strategic_loops", add_strategic_loops, "strategic_loops_added"),
    ("narrow_passages", add_narrow_passages, "narrow_passages_added"),
    ("memory_regions", add_memory_regions, "memory_regions_added"),
)


__all__ = [
    "add_deceptive_paths",
    "add_heuristic_traps",
    "add_narrow_passages",
    "add_memory_regions",
    "add_strategic_loops",
    "ensure_path",
    "are_directly_connected",
    "winding_path",
    "extend_branch",
    "GENERATORS",
]
