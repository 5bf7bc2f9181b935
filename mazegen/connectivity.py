"""Connectivity verification and repair.

Every stage that adds or removes walls is followed by ``repair`` so the
passage set stays a single component rooted at the reference cell (the
maze start once placement has run).
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .errors import ConnectivityError
from .grid import Coord, Grid
from .logging_utils import get_logger
from .metrics import bump
from .tiles import DIRECTIONS

log = get_logger("mazegen.connectivity")

FULLY_CONNECTED = "FULLY CONNECTED"
DISCONNECTED = "DISCONNECTED"


@dataclass
class ConnectivityReport:
    status: str
    reachable_count: int
    total_open: int
    unreachable_cells: List[Coord] = field(default_factory=list)

    @property
    def fully_connected(self) -> bool:
        return self.status == FULLY_CONNECTED


def _check_reference(grid: Grid, reference: Coord) -> None:
    if not grid.in_bounds(reference):
        raise ConnectivityError(reference, f"reference {reference} is outside the {grid.width}x{grid.height} grid")
    if not grid.is_passage(reference):
        raise ConnectivityError(reference, f"reference {reference} is a wall")


def verify(grid: Grid, reference: Coord) -> ConnectivityReport:
    _check_reference(grid, reference)
    reachable = grid.reachable_from(reference)
    unreachable = [c for c in grid.passages() if c not in reachable]
    return ConnectivityReport(
        status=DISCONNECTED if unreachable else FULLY_CONNECTED,
        reachable_count=len(reachable),
        total_open=len(reachable) + len(unreachable),
        unreachable_cells=unreachable,
    )


def connected_components(grid: Grid, cells: Iterable[Coord]) -> List[List[Coord]]:
    """Group passage ``cells`` into 4-connected components (flood restricted to ``cells``)."""
    pending = set(cells)
    components: List[List[Coord]] = []
    for seed in sorted(pending):
        if seed not in pending:
            continue
        pending.discard(seed)
        comp = [seed]
        q = deque([seed])
        while q:
            cur = q.popleft()
            for n in grid.neighbors(cur):
                if n in pending:
                    pending.discard(n)
                    comp.append(n)
                    q.append(n)
        components.append(comp)
    return components


def nearest_reachable(grid: Grid, sources: Iterable[Coord], reachable: Set[Coord]) -> Optional[Tuple[Coord, Coord]]:
    """Multi-source search over the whole grid (walls included) for the closest reachable cell.

    Returns ``(source, target)`` with the smallest Manhattan distance, or None
    when ``reachable`` is empty.
    """
    origin: Dict[Coord, Coord] = {}
    q = deque()
    for s in sources:
        if s in reachable:
            return s, s
        origin[s] = s
        q.append(s)
    h, w = grid.height, grid.width
    while q:
        cur = q.popleft()
        r, c = cur
        for dr, dc in DIRECTIONS:
            n = (r + dr, c + dc)
            if not (0 <= n[0] < h and 0 <= n[1] < w) or n in origin:
                continue
            origin[n] = origin[cur]
            if n in reachable:
                return origin[n], n
            q.append(n)
    return None


def carve_corridor(grid: Grid, a: Coord, b: Coord) -> int:
    """Carve from ``a`` to ``b`` stepping along the axis with the larger remaining gap."""
    carved = int(grid.carve(a))
    r, c = a
    while (r, c) != b:
        dr, dc = b[0] - r, b[1] - c
        if abs(dr) >= abs(dc):
            r += 1 if dr > 0 else -1
        else:
            c += 1 if dc > 0 else -1
        carved += grid.carve((r, c))
    return carved


def repair(grid: Grid, reference: Coord, metrics: Optional[Dict[str, Any]] = None) -> int:
    """Join every passage unreachable from ``reference`` back to the main component.

    Returns the number of wall cells carved; a second call returns 0.
    """
    _check_reference(grid, reference)
    reachable = grid.reachable_from(reference)
    orphans = [c for c in grid.passages() if c not in reachable]
    if not orphans:
        return 0
    components = connected_components(grid, orphans)
    carved = 0
    joined = 0
    for comp in components:
        if comp[0] in reachable:
            # absorbed by an earlier corridor
            continue
        hit = nearest_reachable(grid, comp, reachable)
        if hit is None:
            break
        src, dst = hit
        carved += carve_corridor(grid, src, dst)
        reachable |= grid.reachable_from(src)
        joined += 1
    bump(metrics, "repairs_performed")
    bump(metrics, "cells_carved_by_repair", carved)
    log.debug(event="connectivity_repair", components=len(components), joined=joined, carved=carved)
    return carved


def connect_to_main(grid: Grid, cell: Coord, reachable: Set[Coord]) -> int:
    """Carve from ``cell`` to the nearest cell in ``reachable``."""
    hit = nearest_reachable(grid, [cell], reachable)
    if hit is None:
        return 0
    return carve_corridor(grid, hit[0], hit[1])


__all__ = [
    "ConnectivityReport",
    "FULLY_CONNECTED",
    "DISCONNECTED",
    "verify",
    "repair",
    "connected_components",
    "nearest_reachable",
    "carve_corridor",
    "connect_to_main",
]
