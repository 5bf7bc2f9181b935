"""Start/end placement by diameter search.

Candidates are drawn from the corner and mid-edge regions plus a random
interior sample. From each candidate a double BFS walks to the best-scoring
far cell ``A`` and then to the best-scoring cell ``B`` from ``A``; the best
pair overall wins. When no pair meets both the separation rule and the
minimum path length, placement degrades through fallback tiers instead of
failing. The tier used is logged and recorded on the result.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .config import PlacementWeights
from .grid import Coord, Grid
from .logging_utils import get_logger

log = get_logger("mazegen.placement")

TIERS = ("primary", "retry", "long_path", "corner", "random", "fixed")


@dataclass
class CandidatePair:
    start: Coord
    end: Coord
    path_distance: int
    physical_distance: float
    separated: bool
    score: float = 0.0


@dataclass
class Placement:
    start: Coord
    end: Coord
    path_length: int
    tier: str

    @property
    def degraded(self) -> bool:
        return self.tier not in ("primary", "retry")


def min_path_length(grid: Grid) -> int:
    return max(int(max(grid.width, grid.height) * 0.7), 5)


def separation_threshold(grid: Grid) -> int:
    return max(grid.width, grid.height) // 2


def is_separated(grid: Grid, a: Coord, b: Coord) -> bool:
    need = separation_threshold(grid)
    return abs(a[0] - b[0]) >= need and abs(a[1] - b[1]) >= need


def alignment_penalty(a: Coord, b: Coord, weights: PlacementWeights) -> float:
    """Penalty for pairs sharing (or nearly sharing) a row or column."""
    gap = min(abs(a[0] - b[0]), abs(a[1] - b[1]))
    if gap > weights.alignment_window:
        return 0.0
    return weights.alignment_penalty - weights.alignment_step * gap


def score_pair(grid: Grid, a: Coord, b: Coord, path: int, weights: PlacementWeights) -> Optional[float]:
    """Score a candidate pair; None means the pair is not eligible."""
    if a == b or path <= 0:
        return None
    bonus = weights.separation_bonus if is_separated(grid, a, b) else 0.0
    if weights.mode == "ratio":
        manhattan = abs(a[0] - b[0]) + abs(a[1] - b[1])
        if manhattan < max(grid.width, grid.height) / 3:
            return None
        return weights.path_weight * path / manhattan + weights.physical_weight * manhattan + bonus
    physical = math.hypot(a[0] - b[0], a[1] - b[1])
    return path * weights.path_weight + physical * weights.physical_weight - alignment_penalty(a, b, weights) + bonus


def _best_from(grid: Grid, origin: Coord, weights: PlacementWeights) -> Optional[Tuple[Coord, int, float]]:
    best = None
    for cell, d in grid.distances_from(origin).items():
        s = score_pair(grid, origin, cell, d, weights)
        if s is not None and (best is None or s > best[2]):
            best = (cell, d, s)
    return best


def diameter_pair(grid: Grid, candidate: Coord, weights: PlacementWeights) -> Optional[CandidatePair]:
    first = _best_from(grid, candidate, weights)
    if first is None:
        return None
    a = first[0]
    second = _best_from(grid, a, weights)
    if second is None:
        return None
    b, path, score = second
    return CandidatePair(
        start=a,
        end=b,
        path_distance=path,
        physical_distance=math.hypot(a[0] - b[0], a[1] - b[1]),
        separated=is_separated(grid, a, b),
        score=score,
    )


def _regions(grid: Grid) -> Dict[str, Tuple[int, int, int, int]]:
    """Inclusive (row_lo, row_hi, col_lo, col_hi) boxes for corners and mid-edges."""
    h, w = grid.height, grid.width
    rh = max(2, h // 5)
    cw = max(2, w // 5)
    top, bottom = (1, rh), (h - 1 - rh, h - 2)
    left, right = (1, cw), (w - 1 - cw, w - 2)
    mid_r = (int(h * 0.4), int(h * 0.6))
    mid_c = (int(w * 0.4), int(w * 0.6))
    return {
        "top_left": top + left,
        "top_right": top + right,
        "bottom_left": bottom + left,
        "bottom_right": bottom + right,
        "top": top + mid_c,
        "bottom": bottom + mid_c,
        "left": mid_r + left,
        "right": mid_r + right,
    }


def _open_in(grid: Grid, box: Tuple[int, int, int, int]) -> List[Coord]:
    r0, r1, c0, c1 = box
    return [
        (r, c)
        for r in range(max(1, r0), min(grid.height - 2, r1) + 1)
        for c in range(max(1, c0), min(grid.width - 2, c1) + 1)
        if grid.is_passage((r, c))
    ]


def candidate_pool(grid: Grid, rng: random.Random, per_region: int = 3, random_samples: int = 20) -> List[Coord]:
    pool: List[Coord] = []
    for box in _regions(grid).values():
        cells = _open_in(grid, box)
        pool.extend(rng.sample(cells, min(per_region, len(cells))))
    interior = grid.passages(interior_only=True)
    pool.extend(rng.sample(interior, min(random_samples, len(interior))))
    return list(dict.fromkeys(pool))


def _corner_pair(grid: Grid, rng: random.Random) -> Optional[CandidatePair]:
    regions = _regions(grid)
    best = None
    for a_key, b_key in (("top_left", "bottom_right"), ("top_right", "bottom_left")):
        a_cells = _open_in(grid, regions[a_key])
        b_cells = set(_open_in(grid, regions[b_key]))
        if not a_cells or not b_cells:
            continue
        for a in rng.sample(a_cells, min(4, len(a_cells))):
            dist = grid.distances_from(a)
            for b in b_cells:
                d = dist.get(b)
                if d is None or (best is not None and d <= best.path_distance):
                    continue
                best = CandidatePair(a, b, d, math.hypot(a[0] - b[0], a[1] - b[1]), is_separated(grid, a, b))
    return best


def _random_pair(
    grid: Grid, rng: random.Random, weights: PlacementWeights, min_len: int = 0, tries: int = 10
) -> Optional[CandidatePair]:
    """Furthest cells from a few random origins.

    Pairs whose path reaches ``min_len`` outrank every pair that does not,
    whatever their separation.
    """
    cells = grid.passages(interior_only=True) or grid.passages()
    if len(cells) < 2:
        return None
    best = None
    best_key = None
    for a in rng.sample(cells, min(tries, len(cells))):
        for b, d in grid.distances_from(a).items():
            if b == a:
                continue
            sep = is_separated(grid, a, b)
            s = d + (weights.separation_bonus if sep else 0.0) - alignment_penalty(a, b, weights)
            key = (d >= min_len, s)
            if best_key is None or key > best_key:
                best_key = key
                best = CandidatePair(a, b, d, math.hypot(a[0] - b[0], a[1] - b[1]), sep, s)
    return best


def fixed_pair(grid: Grid) -> Tuple[Coord, Coord]:
    """Opposite interior corners.

    No interior pair has larger row and column gaps, so when these two miss
    the separation threshold no shifted pair can meet it either.
    """
    h, w = grid.height, grid.width
    start = (1, 1)
    end = (h - 2, w - 2)
    return start, end


def _accept(pair: CandidatePair, tier: str, min_len: int) -> Placement:
    log.info(
        event="placement_tier",
        tier=tier,
        start=f"{pair.start[0]},{pair.start[1]}",
        end=f"{pair.end[0]},{pair.end[1]}",
        path_length=pair.path_distance,
        min_path=min_len,
        separated=pair.separated,
    )
    return Placement(start=pair.start, end=pair.end, path_length=pair.path_distance, tier=tier)


def find_start_end(grid: Grid, rng: random.Random, weights: Optional[PlacementWeights] = None) -> Placement:
    """Pick start and end cells; never raises for a poor maze, it degrades instead.

    The ``fixed`` tier carves its cells open, so callers must repair
    connectivity afterwards.
    """
    weights = weights or PlacementWeights()
    min_len = min_path_length(grid)
    best: Optional[CandidatePair] = None

    for tier in ("primary", "retry"):
        if tier == "primary":
            pool = candidate_pool(grid, rng)
        else:
            interior = grid.passages(interior_only=True)
            pool = rng.sample(interior, min(30, len(interior)))
        for cand in pool:
            pair = diameter_pair(grid, cand, weights)
            if pair is not None and (best is None or pair.score > best.score):
                best = pair
        if best is not None and best.separated and best.path_distance >= min_len:
            return _accept(best, tier, min_len)

    long_enough = min_len * 1.5
    if best is not None and best.path_distance >= long_enough:
        return _accept(best, "long_path", min_len)

    corner = _corner_pair(grid, rng)
    if corner is not None and corner.path_distance >= long_enough:
        return _accept(corner, "corner", min_len)

    fallback = _random_pair(grid, rng, weights, min_len)
    if fallback is not None:
        return _accept(fallback, "random", min_len)

    start, end = fixed_pair(grid)
    grid.carve(start)
    grid.carve(end)
    path = grid.path_length(start, end) or 0
    log.warn(event="placement_tier", tier="fixed", start=f"{start[0]},{start[1]}", end=f"{end[0]},{end[1]}", path_length=path, min_path=min_len)
    return Placement(start=start, end=end, path_length=path, tier="fixed")


__all__ = [
    "TIERS",
    "CandidatePair",
    "Placement",
    "find_start_end",
    "candidate_pool",
    "diameter_pair",
    "score_pair",
    "alignment_penalty",
    "is_separated",
    "min_path_length",
    "separation_threshold",
    "fixed_pair",
]
