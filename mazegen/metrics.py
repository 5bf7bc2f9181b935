from __future__ import annotations

from typing import Any, Dict


def init_metrics() -> Dict[str, Any]:
    return {
        'attempts': 0,
        'repairs_performed': 0,
        'cells_carved_by_repair': 0,
        'dead_ends_added': 0,
        'path_obstacles_added': 0,
        'loops_added': 0,
        'hedge_islands_added': 0,
        'edge_runs_broken': 0,
        'hedge_branches_added': 0,
        'open_areas_broken': 0,
        'deceptive_paths_added': 0,
        'heuristic_traps_added': 0,
        'narrow_passages_added': 0,
        'memory_regions_added': 0,
        'strategic_loops_added': 0,
        'placements_reselected': 0,
        'placement_tier': None,
        'path_length': 0,
        'open_cells': 0,
        'runtime_ms': 0,
        'phase_ms': {},
    }


def bump(metrics: Dict[str, Any] | None, key: str, amount: int = 1) -> None:
    """Increment a counter when metrics collection is enabled (``metrics`` not None)."""
    if metrics is None or not amount:
        return
    metrics[key] = metrics.get(key, 0) + amount
