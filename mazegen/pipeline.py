"""Generation orchestration.

Each attempt runs GENERATE (carve, place, shape) then VERIFY, with up to a
few REPAIR rounds, and EMITs an artifact once the maze is fully connected
from start with a path to end of at least ``min_path_length``. Shaping can
short-circuit the placed path, in which case start and end are placed again
on the finished grid. Failed attempts restart from fresh carving;
once the attempt budget is spent a ``GenerationError`` carries the last
diagnostics.

Variants:
    hedge      Prim skeleton, sealed border, structural complexity stages.
    anti_bot   DFS skeleton, border openings, ratio-scored placement and
               every adversarial generator.
    challenge  Prim skeleton with random openings and a central open area,
               then the adversarial generators.
"""
from __future__ import annotations

import random
import time
from typing import Any, Callable, Dict, Optional, Tuple

from . import adversarial, carving
from .artifact import MazeArtifact
from .complexity import inject_complexity
from .config import MazeConfig
from .connectivity import repair, verify
from .errors import GenerationError
from .grid import Grid
from .logging_utils import get_logger
from .metrics import bump, init_metrics
from .placement import Placement, find_start_end, min_path_length

log = get_logger("mazegen.pipeline")

REPAIR_ROUNDS = 3

ANTI_BOT_ORDER = ("deceptive_paths", "heuristic_traps", "strategic_loops", "narrow_passages", "ensure_path", "memory_regions")
CHALLENGE_ORDER = ("deceptive_paths", "narrow_passages", "memory_regions", "strategic_loops", "heuristic_traps", "ensure_path")

_GENERATORS = {name: (fn, key) for name, fn, key in adversarial.GENERATORS}


class MazePipeline:
    def __init__(self, config: MazeConfig, rng: Optional[random.Random] = None):
        config.validate()
        self.config = config
        self.metrics: Optional[Dict[str, Any]] = init_metrics() if config.enable_metrics else None
        if rng is None:
            seed = config.seed
            if seed is None:
                seed = random.SystemRandom().randint(1, 1_000_000)
            rng = random.Random(seed)
            if self.metrics is not None:
                self.metrics["seed"] = seed
        self.rng = rng
        self.last_diagnostics: Dict[str, Any] = {}

    def _phase(self, label: str, fn: Callable, *a, **k):
        if self.metrics is None:
            return fn(*a, **k)
        ps = time.perf_counter()
        r = fn(*a, **k)
        phase_ms = self.metrics["phase_ms"]
        phase_ms[label] = phase_ms.get(label, 0) + int((time.perf_counter() - ps) * 1000)
        return r

    # ---------------- GENERATE ----------------
    def _carve(self) -> Grid:
        cfg, rng = self.config, self.rng
        grid = Grid(cfg.width, cfg.height)
        if cfg.variant == "anti_bot":
            self._phase("carve", carving.carve_dfs, grid, rng)
            self._phase("open_borders", carving.open_borders, grid, rng)
        else:
            self._phase("carve", carving.carve_prim, grid, rng)
            if cfg.variant == "challenge":
                self._phase("random_openings", carving.add_random_openings, grid, rng)
                self._phase("open_area", carving.add_open_area, grid, rng)
            else:
                grid.seal_border()
        anchor = grid.passages(interior_only=True)
        if anchor:
            self._phase("repair_base", repair, grid, anchor[0], self.metrics)
        return grid

    def _adversarial(self, grid: Grid, start, end) -> None:
        order = ANTI_BOT_ORDER if self.config.variant == "anti_bot" else CHALLENGE_ORDER
        for name in order:
            if name == "ensure_path":
                length = self._phase(name, adversarial.ensure_path, grid, self.rng, start, end)
                log.debug(event="adversarial_stage", stage=name, path_length=length)
            else:
                fn, key = _GENERATORS[name]
                added = self._phase(name, fn, grid, self.rng, start, end)
                bump(self.metrics, key, added)
                log.debug(event="adversarial_stage", stage=name, added=added)
            self._phase("repair", repair, grid, start, self.metrics)

    def _generate(self) -> Tuple[Grid, Placement]:
        grid = self._carve()
        placement = self._phase("placement", find_start_end, grid, self.rng, self.config.weights())
        start, end = placement.start, placement.end
        # fixed placement carves its cells without joining them to the maze
        self._phase("repair", repair, grid, start, self.metrics)
        if self.config.variant == "hedge":
            self._phase("complexity", inject_complexity, grid, self.rng, start, end, self.metrics)
        else:
            self._adversarial(grid, start, end)
        return grid, self._settle_placement(grid, placement)

    def _settle_placement(self, grid: Grid, placement: Placement) -> Placement:
        """Place start and end again when shaping cut their path below the minimum."""
        min_len = min_path_length(grid)
        path = grid.path_length(placement.start, placement.end)
        if path is not None and path >= min_len:
            return placement
        log.info(event="placement_reselected", tier=placement.tier, path_length=path, min_path=min_len)
        bump(self.metrics, "placements_reselected")
        placement = self._phase("placement", find_start_end, grid, self.rng, self.config.weights())
        self._phase("repair", repair, grid, placement.start, self.metrics)
        return placement

    # ---------------- VERIFY / REPAIR ----------------
    def _verify(self, grid: Grid, placement: Placement) -> Dict[str, Any]:
        """Return empty diagnostics when the maze can be emitted.

        The grid is checked once more after the last REPAIR round.
        """
        start, end = placement.start, placement.end
        if start == end:
            return {"reason": "start equals end", "start": start}
        min_len = min_path_length(grid)
        diag: Dict[str, Any] = {}
        for round_no in range(REPAIR_ROUNDS + 1):
            report = verify(grid, start)
            path = grid.path_length(start, end)
            if report.fully_connected and path is not None:
                if path < min_len:
                    # repair only carves, and carving never lengthens a path
                    return {"reason": "path too short", "path_length": path, "min_path": min_len, "tier": placement.tier}
                return {}
            diag = {
                "reason": "no path" if path is None else "unreachable cells",
                "unreachable": len(report.unreachable_cells),
                "reachable": report.reachable_count,
                "total_open": report.total_open,
                "tier": placement.tier,
            }
            if round_no == REPAIR_ROUNDS or not repair(grid, start, self.metrics):
                break
        return diag

    def run(self) -> MazeArtifact:
        cfg = self.config
        t0 = time.perf_counter()
        for attempt in range(1, cfg.max_attempts + 1):
            bump(self.metrics, "attempts")
            log.info(event="maze_attempt", attempt=attempt, variant=cfg.variant, width=cfg.width, height=cfg.height)
            grid, placement = self._generate()
            diag = self._phase("verify", self._verify, grid, placement)
            if diag:
                self.last_diagnostics = dict(diag, attempt=attempt)
                log.warn(event="maze_attempt_failed", attempt=attempt, reason=diag.get("reason"))
                continue
            path_length = grid.path_length(placement.start, placement.end)
            if self.metrics is not None:
                self.metrics.update(
                    placement_tier=placement.tier,
                    path_length=path_length,
                    open_cells=grid.open_count(),
                    runtime_ms=int((time.perf_counter() - t0) * 1000),
                )
            log.info(
                event="maze_generated",
                variant=cfg.variant,
                attempts=attempt,
                tier=placement.tier,
                path_length=path_length,
            )
            return MazeArtifact.from_grid(grid, placement.start, placement.end, metrics=self.metrics)
        reason = self.last_diagnostics.get("reason", "no path")
        if reason == "no path":
            message = f"no path found after {cfg.max_attempts} attempts"
        elif reason == "unreachable cells":
            message = f"unreachable cells remain after {cfg.max_attempts} attempts"
        else:
            message = f"{reason} after {cfg.max_attempts} attempts"
        log.error(event="generation_failed", attempts=cfg.max_attempts, reason=reason)
        raise GenerationError(message, cfg.max_attempts, self.last_diagnostics)


def generate_maze(
    width: Optional[int] = None,
    height: Optional[int] = None,
    variant: Optional[str] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    config: Optional[MazeConfig] = None,
) -> MazeArtifact:
    """Generate one maze artifact.

    Without an explicit ``config`` the settings come from ``MAZEGEN_*``
    environment variables, overridden by any keyword given here.
    """
    if config is None:
        config = MazeConfig.from_env(width=width, height=height, variant=variant, seed=seed)
    return MazePipeline(config, rng).run()


__all__ = ["MazePipeline", "generate_maze", "REPAIR_ROUNDS"]
