import random

import pytest

from mazegen import (
    DimensionError,
    GenerationError,
    MazeConfig,
    MazePipeline,
    generate_maze,
    logging_utils,
)
from mazegen import pipeline as pipeline_mod
from mazegen.connectivity import DISCONNECTED, ConnectivityReport
from mazegen.debug_checks import analyze
from mazegen.grid import Grid
from mazegen.placement import min_path_length
from tests.maze_test_utils import bfs_reachable, open_cells, shortest_path


@pytest.mark.parametrize("variant", ["hedge", "anti_bot", "challenge"])
@pytest.mark.parametrize("seed", range(8))
def test_20x20_path_and_full_reachability(variant, seed):
    art = generate_maze(20, 20, variant=variant, seed=seed)
    steps = len(shortest_path(art)) - 1
    assert steps >= 10
    assert steps >= min_path_length(Grid(20, 20))
    assert bfs_reachable(art) == open_cells(art)


@pytest.mark.parametrize("seed", range(6))
def test_wide_anti_bot_path_meets_minimum(seed):
    art = generate_maze(30, 12, variant="anti_bot", seed=seed)
    assert len(shortest_path(art)) - 1 >= min_path_length(Grid(30, 12))
    assert art.metrics["path_length"] == len(shortest_path(art)) - 1


@pytest.mark.parametrize(
    "variant,width,height",
    [("hedge", 5, 5), ("hedge", 14, 9), ("anti_bot", 10, 10), ("anti_bot", 16, 12), ("challenge", 12, 15)],
)
def test_bounds_and_endpoints(variant, width, height):
    for seed in (5, 6):
        art = generate_maze(width, height, variant=variant, seed=seed)
        assert (art.width, art.height) == (width, height)
        assert all(1 <= r <= height and 1 <= c <= width for r, c in art.walls)
        walls = set(art.walls)
        for cell in (art.start, art.end):
            assert 1 <= cell[0] <= height and 1 <= cell[1] <= width
            assert cell not in walls
        assert art.start != art.end
        assert tuple(art.end) in bfs_reachable(art)


def test_hedge_border_is_sealed():
    art = generate_maze(17, 13, variant="hedge", seed=8)
    walls = set(art.walls)
    for r in range(1, 14):
        assert (r, 1) in walls and (r, 17) in walls
    for c in range(1, 18):
        assert (1, c) in walls and (13, c) in walls


def test_same_seed_is_deterministic():
    a = generate_maze(21, 21, variant="challenge", seed=99)
    b = generate_maze(21, 21, variant="challenge", seed=99)
    assert a == b
    c = MazePipeline(MazeConfig(width=21, height=21, variant="challenge"), rng=random.Random(99)).run()
    assert c == a


@pytest.mark.parametrize(
    "variant,width,height",
    [("hedge", 4, 10), ("hedge", 10, 4), ("anti_bot", 9, 20), ("challenge", 20, 9)],
)
def test_dimensions_rejected_before_generation(variant, width, height):
    with pytest.raises(DimensionError) as exc:
        generate_maze(width, height, variant=variant, seed=1)
    assert isinstance(exc.value, ValueError)
    assert exc.value.minimum in (5, 10)


def test_unknown_variant_rejected():
    with pytest.raises(ValueError):
        generate_maze(20, 20, variant="spiral", seed=1)


def test_retry_cap_raises_generation_error(monkeypatch):
    def never_connected(grid, reference):
        return ConnectivityReport(DISCONNECTED, 1, 2, [reference])

    monkeypatch.setattr(pipeline_mod, "verify", never_connected)
    pipe = MazePipeline(MazeConfig(width=11, height=11, seed=3, max_attempts=2))
    with pytest.raises(GenerationError) as exc:
        pipe.run()
    assert exc.value.attempts == 2
    assert exc.value.diagnostics["reason"] == "unreachable cells"
    assert exc.value.diagnostics["attempt"] == 2
    assert "unreachable cells remain after 2 attempts" in str(exc.value)
    assert pipe.metrics["attempts"] == 2


def test_short_path_fails_the_attempt(monkeypatch):
    monkeypatch.setattr(pipeline_mod, "min_path_length", lambda grid: 10_000)
    pipe = MazePipeline(MazeConfig(width=11, height=11, seed=3, max_attempts=2))
    with pytest.raises(GenerationError) as exc:
        pipe.run()
    assert exc.value.diagnostics["reason"] == "path too short"
    assert exc.value.diagnostics["min_path"] == 10_000
    assert "path too short after 2 attempts" in str(exc.value)
    assert pipe.metrics["placements_reselected"] == 2


def test_grid_is_checked_after_last_repair_round(monkeypatch):
    real_verify, real_repair = pipeline_mod.verify, pipeline_mod.repair
    calls = {"verify": 0}

    def late_verify(grid, reference):
        calls["verify"] += 1
        if calls["verify"] <= pipeline_mod.REPAIR_ROUNDS:
            return ConnectivityReport(DISCONNECTED, 1, 2, [reference])
        return real_verify(grid, reference)

    def busy_repair(grid, reference, metrics=None):
        return real_repair(grid, reference, metrics) or 1

    monkeypatch.setattr(pipeline_mod, "verify", late_verify)
    monkeypatch.setattr(pipeline_mod, "repair", busy_repair)
    art = MazePipeline(MazeConfig(width=11, height=11, seed=3)).run()
    assert art.metrics["attempts"] == 1
    assert calls["verify"] == pipeline_mod.REPAIR_ROUNDS + 1


def test_metrics_are_recorded():
    art = generate_maze(15, 15, variant="hedge", seed=21)
    m = art.metrics
    assert m["attempts"] == 1
    assert m["placement_tier"] in ("primary", "retry", "long_path", "corner", "random", "fixed")
    assert m["path_length"] == len(shortest_path(art)) - 1
    assert m["open_cells"] == len(open_cells(art))
    assert {"carve", "placement", "complexity", "verify"} <= set(m["phase_ms"])
    assert m["seed"] == 21


def test_metrics_can_be_disabled():
    cfg = MazeConfig(width=12, height=12, variant="anti_bot", seed=4, enable_metrics=False)
    art = generate_maze(config=cfg)
    assert art.metrics is None


def test_generation_logs_events(capsys):
    logging_utils.set_level("info")
    generate_maze(11, 11, seed=2)
    out = capsys.readouterr().out
    assert "event=maze_attempt" in out
    assert "event=maze_generated" in out
    assert "logger=mazegen.pipeline" in out


def test_analyze_reports_clean_maze():
    art = generate_maze(21, 21, variant="anti_bot", seed=17)
    res = analyze(art)
    assert res["endpoint_error"] is None
    assert res["unreachable_cells"] == []
    assert res["path_length"] == len(shortest_path(art)) - 1
    assert res["open_cells"] == len(open_cells(art))
