import random

import pytest

from mazegen.connectivity import (
    DISCONNECTED,
    FULLY_CONNECTED,
    carve_corridor,
    connected_components,
    nearest_reachable,
    repair,
    verify,
)
from mazegen.errors import ConnectivityError
from mazegen.grid import Grid
from mazegen.metrics import init_metrics


def _islands():
    # three pockets in a 9x9 wall grid
    g = Grid(9, 9)
    for cell in ((1, 1), (1, 2), (2, 1), (4, 6), (4, 7), (7, 3)):
        g.carve(cell)
    return g


def test_verify_reports_disconnection():
    g = _islands()
    report = verify(g, (1, 1))
    assert report.status == DISCONNECTED
    assert not report.fully_connected
    assert report.reachable_count == 3
    assert report.total_open == 6
    assert sorted(report.unreachable_cells) == [(4, 6), (4, 7), (7, 3)]


def test_repair_connects_everything_and_is_idempotent():
    g = _islands()
    metrics = init_metrics()
    carved = repair(g, (1, 1), metrics)
    assert carved > 0
    assert verify(g, (1, 1)).status == FULLY_CONNECTED
    assert repair(g, (1, 1), metrics) == 0
    assert metrics["repairs_performed"] == 1
    assert metrics["cells_carved_by_repair"] == carved


def test_repair_on_damaged_mazes():
    for seed in range(5):
        rng = random.Random(seed)
        g = Grid(15, 15)
        from mazegen.carving import carve_dfs

        carve_dfs(g, rng)
        ref = g.passages()[0]
        for cell in rng.sample(g.passages()[1:], 12):
            g.fill(cell)
        repair(g, ref)
        report = verify(g, ref)
        assert report.fully_connected, g.render()
        assert repair(g, ref) == 0


@pytest.mark.parametrize("reference", [(0, 0), (20, 3), (-1, 2)])
def test_invalid_reference_raises(reference):
    g = _islands()
    with pytest.raises(ConnectivityError) as exc:
        repair(g, reference)
    assert exc.value.reference == reference
    with pytest.raises(ConnectivityError):
        verify(g, reference)


def test_carve_corridor_is_manhattan_length():
    g = Grid(8, 8)
    carved = carve_corridor(g, (1, 1), (3, 4))
    assert carved == 6
    assert g.path_length((1, 1), (3, 4)) == 5
    # already open cells are not counted again
    assert carve_corridor(g, (1, 1), (3, 4)) == 0


def test_nearest_reachable_prefers_manhattan_closest():
    g = _islands()
    reachable = g.reachable_from((1, 1))
    src, dst = nearest_reachable(g, [(4, 6), (4, 7)], reachable)
    assert src == (4, 6)
    assert dst in reachable
    assert abs(src[0] - dst[0]) + abs(src[1] - dst[1]) == 7
    assert nearest_reachable(g, [(7, 3)], set()) is None


def test_connected_components_groups_cells():
    g = _islands()
    comps = connected_components(g, g.passages())
    assert sorted(len(c) for c in comps) == [1, 2, 3]
