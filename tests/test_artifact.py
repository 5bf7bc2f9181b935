import json

import pytest

from mazegen import ArtifactError, MazeArtifact, generate_maze, validate_path
from mazegen.connectivity import verify
from tests.maze_test_utils import shortest_path


def _small():
    # 5x4 maze; open cells (2,2) (2,3) (2,4) (3,4)
    return {
        "width": 5,
        "height": 4,
        "start": [2, 2],
        "end": [3, 4],
        "walls": [[1, c] for c in range(1, 6)]
        + [[4, c] for c in range(1, 6)]
        + [[2, 1], [2, 5], [3, 1], [3, 2], [3, 3], [3, 5]],
    }


def test_json_shape_and_reload():
    art = generate_maze(11, 11, seed=5)
    data = json.loads(art.to_json())
    assert set(data) == {"width", "height", "start", "end", "walls"}
    assert data["start"] == list(art.start)
    again = MazeArtifact.from_json(art.to_json(indent=2))
    assert again == art
    assert again.to_grid().cells == art.to_grid().cells


def test_duplicate_walls_are_tolerated():
    data = _small()
    data["walls"] += [[1, 1], [3, 3]]
    art = MazeArtifact.from_dict(data)
    assert art.open_cells == 4
    assert art.to_grid().open_count() == 4


@pytest.mark.parametrize(
    "mutate,field",
    [
        (lambda d: d.update(start=[3, 3]), "start"),
        (lambda d: d.update(end=[9, 1]), "end"),
        (lambda d: d.update(end=[2, 2]), "end"),
        (lambda d: d.pop("walls"), "walls"),
        (lambda d: d.update(width=True), "width"),
        (lambda d: d.update(start=[2]), "start"),
        (lambda d: d.update(height=0), "height"),
    ],
)
def test_invalid_artifacts_rejected(mutate, field):
    data = _small()
    mutate(data)
    with pytest.raises(ArtifactError) as exc:
        MazeArtifact.from_dict(data)
    assert exc.value.field == field
    assert isinstance(exc.value, ValueError)


def test_bad_json_rejected():
    with pytest.raises(ArtifactError):
        MazeArtifact.from_json("{not json")
    with pytest.raises(ArtifactError):
        MazeArtifact.from_json("[1, 2]")


def test_validate_path_accepts_solution():
    art = generate_maze(15, 15, variant="anti_bot", seed=3)
    check = validate_path(art, [list(p) for p in shortest_path(art)])
    assert check.valid
    assert check.error is None


@pytest.mark.parametrize(
    "path,error,step",
    [
        ([], "Path is empty", None),
        ([(2, 3), (2, 4), (3, 4)], "Path does not start at the maze start point", (2, 3)),
        ([(2, 2), (2, 3), (2, 4)], "Path does not end at the maze end point", (2, 4)),
        ([(2, 2), (3, 2), (3, 3), (3, 4)], "Path goes through a wall", (3, 2)),
        ([(2, 2), (2, 3), (3, 4)], "Invalid move: steps must be to adjacent cells (not diagonal)", (3, 4)),
    ],
)
def test_validate_path_errors(path, error, step):
    art = MazeArtifact.from_dict(_small())
    check = validate_path(art, path)
    assert not check.valid
    assert check.error == error
    assert check.invalid_step == step


def test_opening_a_wall_never_disconnects():
    """Removing a wall next to a junction only adds a loop."""
    art = generate_maze(15, 15, variant="hedge", seed=12)
    grid = art.to_grid()
    start = grid.to_internal(art.start)
    target = next(
        w
        for w in grid.walls()
        if grid.is_interior(w)
        and any(grid.is_passage(n) and grid.open_neighbors(n) >= 2 for n in grid.neighbors(w))
    )
    grid.carve(target)
    report = verify(grid, start)
    assert report.fully_connected
    assert report.total_open == art.open_cells + 1
