import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from mazegen import logging_utils  # noqa: E402

ENV_KEYS = (
    "MAZEGEN_WIDTH",
    "MAZEGEN_HEIGHT",
    "MAZEGEN_VARIANT",
    "MAZEGEN_SEED",
    "MAZEGEN_MAX_ATTEMPTS",
    "MAZEGEN_ENABLE_METRICS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer MAZEGEN_* settings out of test runs."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def _restore_logging():
    level, json_mode = logging_utils.CURRENT_LEVEL, logging_utils.JSON_MODE
    yield
    logging_utils.CURRENT_LEVEL = level
    logging_utils.JSON_MODE = json_mode


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def hedge_base(rng):
    """21x21 Prim skeleton with a sealed border."""
    from mazegen.carving import carve_prim
    from mazegen.grid import Grid

    grid = Grid(21, 21)
    carve_prim(grid, rng)
    grid.seal_border()
    return grid
