import pytest

from mazegen.config import MazeConfig, PlacementWeights
from mazegen.errors import DimensionError


def test_defaults():
    cfg = MazeConfig.from_env()
    assert (cfg.width, cfg.height, cfg.variant) == (21, 21, "hedge")
    assert cfg.seed is None
    assert cfg.max_attempts == 20
    assert cfg.enable_metrics is True


def test_env_values_are_parsed(monkeypatch):
    monkeypatch.setenv("MAZEGEN_WIDTH", "31")
    monkeypatch.setenv("MAZEGEN_HEIGHT", " 25 ")
    monkeypatch.setenv("MAZEGEN_VARIANT", "anti_bot")
    monkeypatch.setenv("MAZEGEN_SEED", "77")
    monkeypatch.setenv("MAZEGEN_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("MAZEGEN_ENABLE_METRICS", "off")
    cfg = MazeConfig.from_env()
    assert (cfg.width, cfg.height, cfg.variant, cfg.seed) == (31, 25, "anti_bot", 77)
    assert cfg.max_attempts == 5
    assert cfg.enable_metrics is False


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("MAZEGEN_WIDTH", "31")
    monkeypatch.setenv("MAZEGEN_SEED", "77")
    cfg = MazeConfig.from_env(width=15, seed=None)
    assert cfg.width == 15
    # None overrides fall through to the environment
    assert cfg.seed == 77


def test_bad_env_value(monkeypatch):
    monkeypatch.setenv("MAZEGEN_WIDTH", "wide")
    with pytest.raises(ValueError) as exc:
        MazeConfig.from_env()
    assert "MAZEGEN_WIDTH" in str(exc.value)


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        MazeConfig.from_env(depth=3)


def test_validate():
    MazeConfig(width=5, height=5).validate()
    with pytest.raises(DimensionError):
        MazeConfig(width=9, height=30, variant="anti_bot").validate()
    with pytest.raises(ValueError):
        MazeConfig(variant="spiral").validate()
    with pytest.raises(ValueError):
        MazeConfig(max_attempts=0).validate()


def test_weights_per_variant():
    assert MazeConfig().weights() == PlacementWeights()
    ratio = MazeConfig(variant="anti_bot").weights()
    assert ratio.mode == "ratio"
    assert ratio.path_weight > ratio.physical_weight
    custom = PlacementWeights(path_weight=1.0)
    assert MazeConfig(variant="anti_bot", placement_weights=custom).weights() is custom
