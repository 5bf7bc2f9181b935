import json

import pytest

from mazegen import logging_utils
from mazegen.logging_utils import get_logger


def test_key_value_format(capsys):
    logging_utils.set_level("info")
    logging_utils.set_json_mode(False)
    get_logger("mazegen.test").info(event="placement_tier", tier="long path", path_length=42, skipped=None)
    out = capsys.readouterr().out.strip()
    assert out.startswith("level=info ts=")
    assert "event=placement_tier" in out
    assert "tier=long_path" in out
    assert "path_length=42" in out
    assert "skipped" not in out
    assert out.endswith("logger=mazegen.test")


def test_level_filtering_and_stderr(capsys):
    logging_utils.set_level("warn")
    log = get_logger("mazegen.test")
    log.debug(event="hidden")
    log.info(event="hidden")
    log.warn(event="shown")
    log.error(event="failed")
    captured = capsys.readouterr()
    assert "hidden" not in captured.out
    assert "event=shown" in captured.out
    assert "event=failed" in captured.err


def test_json_mode(capsys):
    logging_utils.set_level("debug")
    logging_utils.set_json_mode(True)
    get_logger("mazegen.test").debug(event="connectivity_repair", carved=3)
    rec = json.loads(capsys.readouterr().out)
    assert rec["event"] == "connectivity_repair"
    assert rec["carved"] == 3
    assert rec["level"] == "debug"
    assert rec["logger"] == "mazegen.test"


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        logging_utils.set_level("loud")


def test_loggers_are_cached():
    assert get_logger("mazegen.x") is get_logger("mazegen.x")
