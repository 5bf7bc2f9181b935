"""Structured key=value logging for the generation pipeline.

Wraps print() to emit one record per event with a timestamp, level and the
logger name. Generation stages log what they did (carved cells, placement
tier, retries) so degraded output can be told apart from ideal output.

Usage:
    from .logging_utils import get_logger
    log = get_logger("mazegen.placement")
    log.info(event="placement_tier", tier="primary", path_length=42)

Values are rendered with str() and spaces replaced by underscores.
Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("MAZEGEN_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("MAZEGEN_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def set_level(name: str) -> None:
    """Change the minimum emitted level at runtime (e.g. from tests)."""
    global CURRENT_LEVEL
    if name not in LEVELS:
        raise ValueError(f"unknown log level {name!r}")
    CURRENT_LEVEL = LEVELS[name]


def set_json_mode(enabled: bool) -> None:
    global JSON_MODE
    JSON_MODE = bool(enabled)


def _format(level: str, **fields) -> str:
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "mazegen"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        fields.setdefault("logger", self.name)
        print(_format(lvl, **fields), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]
