"""Minimal structured logging helper.

Emits key=value pairs (or compact JSON) with a timestamp and level so map
generation runs can be grepped and parsed without extra tooling.

Usage:
    from doorway.logging_utils import get_logger
    log = get_logger("mapgen")
    log.info(event="mapgen_complete", rooms=25, iterations=412)

All non-numeric values are str()'d with spaces replaced. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("DOORWAY_LOG_LEVEL", "info"), 20)
JSON_MODE = os.getenv("DOORWAY_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def _format(level: str, json_mode: bool = False, **fields):
    if json_mode:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": int(time.time()), "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "doorway"
        self.level = CURRENT_LEVEL
        self.json_mode = JSON_MODE

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < self.level:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, self.json_mode, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("doorway")


def set_level(level: str):
    """Apply ``level`` to every logger, including ones created later."""
    global CURRENT_LEVEL
    CURRENT_LEVEL = LEVELS[level]
    for logger in _LOGGER_CACHE.values():
        logger.level = CURRENT_LEVEL
