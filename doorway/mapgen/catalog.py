"""Piece catalog: the weighted pool plus the designated origin and exit pieces.

Catalog JSON shape::

    {
      "origin": "start",
      "exit": "exit",
      "pieces": [
        {"name": "start", "weight": 1, "doors": ["N", "E", "S", "W"]},
        {"name": "hall", "weight": 6, "doors": ["E", "W"]},
        {"name": "wide", "cells": [[0, 0], [1, 0]],
         "doors": [{"side": "W", "x": 0, "y": 0}, {"side": "E", "x": 1, "y": 0}]}
      ]
    }

String door entries sit on the anchor cell (0,0).
"""
from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Sequence

from .errors import CatalogError
from .geometry import Cell, Direction, ORIGIN, Piece


class PieceCatalog:
    def __init__(self, pieces: Sequence[Piece], origin: Piece, exit: Piece):
        self.pieces: List[Piece] = list(pieces)
        self.origin = origin
        self.exit = exit
        # the exit must always be placeable
        if exit not in self.pieces:
            self.pieces.append(exit)

    def get(self, name: str) -> Optional[Piece]:
        for p in self.pieces:
            if p.name == name:
                return p
        if self.origin.name == name:
            return self.origin
        return None

    def is_exit(self, piece: Piece) -> bool:
        return piece == self.exit

    def to_dict(self) -> Dict[str, Any]:
        defined = list(self.pieces)
        if self.origin not in defined:
            defined.insert(0, self.origin)
        return {
            "origin": self.origin.name,
            "exit": self.exit.name,
            "pool": [p.name for p in self.pieces],
            "pieces": [_piece_to_dict(p) for p in defined],
        }

    def __len__(self):
        return len(self.pieces)


def _piece_to_dict(piece: Piece) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": piece.name, "weight": piece.weight}
    if tuple(piece.cells) == (ORIGIN,):
        data["doors"] = [d.value for d, _ in piece.door_templates]
    else:
        data["cells"] = [[c.x, c.y] for c in piece.cells]
        data["doors"] = [{"side": d.value, "x": c.x, "y": c.y} for d, c in piece.door_templates]
    return data


def _piece_from_dict(entry: Dict[str, Any]) -> Piece:
    if not isinstance(entry, dict) or not entry.get("name"):
        raise CatalogError(f"piece entry missing name: {entry!r}")
    name = str(entry["name"])
    weight = entry.get("weight", 1)
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise CatalogError(f"piece {name!r}: weight must be an integer")
    try:
        cells = tuple(Cell(int(x), int(y)) for x, y in entry.get("cells", [[0, 0]]))
        doors = []
        for d in entry.get("doors", []):
            if isinstance(d, dict):
                doors.append((Direction.parse(d["side"]), Cell(int(d.get("x", 0)), int(d.get("y", 0)))))
            else:
                doors.append((Direction.parse(d), ORIGIN))
        return Piece(name=name, weight=weight, door_templates=tuple(doors), cells=cells)
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"piece {name!r}: {e}") from e


def catalog_from_dict(data: Dict[str, Any]) -> PieceCatalog:
    if not isinstance(data, dict):
        raise CatalogError("catalog must be a JSON object")
    entries = data.get("pieces") or []
    if not entries:
        raise CatalogError("catalog has no pieces")
    pieces = [_piece_from_dict(e) for e in entries]
    by_name = {}
    for p in pieces:
        if p.name in by_name:
            raise CatalogError(f"duplicate piece name {p.name!r}")
        by_name[p.name] = p
    origin_name = data.get("origin")
    exit_name = data.get("exit")
    if origin_name not in by_name:
        raise CatalogError(f"origin piece {origin_name!r} not defined")
    if exit_name not in by_name:
        raise CatalogError(f"exit piece {exit_name!r} not defined")
    if origin_name == exit_name:
        raise CatalogError("origin and exit must be different pieces")
    pool_names = data.get("pool")
    if pool_names is not None:
        missing = [n for n in pool_names if n not in by_name]
        if missing:
            raise CatalogError(f"pool references unknown pieces: {missing}")
        pool = [by_name[n] for n in pool_names]
    else:
        # origin is placed once up front and stays out of the pool unless listed
        pool = [p for p in pieces if p.name != origin_name]
    return PieceCatalog(pool, by_name[origin_name], by_name[exit_name])


def load_catalog(path: str) -> PieceCatalog:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})") from e
    return catalog_from_dict(data)


DEFAULT_CATALOG = {
    "origin": "start",
    "exit": "exit",
    "pieces": [
        {"name": "start", "weight": 1, "doors": ["N", "E", "S", "W"]},
        {"name": "hall_ew", "weight": 6, "doors": ["E", "W"]},
        {"name": "hall_ns", "weight": 6, "doors": ["N", "S"]},
        {"name": "corner_ne", "weight": 4, "doors": ["N", "E"]},
        {"name": "corner_nw", "weight": 4, "doors": ["N", "W"]},
        {"name": "corner_se", "weight": 4, "doors": ["S", "E"]},
        {"name": "corner_sw", "weight": 4, "doors": ["S", "W"]},
        {"name": "tee_n", "weight": 2, "doors": ["E", "S", "W"]},
        {"name": "tee_e", "weight": 2, "doors": ["N", "S", "W"]},
        {"name": "tee_s", "weight": 2, "doors": ["N", "E", "W"]},
        {"name": "tee_w", "weight": 2, "doors": ["N", "E", "S"]},
        {"name": "cross", "weight": 1, "doors": ["N", "E", "S", "W"]},
        {"name": "cap_n", "weight": 6, "doors": ["N"]},
        {"name": "cap_e", "weight": 6, "doors": ["E"]},
        {"name": "cap_s", "weight": 6, "doors": ["S"]},
        {"name": "cap_w", "weight": 6, "doors": ["W"]},
        {"name": "exit", "weight": 1, "doors": ["W"]},
    ],
}


def default_catalog() -> PieceCatalog:
    return catalog_from_dict(DEFAULT_CATALOG)


__all__ = ["PieceCatalog", "catalog_from_dict", "load_catalog", "default_catalog", "DEFAULT_CATALOG"]
