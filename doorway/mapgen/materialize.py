"""Materialization collaborators: turn an accepted plan into concrete output.

The generator only decides which pieces go where. A materializer receives the
origin first, then every placement in acceptance order (piece, then the
hallway joining it to its parent), and is cleared at the start of each run.
"""
from __future__ import annotations
from typing import Any, Dict, List

from .geometry import Cell, Door, Piece


class Materializer:
    """Base collaborator; subclasses override the three hooks."""

    def clear(self) -> None:
        pass

    def place_piece(self, piece: Piece, offset: Cell) -> None:
        raise NotImplementedError

    def place_connector(self, door: Door, horizontal: bool) -> None:
        raise NotImplementedError


class LayoutMaterializer(Materializer):
    """Collects JSON-friendly room and hallway records."""

    def __init__(self):
        self.rooms: List[Dict[str, Any]] = []
        self.hallways: List[Dict[str, Any]] = []

    def clear(self) -> None:
        self.rooms = []
        self.hallways = []

    def place_piece(self, piece: Piece, offset: Cell) -> None:
        self.rooms.append({
            "index": len(self.rooms),
            "piece": piece.name,
            "offset": [offset.x, offset.y],
            "cells": [[c.x, c.y] for c in piece.occupied_cells(offset)],
            "doors": piece.sides,
        })

    def place_connector(self, door: Door, horizontal: bool) -> None:
        end = door.matching_door().cell
        self.hallways.append({
            "orientation": "horizontal" if horizontal else "vertical",
            "from": [door.cell.x, door.cell.y],
            "to": [end.x, end.y],
            "direction": door.direction.value,
        })

    def to_dict(self) -> Dict[str, Any]:
        return {"rooms": list(self.rooms), "hallways": list(self.hallways)}


__all__ = ["Materializer", "LayoutMaterializer"]
