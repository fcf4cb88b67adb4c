"""Plain-text rendering of a generated layout.

Each grid cell becomes one character with a gap column/row between cells for
hallways, north at the top.
"""
from __future__ import annotations
from typing import List

from .catalog import PieceCatalog
from .geometry import ORIGIN
from .tiles import EMPTY, EXIT, HALL_H, HALL_V, ROOM, START


def render_ascii(result, catalog: PieceCatalog) -> str:
    if not result.success or result.bounds is None:
        return ""
    b = result.bounds
    width = b.span_x * 2 + 1
    height = b.span_y * 2 + 1
    rows: List[List[str]] = [[EMPTY] * width for _ in range(height)]

    def put(x2: int, y2: int, ch: str):
        # x2/y2 are doubled grid coordinates
        col = x2 - b.min_x * 2
        row = b.max_y * 2 - y2
        rows[row][col] = ch

    for c in catalog.origin.occupied_cells(ORIGIN):
        put(c.x * 2, c.y * 2, START)
    for p in result.placements:
        ch = EXIT if catalog.is_exit(p.piece) else ROOM
        for c in p.piece.occupied_cells(p.offset):
            put(c.x * 2, c.y * 2, ch)
        a = p.connecting_door.cell
        z = p.matched_door.cell
        put(a.x + z.x, a.y + z.y, HALL_H if p.connecting_door.is_horizontal() else HALL_V)
    return "\n".join("".join(r).rstrip() for r in rows)


__all__ = ["render_ascii"]
