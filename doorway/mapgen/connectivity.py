"""Door graph construction and shortest-path queries over accepted placements.

Nodes are door cells. Each placement contributes one undirected edge between
the frontier door it connected to and that door's match on the new piece,
plus edges joining the distinct door cells of the placed piece itself, so a
route may cross a multi-cell piece. Both functions are read-only over the
placement sequence.
"""
from __future__ import annotations
from collections import deque
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from .geometry import Cell, ORIGIN, Piece

if TYPE_CHECKING:
    from .search import Placement

UNREACHABLE = -1


def _link(graph: Dict[Cell, List[Cell]], a: Cell, b: Cell) -> None:
    graph.setdefault(a, []).append(b)
    graph.setdefault(b, []).append(a)


def _link_piece(graph: Dict[Cell, List[Cell]], cells: List[Cell]) -> None:
    unique = list(dict.fromkeys(cells))
    for i, a in enumerate(unique):
        for b in unique[i + 1:]:
            _link(graph, a, b)


def build_door_graph(placements: Iterable["Placement"], origin: Optional[Piece] = None) -> Dict[Cell, List[Cell]]:
    """Adjacency lists over door cells.

    When ``origin`` is given its door cells are joined to each other and to
    the anchor cell (0,0), the usual start of a path query.
    """
    graph: Dict[Cell, List[Cell]] = {}
    if origin is not None:
        _link_piece(graph, [ORIGIN] + [d.cell for d in origin.doors(ORIGIN)])
    for p in placements:
        _link(graph, p.connecting_door.cell, p.matched_door.cell)
        _link_piece(graph, [d.cell for d in p.piece.doors(p.offset)])
    return graph


def shortest_path_length(
    placements: Iterable["Placement"], target: Cell, start: Cell = ORIGIN, origin: Optional[Piece] = None
) -> int:
    """Edge count of the shortest path from ``start`` to ``target``, or UNREACHABLE."""
    graph = build_door_graph(placements, origin)
    visited = {start}
    q = deque([(start, 0)])
    while q:
        cell, dist = q.popleft()
        if cell == target:
            return dist
        for nbr in graph.get(cell, ()):
            if nbr not in visited:
                visited.add(nbr)
                q.append((nbr, dist + 1))
    return UNREACHABLE


__all__ = ["UNREACHABLE", "build_door_graph", "shortest_path_length"]
