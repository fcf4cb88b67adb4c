"""Placement offset resolution: align a candidate's door with a frontier door."""
from __future__ import annotations

from .geometry import Cell, Door, ORIGIN, Piece


def placement_offset(door_to_connect: Door, candidate: Piece) -> Cell:
    """Offset that puts ``candidate``'s matching door one step beyond ``door_to_connect``.

    The candidate must expose a door on ``door_to_connect.matching_direction()``.
    """
    match_dir = door_to_connect.matching_direction()
    cand_door = candidate.door_on_side(match_dir, ORIGIN)
    if cand_door is None:
        raise ValueError(f"piece {candidate.name!r} has no {match_dir.name} door")
    target = door_to_connect.cell.shift(door_to_connect.direction.vector)
    return target.minus(cand_door.cell)


__all__ = ["placement_offset"]
