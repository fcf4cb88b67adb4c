"""Grid geometry for pieces, doors and cells.

Pieces are templates anchored at (0,0); placing one at an offset shifts its
footprint cells and door cells by that offset. A door sits on one of the
piece's own cells and faces a neighbouring cell; its matching door is the
door on that neighbour facing back.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Tuple


class Cell(NamedTuple):
    x: int
    y: int

    def shift(self, other: Tuple[int, int]) -> "Cell":
        return Cell(self.x + other[0], self.y + other[1])

    def minus(self, other: Tuple[int, int]) -> "Cell":
        return Cell(self.x - other[0], self.y - other[1])


ORIGIN = Cell(0, 0)


class Direction(Enum):
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    @property
    def vector(self) -> Cell:
        return _VECTORS[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.EAST, Direction.WEST)

    @classmethod
    def parse(cls, value) -> "Direction":
        if isinstance(value, Direction):
            return value
        key = str(value).strip().upper()
        for d in cls:
            if key in (d.value, d.name):
                return d
        raise ValueError(f"unknown direction {value!r}")


_OPPOSITE = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}
_VECTORS = {
    Direction.NORTH: Cell(0, 1),
    Direction.SOUTH: Cell(0, -1),
    Direction.EAST: Cell(1, 0),
    Direction.WEST: Cell(-1, 0),
}


@dataclass(frozen=True)
class Door:
    direction: Direction
    cell: Cell

    def matching_direction(self) -> Direction:
        return self.direction.opposite

    def matching_door(self) -> "Door":
        return Door(self.direction.opposite, self.cell.shift(self.direction.vector))

    def is_matching(self, other: "Door") -> bool:
        return other == self.matching_door()

    def is_horizontal(self) -> bool:
        return self.direction.is_horizontal


@dataclass(frozen=True)
class Piece:
    """A placeable room template.

    ``cells`` and ``door_templates`` are relative to the anchor (0,0).
    """
    name: str
    weight: int = 1
    door_templates: Tuple[Tuple[Direction, Cell], ...] = ()
    cells: Tuple[Cell, ...] = (ORIGIN,)

    def __post_init__(self):
        if not isinstance(self.weight, int) or self.weight < 1:
            raise ValueError(f"piece {self.name!r}: weight must be an integer >= 1 (got {self.weight!r})")
        if not self.cells:
            raise ValueError(f"piece {self.name!r}: footprint must contain at least one cell")
        footprint = set(self.cells)
        for direction, cell in self.door_templates:
            if cell not in footprint:
                raise ValueError(f"piece {self.name!r}: door {direction.name} at {tuple(cell)} is outside the footprint")

    @classmethod
    def single(cls, name: str, sides: Iterable, weight: int = 1) -> "Piece":
        """Build a one-cell piece with a door on each of ``sides``."""
        doors = tuple((Direction.parse(s), ORIGIN) for s in sides)
        return cls(name=name, weight=weight, door_templates=doors)

    def has_door_on_side(self, direction: Direction) -> bool:
        return any(d == direction for d, _ in self.door_templates)

    def door_on_side(self, direction: Direction, offset: Tuple[int, int] = ORIGIN) -> Optional[Door]:
        for d, cell in self.door_templates:
            if d == direction:
                return Door(d, cell.shift(offset))
        return None

    def doors(self, offset: Tuple[int, int] = ORIGIN) -> List[Door]:
        return [Door(d, cell.shift(offset)) for d, cell in self.door_templates]

    def occupied_cells(self, offset: Tuple[int, int] = ORIGIN) -> List[Cell]:
        return [c.shift(offset) for c in self.cells]

    def extent(self, offset: Tuple[int, int] = ORIGIN) -> Tuple[int, int, int, int]:
        """Return (min_x, max_x, min_y, max_y) of the footprint at ``offset``."""
        cells = self.occupied_cells(offset)
        xs = [c.x for c in cells]
        ys = [c.y for c in cells]
        return min(xs), max(xs), min(ys), max(ys)

    @property
    def sides(self) -> str:
        return "".join(d.value for d, _ in self.door_templates)


__all__ = ["Cell", "ORIGIN", "Direction", "Door", "Piece"]
