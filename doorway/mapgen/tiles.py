# Tile characters for text rendering of a layout
EMPTY = " "
ROOM = "R"
START = "S"
EXIT = "X"
HALL_H = "-"
HALL_V = "|"

__all__ = ["EMPTY", "ROOM", "START", "EXIT", "HALL_H", "HALL_V"]
