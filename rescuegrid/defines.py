"""Cell codes and fixed parameters of the search-and-rescue board."""

from __future__ import annotations

from enum import IntEnum

SUB_START_X = 0
SUB_START_Y = 0

BOARD_H = 8
BOARD_W = 8

SUB_CAP = 2
SURVIVOR_COUNT = 5
HOSTILE_COUNT = 8

HOSTILE_DETECTION_RANGE = 2
SURVIVOR_DETECTION_RANGE = 1


class Cell(IntEnum):
    """What occupies one square of the board."""

    VISITED = -1
    EMPTY = 0
    SUB = 1
    HOSTILE = 2
    SURVIVOR = 3

    def symbol(self) -> str:
        """Name used for this cell kind in generated model files."""
        return _SYMBOLS[self]


_SYMBOLS = {
    Cell.VISITED: "Visited",
    Cell.EMPTY: "Unvisited",
    Cell.SUB: "Sub",
    Cell.HOSTILE: "Hostile",
    Cell.SURVIVOR: "Survivor",
}