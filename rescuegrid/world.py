"""The robot's picture of the board: moves, sensing, and planner file formats."""

from __future__ import annotations

import random
from enum import Enum
from typing import Iterator, Optional, Sequence

from rescuegrid.defines import (
    BOARD_H,
    BOARD_W,
    HOSTILE_COUNT,
    SUB_CAP,
    SUB_START_X,
    SUB_START_Y,
    SURVIVOR_COUNT,
    Cell,
)
from rescuegrid.grid_server import SensorReading

World = list[list[int]]


class Move(str, Enum):
    """A single step as named by the planner; rows grow downwards."""

    RIGHT = "moveRight"
    LEFT = "moveLeft"
    UP = "moveUp"
    DOWN = "moveDown"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]


_DELTAS = {
    Move.RIGHT: (0, 1),
    Move.LEFT: (0, -1),
    Move.UP: (-1, 0),
    Move.DOWN: (1, 0),
}


def next_position(move: str | Move, x: int, y: int) -> tuple[int, int]:
    """Return the square reached by making ``move`` from (x, y)."""
    try:
        step = Move(move)
    except ValueError:
        raise ValueError(f"invalid move: {move}") from None
    dx, dy = step.delta
    return x + dx, y + dy


def generate_world(rng: Optional[random.Random] = None) -> World:
    """Build a random true board with the sub, survivors and hostiles placed."""
    rng = rng if rng is not None else random.Random()
    world = [[int(Cell.EMPTY)] * BOARD_W for _ in range(BOARD_H)]
    world[SUB_START_X][SUB_START_Y] = int(Cell.SUB)

    for kind, count in ((Cell.SURVIVOR, SURVIVOR_COUNT), (Cell.HOSTILE, HOSTILE_COUNT)):
        placed = 0
        while placed < count:
            row = rng.randint(0, BOARD_H - 1)
            col = rng.randint(0, BOARD_W - 1)
            if world[row][col] == Cell.EMPTY:
                world[row][col] = int(kind)
                placed += 1
    return world


def flatten_world(world: Sequence[Sequence[int]]) -> list[int]:
    """Row-major flattening of the board."""
    return [int(cell) for row in world for cell in row]


def _hits(reading: SensorReading, x: int, y: int) -> Iterator[tuple[int, int]]:
    beams = (
        (reading.east, 0, 1),
        (reading.west, 0, -1),
        (reading.north, -1, 0),
        (reading.south, 1, 0),
    )
    for beam, dx, dy in beams:
        for step, hit in enumerate(beam, start=1):
            if not hit:
                continue
            row, col = x + dx * step, y + dy * step
            if 0 <= row < BOARD_H and 0 <= col < BOARD_W:
                yield row, col


def detect_hostiles(reading: SensorReading, world: World, x: int, y: int) -> None:
    """Mark every hostile seen from (x, y) on ``world``."""
    for row, col in _hits(reading, x, y):
        world[row][col] = int(Cell.HOSTILE)


def detect_survivors(reading: SensorReading, world: World, x: int, y: int) -> int:
    """Mark survivors seen from (x, y) and return how many were new."""
    found = 0
    for row, col in _hits(reading, x, y):
        if world[row][col] != Cell.SURVIVOR:
            world[row][col] = int(Cell.SURVIVOR)
            found += 1
    return found


def render_world_csp(world: Sequence[Sequence[int]], x: int, y: int, on_board: int) -> str:
    """Render the known board and sub state as the planner's world model file."""
    lines = [f"#define {cell.symbol()} {int(cell)};\n" for cell in Cell]
    lines.append("\n")
    lines += [
        f"#define SUB_HOME_X {SUB_START_X};\n",
        f"#define SUB_HOME_Y {SUB_START_Y};\n",
        f"#define Rows {BOARD_H};\n",
        f"#define Cols {BOARD_W};\n",
        f"#define maxCapacity {SUB_CAP};\n",
        "\nvar world[Rows][Cols]:{Visited..Survivor} = [\n",
    ]
    last_row = len(world) - 1
    for index, row in enumerate(world):
        cells = [str(int(cell)) for cell in row]
        text = ", ".join(cells)
        if index != last_row:
            text += ", "
        lines.append(text + "\n")
    lines += [
        "];\n\n",
        "// Position of sub\n",
        f"var xpos:{{0..Rows-1}} = {x};\n",
        f"var ypos:{{0..Cols-1}} = {y};\n",
        f"var onBoard:{{0..maxCapacity}} = {on_board};\n",
    ]
    return "".join(lines)


def parse_pat_output(text: str) -> list[str]:
    """Extract the move sequence from the first witness trace in planner output."""
    for line in text.splitlines():
        if not line.startswith("<"):
            continue
        rest = line.split()[1:]
        moves = rest[1::2]
        if len(rest) % 2:
            moves.append(rest[-1])
        if not moves:
            raise ValueError("planner trace holds no moves")
        moves[-1] = moves[-1][:-1]
        return moves
    return []


def format_known_world(world: Sequence[Sequence[int]]) -> str:
    """Lay the board out as aligned text, one row per line."""
    rows = []
    for row in world:
        parts = []
        for cell in row:
            pad = "" if cell == Cell.VISITED else " "
            parts.append(f"{pad}{int(cell)} ")
        rows.append("".join(parts) + "\n")
    return "".join(rows)