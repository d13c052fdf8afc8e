"""Keeps the simulated scene in step with the board and answers sensor queries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from rescuegrid.defines import BOARD_H, BOARD_W, Cell

GRID_WIDTH = 1.0
ROBOT_NAME = "robot_saver"

Point = tuple[float, float, float]

_MODEL_FILES = {
    Cell.SURVIVOR: ("bowl", "bowl/model.sdf"),
    Cell.HOSTILE: ("cardboard_box", "cardboard_box/model.sdf"),
    Cell.SUB: (ROBOT_NAME, "turtlebot3_burger/model.sdf"),
}


@dataclass(frozen=True)
class SensorReading:
    """Radar returns in four directions, nearest square first."""

    north: tuple[int, ...]
    south: tuple[int, ...]
    east: tuple[int, ...]
    west: tuple[int, ...]

    @property
    def object_north(self) -> bool:
        return any(self.north)

    @property
    def object_south(self) -> bool:
        return any(self.south)

    @property
    def object_east(self) -> bool:
        return any(self.east)

    @property
    def object_west(self) -> bool:
        return any(self.west)

    @property
    def detected(self) -> bool:
        return self.object_north or self.object_south or self.object_east or self.object_west


@dataclass(frozen=True)
class SpawnRequest:
    """A model to place in the scene; orientation is (x, y, z, w)."""

    model_name: str
    model_xml: str
    position: Point
    orientation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class SceneEvent:
    """One change to the scene: 'spawn', 'delete' or 'move'."""

    action: str
    model_name: str
    position: Point
    request: Optional[SpawnRequest] = None


class ModelLibrary:
    """Loads model descriptions and names new instances."""

    def __init__(self, model_dir: str | Path) -> None:
        self.model_dir = Path(model_dir)
        self._cache: dict[Cell, str] = {}
        self._counts = {Cell.SURVIVOR: 0, Cell.HOSTILE: 0}

    def create_spawn_request(self, model_type: int, position: Point) -> SpawnRequest:
        """Build a spawn request for a survivor, hostile or the sub."""
        try:
            cell = Cell(model_type)
        except ValueError:
            raise ValueError(f"unknown model type {model_type}") from None
        if cell not in _MODEL_FILES:
            raise ValueError(f"unknown model type {model_type}")

        key, relative = _MODEL_FILES[cell]
        if cell in self._counts:
            name = f"{key}{self._counts[cell]}"
            self._counts[cell] += 1
        else:
            name = key

        if cell not in self._cache:
            path = self.model_dir / relative
            try:
                self._cache[cell] = path.read_text()
            except OSError as exc:
                raise FileNotFoundError(f"model file not found: {path}") from exc

        return SpawnRequest(
            model_name=name,
            model_xml=self._cache[cell],
            position=tuple(float(v) for v in position),
        )


def _cell_point(row: int, col: int) -> Point:
    return (row * GRID_WIDTH, col * GRID_WIDTH, 0.0)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class GridManager:
    """Tracks the true board, mirrors changes into the scene and serves sensors."""

    def __init__(
        self,
        models: ModelLibrary,
        scene: Optional[Callable[[SceneEvent], None]] = None,
        locate: Optional[Callable[[], Sequence[float]]] = None,
    ) -> None:
        self.models = models
        self._scene = scene
        self._locate = locate
        self.grid: list[list[int]] = [[int(Cell.EMPTY)] * BOARD_W for _ in range(BOARD_H)]
        self.object_positions: dict[Point, str] = {}
        self.robot_spawned = False
        self.robot_position: Optional[Point] = None

    def _emit(self, event: SceneEvent) -> None:
        if self._scene is not None:
            self._scene(event)

    def _spawn(self, cell: Cell, point: Point) -> None:
        request = self.models.create_spawn_request(cell, point)
        self.object_positions[point] = request.model_name
        if cell is Cell.SUB:
            self.robot_position = point
        self._emit(SceneEvent("spawn", request.model_name, point, request))

    def _move_robot(self, point: Point) -> None:
        self.robot_position = point
        self._emit(SceneEvent("move", ROBOT_NAME, point))

    def update_grid(self, grid: Iterable[int]) -> list[int]:
        """Apply a flattened row-major board and return it unchanged."""
        values = [int(v) for v in grid]
        if len(values) != BOARD_H * BOARD_W:
            raise ValueError(
                f"grid must hold {BOARD_H * BOARD_W} cells, got {len(values)}"
            )

        for index, new in enumerate(values):
            row, col = divmod(index, BOARD_W)
            old = self.grid[row][col]
            if old == new:
                continue
            point = _cell_point(row, col)

            if old == Cell.EMPTY and new == Cell.SURVIVOR:
                self._spawn(Cell.SURVIVOR, point)
            if old == Cell.SURVIVOR and new == Cell.SUB:
                name = self.object_positions.pop(point, "")
                self._emit(SceneEvent("delete", name, point))
                self._move_robot(point)
            if old == Cell.EMPTY and new == Cell.HOSTILE:
                self._spawn(Cell.HOSTILE, point)
            if old in (Cell.EMPTY, Cell.VISITED) and new == Cell.SUB:
                if self.robot_spawned:
                    self._move_robot(point)
                else:
                    self._spawn(Cell.SUB, point)
                    self.robot_spawned = True

            self.grid[row][col] = new

        return values

    def _robot_cell(self) -> tuple[int, int]:
        if self._locate is not None:
            position = self._locate()
        else:
            position = self.robot_position
        if position is None:
            raise LookupError("robot location is not available")
        x = _round_half_away(position[0])
        y = _round_half_away(position[1])
        if not (0 <= x < BOARD_H and 0 <= y < BOARD_W):
            raise ValueError(f"robot location ({x}, {y}) is off the board")
        return x, y

    def _scan(self, target: Cell, sensor_range: int) -> SensorReading:
        if sensor_range < 0:
            raise ValueError("sensor range must not be negative")
        x, y = self._robot_cell()

        def probe(dx: int, dy: int) -> tuple[int, ...]:
            hits = []
            for step in range(1, sensor_range + 1):
                r, c = x + dx * step, y + dy * step
                inside = 0 <= r < BOARD_H and 0 <= c < BOARD_W
                hits.append(int(inside and self.grid[r][c] == target))
            return tuple(hits)

        return SensorReading(
            north=probe(-1, 0),
            south=probe(1, 0),
            east=probe(0, 1),
            west=probe(0, -1),
        )

    def hostile_sensor(self, sensor_range: int) -> SensorReading:
        """Look for hostiles in straight lines from the robot."""
        return self._scan(Cell.HOSTILE, sensor_range)

    def survivor_sensor(self, sensor_range: int) -> SensorReading:
        """Look for survivors in straight lines from the robot."""
        return self._scan(Cell.SURVIVOR, sensor_range)