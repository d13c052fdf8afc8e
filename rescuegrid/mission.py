"""Drives the sub through a search-and-rescue mission on the board."""

from __future__ import annotations

import argparse
import os
import random
import sys
import time
from collections import deque
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence, TextIO

from rescuegrid.defines import (
    BOARD_H,
    BOARD_W,
    HOSTILE_DETECTION_RANGE,
    SUB_START_X,
    SUB_START_Y,
    SURVIVOR_DETECTION_RANGE,
    Cell,
)
from rescuegrid.grid_server import GridManager, ModelLibrary
from rescuegrid.planner import Goal, PatPaths, PatPlanner, PlanningError
from rescuegrid.world import (
    World,
    detect_hostiles,
    detect_survivors,
    flatten_world,
    format_known_world,
    generate_world,
    next_position,
)

GAZEBO_SIMULATION_RATE = 1.0


class MissionError(RuntimeError):
    """The mission cannot continue."""


class Planner(Protocol):
    def plan(self, world: World, x: int, y: int, on_board: int, goal: Goal) -> list[str]:
        ...


class Mission:
    """Explores the board, picks up survivors and brings them home."""

    def __init__(
        self,
        planner: Planner,
        grid: GridManager,
        true_world: Optional[Sequence[Sequence[int]]] = None,
        rng: Optional[random.Random] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        pause: Optional[Callable[[], None]] = None,
        max_steps: Optional[int] = None,
    ) -> None:
        self.planner = planner
        self.grid = grid
        self._initial_world = true_world
        self._rng = rng
        self._out = out
        self._err = err
        self._pause = pause
        self.max_steps = max_steps
        self.known_world: World = []
        self.true_world: World = []
        self.position = (SUB_START_X, SUB_START_Y)
        self.on_board = 0
        self.survivors_saved = 0
        self.survivors_seen = 0

    def _wait(self) -> None:
        if self._pause is not None:
            self._pause()

    def _publish(self) -> None:
        try:
            self.grid.update_grid(flatten_world(self.true_world))
        except (OSError, ValueError) as exc:
            raise MissionError(f"failed to update grid: {exc}") from exc

    def _sense(self) -> int:
        try:
            hostiles = self.grid.hostile_sensor(HOSTILE_DETECTION_RANGE)
            survivors = self.grid.survivor_sensor(SURVIVOR_DETECTION_RANGE)
        except (LookupError, ValueError) as exc:
            raise MissionError(f"failed to query sensors: {exc}") from exc
        x, y = self.position
        detect_hostiles(hostiles, self.known_world, x, y)
        return detect_survivors(survivors, self.known_world, x, y)

    def _plan(self, goal: Goal) -> deque[str]:
        x, y = self.position
        return deque(self.planner.plan(self.known_world, x, y, self.on_board, goal))

    def _step(self, move: str, x: int, y: int) -> tuple[int, int]:
        try:
            nx, ny = next_position(move, x, y)
        except ValueError:
            err = self._err if self._err is not None else sys.stderr
            print(f"update_position found invalid move: {move}", file=err)
            return x, y
        if not (0 <= nx < BOARD_H and 0 <= ny < BOARD_W):
            raise MissionError(f"move {move} from ({x}, {y}) leads off the board")
        return nx, ny

    def run(self) -> World:
        """Run until every survivor is home; return the final known board."""
        out = self._out if self._out is not None else sys.stdout
        if self._initial_world is not None:
            self.true_world = [[int(c) for c in row] for row in self._initial_world]
        else:
            self.true_world = generate_world(self._rng)
        total = sum(cell == Cell.SURVIVOR for row in self.true_world for cell in row)

        known = [[int(Cell.EMPTY)] * BOARD_W for _ in range(BOARD_H)]
        known[SUB_START_X][SUB_START_Y] = int(Cell.VISITED)
        self.known_world = known
        self.position = (SUB_START_X, SUB_START_Y)
        self.on_board = 0
        self.survivors_saved = 0
        self.survivors_seen = 0
        goal = Goal.SURVEY_AREA

        self._publish()
        found = self._sense()
        if found:
            self.survivors_seen += found
            goal = Goal.COLLECT_SURVIVORS
        queue = self._plan(goal)

        steps = 0
        while True:
            x, y = self.position
            home = (x, y) == (SUB_START_X, SUB_START_Y)

            if home and self.on_board:
                self.survivors_saved += self.on_board
                print(
                    f"Saved {self.on_board} survivors. "
                    f"Total survivors now saved: {self.survivors_saved}",
                    file=out,
                )
                self.on_board = 0

            if not queue:
                carried = self.survivors_saved + self.on_board
                if carried == total:
                    if home:
                        out.write(format_known_world(known))
                        return known
                    goal = Goal.GO_HOME
                elif self.survivors_seen > carried:
                    goal = Goal.COLLECT_SURVIVORS
                else:
                    goal = Goal.SURVEY_AREA
                queue = self._plan(goal)
                if not queue:
                    raise MissionError("planner returned no moves")

            steps += 1
            if self.max_steps is not None and steps > self.max_steps:
                raise MissionError(f"mission exceeded {self.max_steps} steps")

            move = queue.popleft()
            nx, ny = self._step(move, x, y)

            if known[nx][ny] == Cell.HOSTILE:
                queue = self._plan(goal)
                self._wait()
                continue

            if known[nx][ny] == Cell.SURVIVOR:
                self.on_board += 1
                print(f"Now have {self.on_board} survivors onboard", file=out)

            known[nx][ny] = int(Cell.VISITED)
            self.true_world[x][y] = int(Cell.VISITED)
            self.true_world[nx][ny] = int(Cell.SUB)
            self._publish()
            self.position = (nx, ny)

            found = self._sense()
            if found:
                self.survivors_seen += found
                goal = Goal.COLLECT_SURVIVORS
                queue = self._plan(goal)

            self._wait()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a mission with the external planner; return the exit status."""
    parser = argparse.ArgumentParser(prog="rescuegrid", description="Run a rescue mission.")
    parser.add_argument("--home", default=os.environ.get("HOME") or str(Path.home()))
    parser.add_argument("--model-dir", default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--rate", type=float, default=GAZEBO_SIMULATION_RATE)
    args = parser.parse_args(argv)

    home = Path(args.home)
    if args.model_dir:
        model_dir = Path(args.model_dir)
    else:
        model_dir = home / "catkin_workspace" / "src" / "AI-ROS-Group15" / "models"
    interval = 1.0 / args.rate if args.rate > 0 else 0.0

    mission = Mission(
        PatPlanner(PatPaths.from_home(home)),
        GridManager(ModelLibrary(model_dir)),
        rng=random.Random(args.seed),
        pause=lambda: time.sleep(interval),
    )
    try:
        mission.run()
    except (MissionError, PlanningError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())