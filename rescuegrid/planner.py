"""Runs the external model checker to plan the sub's next moves."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Optional, Sequence

from rescuegrid.world import parse_pat_output, render_world_csp

TIMEOUT_EXIT = 124
MAX_BFS_TIME = 10

Command = list[str]


class Goal(IntEnum):
    """What the next plan should achieve."""

    SURVEY_AREA = 0
    COLLECT_SURVIVORS = 1
    GO_HOME = 2


class PlanningError(RuntimeError):
    """The planner could not be run or produced no usable output."""


@dataclass(frozen=True)
class PatPaths:
    """Locations of the checker executable and its model files."""

    exe: Path
    explore: Path
    go_home: Path
    collect_survivors: Path
    output: Path
    world: Path

    @classmethod
    def from_home(cls, home: str | Path) -> "PatPaths":
        home = Path(home)
        pat = home / "catkin_workspace" / "src" / "AI-ROS-Group15" / "pat"
        return cls(
            exe=home / "Desktop" / "MONO-PAT-v3.6.0" / "PAT3.Console.exe",
            explore=pat / "explore.csp",
            go_home=pat / "return_home.csp",
            collect_survivors=pat / "collect_survivors.csp",
            output=pat / "pat_output.txt",
            world=pat / "world.csp",
        )


def _run(command: Sequence[str]) -> int:
    return subprocess.run(list(command), check=False).returncode


class PatPlanner:
    """Writes the known world, runs the checker and reads back a move list."""

    def __init__(
        self,
        paths: PatPaths,
        runner: Callable[[Sequence[str]], int] = _run,
        max_bfs_time: int = MAX_BFS_TIME,
    ) -> None:
        self.paths = paths
        self._runner = runner
        self.max_bfs_time = max_bfs_time

    def commands(self, goal: Goal | int) -> tuple[Command, Optional[Command]]:
        """Return the first command for ``goal`` and the one to use if it times out."""
        try:
            goal = Goal(goal)
        except ValueError:
            raise PlanningError(f"unknown goal: {goal}") from None

        p = self.paths
        mono = ["mono", str(p.exe)]
        timeout = ["timeout", f"{self.max_bfs_time}s"]
        output = str(p.output)

        if goal is Goal.SURVEY_AREA:
            return mono + [str(p.explore), output], None
        if goal is Goal.COLLECT_SURVIVORS:
            model = str(p.collect_survivors)
            return (
                timeout + mono + ["-engine", "1", model, output],
                mono + [model, output],
            )
        model = str(p.go_home)
        return (
            timeout + mono + ["-engine", "1", model, output],
            mono + ["-engine", "1", model, output],
        )

    def _call(self, command: Command) -> int:
        try:
            return self._runner(command)
        except OSError as exc:
            raise PlanningError(f"could not start planner: {exc}") from exc

    def plan(self, world, x: int, y: int, on_board: int, goal: Goal | int) -> list[str]:
        """Produce the list of moves that reaches ``goal`` from the current state."""
        primary, fallback = self.commands(goal)

        try:
            self.paths.world.write_text(render_world_csp(world, x, y, on_board))
        except OSError as exc:
            raise PlanningError(f"could not save world file: {exc}") from exc

        status = self._call(primary)
        if fallback is not None:
            if status < 0:
                raise PlanningError("planner was killed")
            if status == TIMEOUT_EXIT:
                self._call(fallback)

        try:
            text = self.paths.output.read_text()
        except OSError as exc:
            raise PlanningError(f"could not open planner output: {exc}") from exc
        try:
            return parse_pat_output(text)
        except ValueError as exc:
            raise PlanningError(str(exc)) from exc