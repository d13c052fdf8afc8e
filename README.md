# rescuegrid

This package plays out a search and rescue mission on an 8 × 8 grid. A
submarine starts in the top-left corner, at row 0 and column 0. Five survivors
and eight hostiles are placed at random. The submarine has to find every
survivor and bring them home. It can carry two survivors at a time.

The submarine knows only what its sensors have reported. It sees hostiles up to
two cells away and survivors one cell away, along straight lines. It gets its
routes from the PAT model checker. Before each leg of the mission it writes what
it knows of the board to `world.csp`. It then runs one of three CSP models:
explore, collect survivors, or return home. Finally it reads back the first
witness trace of moves from PAT's output file.

## Installing

```
pip install .
```

The package has no runtime dependencies beyond the standard library. The tests
need `pytest`, which the `test` extra installs (`pip install .[test]`).

## Running a mission

```
rescuegrid
```

A mission needs `mono`, `timeout` and a PAT console build. All paths are
relative to the home directory, which defaults to `$HOME`:

- PAT: `~/Desktop/MONO-PAT-v3.6.0/PAT3.Console.exe`
- CSP models, `world.csp` and `pat_output.txt`:
  `~/catkin_workspace/src/AI-ROS-Group15/pat/`
- model descriptions: `~/catkin_workspace/src/AI-ROS-Group15/models/`, holding
  `bowl/model.sdf`, `cardboard_box/model.sdf` and `turtlebot3_burger/model.sdf`

Collecting survivors and going home first run under a ten-second limit. If that
run times out, PAT is run again without the limit.

The command takes these options:

- `--home DIR`: the home directory used for the paths above.
- `--model-dir DIR`: where to find the model descriptions.
- `--seed N`: the seed for placing survivors and hostiles.
- `--rate HZ`: the number of moves per second (default 1; 0 means no pause).

The command prints each pickup and each delivery home. When every survivor is
home, it prints the submarine's final map of the grid. A map cell shows one of
these values:

- `-1` for a cell the submarine visited
- `0` for an unvisited cell
- `2` for a known hostile
- `3` for a known survivor

The exit status is 0 when the mission succeeds. It is 1 when the planner, the
grid or the sensors fail, and the error is printed to standard error.

## Using the pieces

- `rescuegrid.defines` holds the `Cell` kinds and the fixed board limits.
- `rescuegrid.grid_server` holds `GridManager`, which keeps the true board.
  - `update_grid` takes a flattened row-major board and returns it.
  - Each change is reported as a `SceneEvent` (`"spawn"`, `"move"` or
    `"delete"`) to an optional `scene` callback.
  - Spawn requests come from a `ModelLibrary`.
  - `hostile_sensor` and `survivor_sensor` return a `SensorReading`.
- `rescuegrid.world` holds helpers for the submarine's known board.
  - `generate_world` and `flatten_world` build the true board.
  - `detect_hostiles` and `detect_survivors` mark the cells that were sensed.
  - `render_world_csp` writes the board for PAT.
  - `parse_pat_output` reads back the moves.
  - `next_position` applies a `Move`.
  - `format_known_world` lays out the map.
- `rescuegrid.planner` holds `PatPlanner` and `PatPaths`.
  - They run PAT for a `Goal` and return the next moves.
  - A failure raises `PlanningError`.
- `rescuegrid.mission` holds `Mission.run()`, the full mission loop, and
  `main`, the command.
  - It raises `MissionError` when the grid or the sensors fail.
- `rescuegrid.llm` holds a small `OllamaClient`, together with
  `propose_action` and `validate_plan`.
  - They ask a local Ollama server for a movement command, or to judge a plan.
  - Any non-empty answer to a plan counts as valid.

```python
import random

from rescuegrid.grid_server import GridManager, ModelLibrary
from rescuegrid.world import flatten_world, generate_world

events = []
manager = GridManager(ModelLibrary("path/to/models"), scene=events.append)

world = generate_world(random.Random(7))
manager.update_grid(flatten_world(world))   # fills `events` with spawn events
reading = manager.survivor_sensor(1)
print(reading.detected, reading.north, reading.east)
```

## What it does not do

There is no 3-D simulator here. `GridManager` only reports scene changes to
its callback, so nothing is drawn. It finds the robot from its own record of
where the submarine was placed, unless you give it a `locate` function. The
language-model helpers are plain functions. They do not run on their own, and
the mission does not use them.