import pytest

from rescuegrid.defines import BOARD_H, BOARD_W, Cell
from rescuegrid.grid_server import (
    GridManager,
    ModelLibrary,
    SceneEvent,
    SensorReading,
    SpawnRequest,
)


@pytest.fixture
def model_dir(tmp_path):
    for sub, text in [
        ("bowl", "<sdf>bowl</sdf>"),
        ("cardboard_box", "<sdf>box</sdf>"),
        ("turtlebot3_burger", "<sdf>robot</sdf>"),
    ]:
        (tmp_path / sub).mkdir()
        (tmp_path / sub / "model.sdf").write_text(text)
    return tmp_path


@pytest.fixture
def events():
    return []


@pytest.fixture
def manager(model_dir, events):
    return GridManager(ModelLibrary(model_dir), scene=events.append)


def empty_board():
    return [int(Cell.EMPTY)] * (BOARD_H * BOARD_W)


def board_with(cells):
    flat = empty_board()
    for (row, col), value in cells.items():
        flat[row * BOARD_W + col] = int(value)
    return flat


def test_spawn_names_count_up(model_dir):
    library = ModelLibrary(model_dir)
    first = library.create_spawn_request(Cell.SURVIVOR, (1.0, 2.0, 0.0))
    second = library.create_spawn_request(Cell.SURVIVOR, (3.0, 4.0, 0.0))
    box = library.create_spawn_request(Cell.HOSTILE, (0.0, 0.0, 0.0))
    assert first.model_name == "bowl0"
    assert second.model_name == "bowl1"
    assert box.model_name == "cardboard_box0"
    assert first.model_xml == "<sdf>bowl</sdf>"
    assert first.position == (1.0, 2.0, 0.0)
    assert first.orientation[3] == 1.0


def test_sub_spawn_has_fixed_name(model_dir):
    library = ModelLibrary(model_dir)
    request = library.create_spawn_request(Cell.SUB, (0.0, 0.0, 0.0))
    assert isinstance(request, SpawnRequest)
    assert request.model_name == "robot_saver"
    assert request.model_xml == "<sdf>robot</sdf>"


def test_model_xml_is_cached(model_dir):
    library = ModelLibrary(model_dir)
    library.create_spawn_request(Cell.HOSTILE, (0.0, 0.0, 0.0))
    (model_dir / "cardboard_box" / "model.sdf").write_text("changed")
    again = library.create_spawn_request(Cell.HOSTILE, (1.0, 0.0, 0.0))
    assert again.model_xml == "<sdf>box</sdf>"


@pytest.mark.parametrize("model_type", [Cell.EMPTY, Cell.VISITED, 42])
def test_unknown_model_type(model_dir, model_type):
    with pytest.raises(ValueError):
        ModelLibrary(model_dir).create_spawn_request(model_type, (0.0, 0.0, 0.0))


def test_missing_model_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ModelLibrary(tmp_path).create_spawn_request(Cell.SURVIVOR, (0.0, 0.0, 0.0))


def test_update_returns_input_and_tracks_grid(manager):
    board = board_with({(0, 0): Cell.SUB, (2, 5): Cell.HOSTILE, (4, 1): Cell.SURVIVOR})
    assert manager.update_grid(board) == board
    flat = [value for row in manager.grid for value in row]
    assert flat == board


def test_update_spawns_objects(manager, events):
    manager.update_grid(board_with({(0, 0): Cell.SUB, (2, 5): Cell.HOSTILE, (4, 1): Cell.SURVIVOR}))
    spawned = {e.model_name: e.position for e in events if e.action == "spawn"}
    assert spawned == {
        "robot_saver": (0.0, 0.0, 0.0),
        "cardboard_box0": (2.0, 5.0, 0.0),
        "bowl0": (4.0, 1.0, 0.0),
    }
    assert manager.robot_spawned
    assert manager.object_positions[(4.0, 1.0, 0.0)] == "bowl0"


def test_repeated_board_emits_nothing(manager, events):
    board = board_with({(0, 0): Cell.SUB, (1, 1): Cell.HOSTILE})
    assert manager.update_grid(board) == board
    assert [e.action for e in events] == ["spawn", "spawn"]
    assert manager.update_grid(board) == board
    assert [e.action for e in events] == ["spawn", "spawn"]
    assert manager.object_positions[(1.0, 1.0, 0.0)] == "cardboard_box0"


def test_sub_moves_after_spawn(manager, events):
    manager.update_grid(board_with({(0, 0): Cell.SUB}))
    events.clear()
    manager.update_grid(board_with({(0, 0): Cell.VISITED, (0, 1): Cell.SUB}))
    assert events == [SceneEvent("move", "robot_saver", (0.0, 1.0, 0.0))]
    assert manager.robot_position == (0.0, 1.0, 0.0)


def test_collecting_survivor_deletes_model(manager, events):
    manager.update_grid(board_with({(0, 0): Cell.SUB, (0, 1): Cell.SURVIVOR}))
    events.clear()
    manager.update_grid(board_with({(0, 0): Cell.VISITED, (0, 1): Cell.SUB}))
    assert [e.action for e in events] == ["delete", "move"]
    assert events[0].model_name == "bowl0"
    assert (0.0, 1.0, 0.0) not in manager.object_positions


def test_update_rejects_wrong_size(manager):
    with pytest.raises(ValueError):
        manager.update_grid([0] * (BOARD_H * BOARD_W - 1))


def test_hostile_sensor_reports_directions(manager):
    manager.update_grid(board_with({(0, 0): Cell.SUB, (0, 2): Cell.HOSTILE, (1, 0): Cell.HOSTILE}))
    reading = manager.hostile_sensor(2)
    assert isinstance(reading, SensorReading)
    assert reading.east == (0, 1)
    assert reading.south == (1, 0)
    assert not any(reading.north) and not any(reading.west)
    assert reading.object_east and reading.object_south
    assert not reading.object_north and not reading.object_west
    assert reading.detected


def test_survivor_sensor_ignores_hostiles(manager):
    manager.update_grid(board_with({(0, 0): Cell.SUB, (0, 1): Cell.HOSTILE}))
    reading = manager.survivor_sensor(1)
    assert not reading.detected
    assert all(len(r) == 1 for r in (reading.north, reading.south, reading.east, reading.west))


def test_sensor_range_beyond_board_edge(manager):
    manager.update_grid(board_with({(0, 0): Cell.SUB, (0, 1): Cell.SURVIVOR}))
    reading = manager.survivor_sensor(3)
    assert reading.east[0] == 1
    assert sum(reading.north) == 0 and sum(reading.west) == 0
    assert len(reading.west) == 3


def test_sensor_uses_locate_with_rounding(model_dir):
    manager = GridManager(ModelLibrary(model_dir), locate=lambda: (1.5, 0.4, 0.0))
    manager.update_grid(board_with({(2, 1): Cell.SURVIVOR}))
    reading = manager.survivor_sensor(1)
    assert reading.object_east
    assert not reading.object_south


def test_sensor_without_robot(manager):
    with pytest.raises(LookupError):
        manager.hostile_sensor(2)


def test_sensor_negative_range(manager):
    manager.update_grid(board_with({(0, 0): Cell.SUB}))
    with pytest.raises(ValueError):
        manager.survivor_sensor(-1)


def test_sensor_robot_off_board(model_dir):
    manager = GridManager(ModelLibrary(model_dir), locate=lambda: (-3.0, 0.0))
    with pytest.raises(ValueError):
        manager.hostile_sensor(1)