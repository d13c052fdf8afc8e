import pytest

from rescuegrid.defines import Cell


@pytest.mark.parametrize(
    "code, cell",
    [
        (-1, Cell.VISITED),
        (0, Cell.EMPTY),
        (1, Cell.SUB),
        (2, Cell.HOSTILE),
        (3, Cell.SURVIVOR),
    ],
)
def test_codes_map_to_cells(code, cell):
    assert Cell(code) is cell
    assert int(cell) == code


@pytest.mark.parametrize(
    "cell, name",
    [
        (Cell.VISITED, "Visited"),
        (Cell.EMPTY, "Unvisited"),
        (Cell.SUB, "Sub"),
        (Cell.HOSTILE, "Hostile"),
        (Cell.SURVIVOR, "Survivor"),
    ],
)
def test_symbol_names(cell, name):
    assert cell.symbol() == name


def test_symbols_by_code():
    names = [Cell(code).symbol() for code in range(-1, 4)]
    assert names == ["Visited", "Unvisited", "Sub", "Hostile", "Survivor"]


def test_unknown_code_rejected():
    with pytest.raises(ValueError):
        Cell(7)