import json

import pytest

from grid import Cell, PuzzleError, empty_grid
from puzzle_parser import (
    format_board, load_puzzle_file, parse_board_text,
    parse_puzzle_json, parse_puzzle_json_string, puzzle_to_json,
)

PAYLOAD = {
    "id": 7,
    "w": 3,
    "h": 2,
    "rowCounts": [1, 0],
    "colCounts": [0, 0, 1],
    "trees": [[2, 1]],
}

BOARD = """\
1 0 1
.T. 1
... 0
^T. 1
"""


def test_parse_json():
    puzzle = parse_puzzle_json(PAYLOAD)
    assert (puzzle.width, puzzle.height) == (3, 2)
    assert puzzle.trees == {(2, 1)}
    assert puzzle.row_counts == (1, 0)
    assert puzzle.name == "Tents #7"


def test_parse_json_without_trees_uses_note():
    data = dict(PAYLOAD, trees=None, note="puzzle not yet published")
    with pytest.raises(PuzzleError, match="not yet published"):
        parse_puzzle_json(data)


def test_parse_json_missing_key():
    data = dict(PAYLOAD)
    del data["rowCounts"]
    with pytest.raises(PuzzleError, match="rowCounts"):
        parse_puzzle_json(data)


@pytest.mark.parametrize("changes", [
    {"w": "wide"},
    {"h": None},
    {"rowCounts": ["x", 0]},
    {"colCounts": 3},
    {"trees": [[1, 2, 3]]},
    {"trees": [[1]]},
    {"trees": [5]},
])
def test_parse_json_bad_values(changes):
    with pytest.raises(PuzzleError):
        parse_puzzle_json(dict(PAYLOAD, **changes))


def test_parse_json_not_an_object():
    with pytest.raises(PuzzleError):
        parse_puzzle_json_string("[1, 2]")


def test_puzzle_to_json_reloads():
    puzzle = parse_puzzle_json_string(json.dumps(PAYLOAD))
    data = puzzle_to_json(puzzle)
    assert data["trees"] == [[2, 1]]
    assert data["name"] == "Tents #7"
    assert parse_puzzle_json(data) == puzzle


def test_parse_board_text():
    puzzle, grid = parse_board_text(BOARD, name="tiny")
    assert puzzle.name == "tiny"
    assert puzzle.col_counts == (1, 0, 1)
    assert puzzle.row_counts == (1, 0, 1)
    assert puzzle.trees == {(1, 0), (1, 2)}
    assert grid[2][0] == Cell.TENT
    assert grid[0][1] == Cell.EMPTY  # tree cells carry no state
    assert grid[1][1] == Cell.EMPTY


def test_format_board_matches_input():
    puzzle, grid = parse_board_text(BOARD)
    assert format_board(puzzle, grid) == BOARD


def test_format_board_grass():
    puzzle, grid = parse_board_text(BOARD)
    grid[1][0] = Cell.GRASS
    assert format_board(puzzle, grid).splitlines()[2] == "-.. 0"


@pytest.mark.parametrize("text", [
    "1 0\n",
    "1 x\n.T 1\n",
    "1 0\n.T\n",
    "1 0\n.T. 1\n",
    "1 0\n.T one\n",
    "1 0\n?T 1\n",
])
def test_bad_board_text(text):
    with pytest.raises(PuzzleError):
        parse_board_text(text)


def test_load_json_file(tmp_path):
    path = tmp_path / "puzzle.json"
    path.write_text(json.dumps(PAYLOAD))
    puzzle, grid = load_puzzle_file(str(path))
    assert puzzle.name == "Tents #7"
    assert grid == empty_grid(puzzle)


def test_load_json_without_extension(tmp_path):
    path = tmp_path / "puzzle.dat"
    path.write_text("  " + json.dumps(PAYLOAD))
    puzzle, _ = load_puzzle_file(str(path))
    assert puzzle.trees == {(2, 1)}


def test_load_board_file(tmp_path):
    path = tmp_path / "board.txt"
    path.write_text(BOARD)
    puzzle, grid = load_puzzle_file(str(path))
    assert puzzle.trees == {(1, 0), (1, 2)}
    assert grid[2][0] == Cell.TENT
