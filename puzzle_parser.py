"""
Parsers for Tents puzzle files.

Two formats are understood:

JSON, as served by the puzzle backend:
    {"id": 123, "w": 6, "h": 6, "rowCounts": [...], "colCounts": [...],
     "trees": [[x, y], ...]}

Text board, column counts on top and each row followed by its count:
    1 0 1
    .T. 1
    ... 0
    ^T. 1
Cells are T (tree), ^ (tent), - (grass) and . (empty).
"""
import json
from typing import List, Tuple

from grid import Cell, CellGrid, Puzzle, PuzzleError, empty_grid

TREE_CHAR = 'T'
CELL_CHARS = {c.value: c for c in Cell}


def parse_puzzle_json(data: dict) -> Puzzle:
    """Build a Puzzle from the backend's JSON payload."""
    if not isinstance(data, dict):
        raise PuzzleError("Puzzle payload must be a JSON object")
    trees = data.get("trees")
    if trees is None:
        raise PuzzleError(data.get("note") or "Puzzle payload has no tree coordinates")

    try:
        width = int(data["w"])
        height = int(data["h"])
        row_counts = [int(c) for c in data["rowCounts"]]
        col_counts = [int(c) for c in data["colCounts"]]
    except KeyError as e:
        raise PuzzleError(f"Puzzle payload is missing {e}") from e
    except (TypeError, ValueError) as e:
        raise PuzzleError(f"Bad size or counts in puzzle payload: {e}") from e

    try:
        tree_cells = frozenset((int(x), int(y)) for x, y in trees)
    except (TypeError, ValueError) as e:
        raise PuzzleError(f"Trees must be [x, y] pairs: {e}") from e

    puzzle_id = data.get("id")
    name = data.get("name") or (f"Tents #{puzzle_id}" if puzzle_id is not None else "")

    return Puzzle(
        width=width,
        height=height,
        trees=tree_cells,
        row_counts=row_counts,
        col_counts=col_counts,
        name=name,
    )


def parse_puzzle_json_string(json_str: str) -> Puzzle:
    return parse_puzzle_json(json.loads(json_str))


def parse_puzzle_json_file(filepath: str) -> Puzzle:
    with open(filepath, 'r') as f:
        data = json.load(f)
    return parse_puzzle_json(data)


def puzzle_to_json(puzzle: Puzzle) -> dict:
    """Inverse of parse_puzzle_json."""
    data = {
        "w": puzzle.width,
        "h": puzzle.height,
        "rowCounts": list(puzzle.row_counts),
        "colCounts": list(puzzle.col_counts),
        "trees": [list(t) for t in puzzle.tree_list],
    }
    if puzzle.name:
        data["name"] = puzzle.name
    return data


def parse_board_text(text: str, name: str = "") -> Tuple[Puzzle, CellGrid]:
    """Parse a text board into the puzzle and the current grid."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise PuzzleError("Board needs a column count line and at least one row")

    try:
        col_counts = [int(tok) for tok in lines[0].split()]
    except ValueError as e:
        raise PuzzleError(f"Bad column counts: {lines[0]!r}") from e
    width = len(col_counts)

    rows: List[str] = []
    row_counts: List[int] = []
    for lineno, line in enumerate(lines[1:], start=2):
        parts = line.split()
        if len(parts) != 2:
            raise PuzzleError(f"Line {lineno}: expected '<cells> <count>', got {line!r}")
        cells, count = parts
        if len(cells) != width:
            raise PuzzleError(f"Line {lineno}: expected {width} cells, got {len(cells)}")
        try:
            row_counts.append(int(count))
        except ValueError as e:
            raise PuzzleError(f"Line {lineno}: bad row count {count!r}") from e
        rows.append(cells)

    trees = set()
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == TREE_CHAR:
                trees.add((x, y))
            elif ch not in CELL_CHARS:
                raise PuzzleError(f"Unknown cell character {ch!r} at ({x},{y})")

    puzzle = Puzzle(
        width=width,
        height=len(rows),
        trees=frozenset(trees),
        row_counts=row_counts,
        col_counts=col_counts,
        name=name,
    )

    grid = empty_grid(puzzle)
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch != TREE_CHAR:
                grid[y][x] = CELL_CHARS[ch]
    return puzzle, grid


def format_board(puzzle: Puzzle, grid: CellGrid) -> str:
    """Write puzzle and grid in the text board format."""
    lines = [" ".join(str(c) for c in puzzle.col_counts)]
    for y in range(puzzle.height):
        cells = "".join(
            TREE_CHAR if puzzle.is_tree(x, y) else grid[y][x].value
            for x in range(puzzle.width)
        )
        lines.append(f"{cells} {puzzle.row_counts[y]}")
    return "\n".join(lines) + "\n"


def load_puzzle_file(filepath: str) -> Tuple[Puzzle, CellGrid]:
    """
    Load a .json puzzle (empty board) or a text board.
    JSON is detected by extension or by a leading '{'.
    """
    with open(filepath, 'r') as f:
        text = f.read()

    if filepath.endswith(".json") or text.lstrip().startswith("{"):
        puzzle = parse_puzzle_json_string(text)
        return puzzle, empty_grid(puzzle)
    return parse_board_text(text)
