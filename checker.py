"""
Solution checking and live error diagnostics for a Tents board.
"""
from dataclasses import dataclass, field
from typing import Set

from grid import (
    Cell, CellGrid, Coord, Puzzle,
    row_tent_count, col_tent_count, tent_positions, tents_touching,
)
from matching import has_perfect_matching


def check_solved(puzzle: Puzzle, grid: CellGrid) -> bool:
    """
    Return True if the board is a complete, valid solution:
    exact row/column counts, no touching tents, every tent next to a
    tree, and a perfect tree <-> tent matching.
    """
    for y in range(puzzle.height):
        if row_tent_count(puzzle, grid, y) != puzzle.row_counts[y]:
            return False
    for x in range(puzzle.width):
        if col_tent_count(puzzle, grid, x) != puzzle.col_counts[x]:
            return False

    tents = tent_positions(puzzle, grid)
    if tents_touching(puzzle, tents):
        return False

    # A tent with no tree next to it can never be matched
    if any(not puzzle.has_adjacent_tree(x, y) for x, y in tents):
        return False

    return has_perfect_matching(puzzle, tents)


@dataclass
class BoardErrors:
    """Rule violations visible on a board in progress."""
    touching_tents: Set[Coord] = field(default_factory=set)
    orphan_tents: Set[Coord] = field(default_factory=set)
    bad_rows: Set[int] = field(default_factory=set)
    bad_cols: Set[int] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        return not (self.touching_tents or self.orphan_tents or self.bad_rows or self.bad_cols)


def _line_has_empty(puzzle: Puzzle, grid: CellGrid, coords) -> bool:
    return any(grid[y][x] == Cell.EMPTY and not puzzle.is_tree(x, y) for x, y in coords)


def compute_errors(puzzle: Puzzle, grid: CellGrid) -> BoardErrors:
    """
    Collect the errors a player should see on the current board.

    A tent is flagged when it touches another tent (diagonals included) or
    has no orthogonal tree. A row or column is flagged when it holds more
    tents than its hint, or when it has no empty cells left and the count
    still doesn't match.
    """
    errors = BoardErrors()
    tents = tent_positions(puzzle, grid)

    for x, y in tents:
        for n in puzzle.all_neighbors(x, y):
            if n in tents:
                errors.touching_tents.add((x, y))
                errors.touching_tents.add(n)
        if not puzzle.has_adjacent_tree(x, y):
            errors.orphan_tents.add((x, y))

    for y in range(puzzle.height):
        want = puzzle.row_counts[y]
        have = row_tent_count(puzzle, grid, y)
        row = [(x, y) for x in range(puzzle.width)]
        if have > want or (have != want and not _line_has_empty(puzzle, grid, row)):
            errors.bad_rows.add(y)

    for x in range(puzzle.width):
        want = puzzle.col_counts[x]
        have = col_tent_count(puzzle, grid, x)
        col = [(x, y) for y in range(puzzle.height)]
        if have > want or (have != want and not _line_has_empty(puzzle, grid, col)):
            errors.bad_cols.add(x)

    return errors
