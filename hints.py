"""
Player assistance built on the solver: hint moves, safe grass marking
and click cycling of cell states.
"""
import random
from dataclasses import dataclass
from typing import List, Optional

from grid import (
    Cell, CellGrid, Coord, Puzzle,
    check_grid_shape, col_tent_count, copy_grid, row_tent_count,
)
from solver import solve


class NoSolutionError(Exception):
    """Raised when no solution can be reached from the current board."""


@dataclass(frozen=True)
class HintMove:
    x: int
    y: int
    cell: Cell

    def __str__(self):
        what = "tent" if self.cell == Cell.TENT else "grass"
        return f"Place {what} at ({self.x},{self.y})"


def pick_hint_move(puzzle: Puzzle, grid: CellGrid, solution: CellGrid,
                   rng: Optional[random.Random] = None) -> Optional[HintMove]:
    """
    Pick one cell where the board and the solution disagree.

    Tent moves come before grass moves. A tent the player placed is never
    suggested for removal, even if the solution has grass there. Without
    rng the first candidate in row-major order is returned.
    """
    tent_moves: List[HintMove] = []
    grass_moves: List[HintMove] = []

    for x, y in puzzle.cells():
        cur = grid[y][x]
        sol = solution[y][x]
        if cur == sol:
            continue
        if cur == Cell.TENT:
            continue

        if sol == Cell.TENT:
            tent_moves.append(HintMove(x, y, sol))
        elif sol == Cell.GRASS:
            grass_moves.append(HintMove(x, y, sol))

    for moves in (tent_moves, grass_moves):
        if moves:
            return rng.choice(moves) if rng is not None else moves[0]
    return None


def hint(puzzle: Puzzle, grid: CellGrid,
         rng: Optional[random.Random] = None) -> Optional[HintMove]:
    """
    Solve from the current board and suggest a single move.
    Returns None when the board already agrees with the solution.
    """
    solution = solve(puzzle, copy_grid(grid))
    if solution is None:
        raise NoSolutionError("No solution found from current state.")
    return pick_hint_move(puzzle, grid, solution, rng)


def _can_never_be_tent(puzzle: Puzzle, grid: CellGrid, x: int, y: int) -> bool:
    if not puzzle.has_adjacent_tree(x, y):
        return True
    return any(grid[ny][nx] == Cell.TENT for nx, ny in puzzle.all_neighbors(x, y))


def safe_grass_cells(puzzle: Puzzle, grid: CellGrid) -> List[Coord]:
    """
    Empty cells that can never hold a tent: no orthogonal tree, or
    touching a tent already on the board.
    """
    check_grid_shape(puzzle, grid)
    return [(x, y) for x, y in puzzle.cells()
            if grid[y][x] == Cell.EMPTY and _can_never_be_tent(puzzle, grid, x, y)]


def auto_grass(puzzle: Puzzle, grid: CellGrid) -> bool:
    """Mark every safe grass cell. Returns True if anything changed."""
    targets = safe_grass_cells(puzzle, grid)
    for x, y in targets:
        grid[y][x] = Cell.GRASS
    return bool(targets)


def line_grass_cells(puzzle: Puzzle, grid: CellGrid, axis: str, index: int) -> List[Coord]:
    """
    Guaranteed grass in one row or column.

    Once the line holds as many tents as its hint, all of its empty cells
    are grass. Otherwise only cells that could never be a tent qualify.
    """
    check_grid_shape(puzzle, grid)
    if axis == "row":
        want = puzzle.row_counts[index]
        have = row_tent_count(puzzle, grid, index)
        line = [(x, index) for x in range(puzzle.width)]
    elif axis == "col":
        want = puzzle.col_counts[index]
        have = col_tent_count(puzzle, grid, index)
        line = [(index, y) for y in range(puzzle.height)]
    else:
        raise ValueError(f"axis must be 'row' or 'col', not {axis!r}")

    satisfied = have >= want
    targets = []
    for x, y in line:
        if puzzle.is_tree(x, y) or grid[y][x] != Cell.EMPTY:
            continue
        if satisfied or _can_never_be_tent(puzzle, grid, x, y):
            targets.append((x, y))
    return targets


def cycle_cell(cell: Cell, right_click: bool = False) -> Cell:
    """
    Next state for a clicked cell.
    Left click: EMPTY -> TENT -> GRASS -> EMPTY. Right click: EMPTY <-> GRASS.
    """
    if right_click:
        return Cell.GRASS if cell == Cell.EMPTY else Cell.EMPTY
    if cell == Cell.EMPTY:
        return Cell.TENT
    if cell == Cell.TENT:
        return Cell.GRASS
    return Cell.EMPTY
