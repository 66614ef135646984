"""
Puzzle and board representation for Tents puzzles.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Set, Tuple
from enum import Enum

Coord = Tuple[int, int]  # (x, y)


class PuzzleError(ValueError):
    """Raised for structurally malformed puzzles or grids."""


class Cell(Enum):
    EMPTY = '.'
    TENT = '^'
    GRASS = '-'


CellGrid = List[List[Cell]]

# up, right, down, left
ORTHOGONAL_OFFSETS = [(0, -1), (1, 0), (0, 1), (-1, 0)]
ALL_OFFSETS = [(-1, -1), (0, -1), (1, -1),
               (-1, 0), (1, 0),
               (-1, 1), (0, 1), (1, 1)]


@dataclass(frozen=True)
class Puzzle:
    """
    A Tents puzzle: grid size, tree positions and per-line tent counts.

    Coordinates are (x, y) with x the column and y the row. The sum of
    row_counts, col_counts and the number of trees should agree, but that
    is not checked here; the solver reports no solution when it doesn't.
    """
    width: int
    height: int
    trees: FrozenSet[Coord]
    row_counts: Tuple[int, ...]
    col_counts: Tuple[int, ...]
    name: str = ""
    tree_list: Tuple[Coord, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'trees', frozenset((int(x), int(y)) for x, y in self.trees))
        object.__setattr__(self, 'row_counts', tuple(int(c) for c in self.row_counts))
        object.__setattr__(self, 'col_counts', tuple(int(c) for c in self.col_counts))

        if self.width <= 0 or self.height <= 0:
            raise PuzzleError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if len(self.row_counts) != self.height:
            raise PuzzleError(f"Expected {self.height} row counts, got {len(self.row_counts)}")
        if len(self.col_counts) != self.width:
            raise PuzzleError(f"Expected {self.width} column counts, got {len(self.col_counts)}")
        if any(c < 0 for c in self.row_counts + self.col_counts):
            raise PuzzleError("Tent counts must be non-negative")
        for x, y in self.trees:
            if not self.in_bounds(x, y):
                raise PuzzleError(f"Tree ({x},{y}) is outside the {self.width}x{self.height} grid")

        # Row-major order; this is the "input order" trees are processed in.
        object.__setattr__(self, 'tree_list', tuple(sorted(self.trees, key=lambda t: (t[1], t[0]))))

    @property
    def tent_total(self) -> int:
        return sum(self.row_counts)

    @property
    def is_balanced(self) -> bool:
        """True if row counts, column counts and tree count all agree."""
        return sum(self.row_counts) == sum(self.col_counts) == len(self.trees)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_tree(self, x: int, y: int) -> bool:
        return (x, y) in self.trees

    def orthogonal_neighbors(self, x: int, y: int) -> List[Coord]:
        """Cells sharing an edge with (x, y), clipped to the grid."""
        return [(x + dx, y + dy) for dx, dy in ORTHOGONAL_OFFSETS
                if self.in_bounds(x + dx, y + dy)]

    def all_neighbors(self, x: int, y: int) -> List[Coord]:
        """Cells sharing an edge or a corner with (x, y), clipped to the grid."""
        return [(x + dx, y + dy) for dx, dy in ALL_OFFSETS
                if self.in_bounds(x + dx, y + dy)]

    def has_adjacent_tree(self, x: int, y: int) -> bool:
        return any(self.is_tree(nx, ny) for nx, ny in self.orthogonal_neighbors(x, y))

    def cells(self) -> Iterable[Coord]:
        """All non-tree cells in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                if (x, y) not in self.trees:
                    yield (x, y)


def empty_grid(puzzle: Puzzle) -> CellGrid:
    return [[Cell.EMPTY] * puzzle.width for _ in range(puzzle.height)]


def copy_grid(grid: CellGrid) -> CellGrid:
    return [row.copy() for row in grid]


def check_grid_shape(puzzle: Puzzle, grid: CellGrid) -> None:
    """Raise PuzzleError if grid is not height x width."""
    if len(grid) != puzzle.height or any(len(row) != puzzle.width for row in grid):
        raise PuzzleError(f"Grid shape does not match the {puzzle.width}x{puzzle.height} puzzle")


def tent_positions(puzzle: Puzzle, grid: CellGrid) -> Set[Coord]:
    """Coordinates holding a tent, tree cells excluded."""
    return {(x, y) for (x, y) in puzzle.cells() if grid[y][x] == Cell.TENT}


def row_tent_count(puzzle: Puzzle, grid: CellGrid, y: int) -> int:
    return sum(1 for x in range(puzzle.width)
               if grid[y][x] == Cell.TENT and not puzzle.is_tree(x, y))


def col_tent_count(puzzle: Puzzle, grid: CellGrid, x: int) -> int:
    return sum(1 for y in range(puzzle.height)
               if grid[y][x] == Cell.TENT and not puzzle.is_tree(x, y))


def tents_touching(puzzle: Puzzle, tents: Set[Coord]) -> bool:
    """True if any two tents share an edge or a corner."""
    for x, y in tents:
        for n in puzzle.all_neighbors(x, y):
            if n in tents:
                return True
    return False
