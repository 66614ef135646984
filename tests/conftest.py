import pytest

from grid import Cell, Puzzle, empty_grid


@pytest.fixture
def small_puzzle():
    """
    4x4, trees at (1,0) and (2,3). Unique solution: tents at (0,0) and (3,3).

        1 0 0 1
        .T.. 1
        .... 0
        .... 0
        ..T. 1
    """
    return Puzzle(
        width=4,
        height=4,
        trees=frozenset({(1, 0), (2, 3)}),
        row_counts=(1, 0, 0, 1),
        col_counts=(1, 0, 0, 1),
        name="small",
    )


@pytest.fixture
def small_solution(small_puzzle):
    grid = empty_grid(small_puzzle)
    for x, y in small_puzzle.cells():
        grid[y][x] = Cell.GRASS
    grid[0][0] = Cell.TENT
    grid[3][3] = Cell.TENT
    return grid


@pytest.fixture
def ambiguous_puzzle():
    """
    3x3, trees at (1,0) and (1,2). Exactly two solutions:
    {(0,0), (2,2)} and {(2,0), (0,2)}.
    """
    return Puzzle(
        width=3,
        height=3,
        trees=frozenset({(1, 0), (1, 2)}),
        row_counts=(1, 0, 1),
        col_counts=(1, 0, 1),
    )


@pytest.fixture
def empty_puzzle():
    return Puzzle(width=2, height=2, trees=frozenset(), row_counts=(0, 0), col_counts=(0, 0))


@pytest.fixture
def detour_puzzle():
    """
    4x3, trees at (1,0), (3,1) and (1,2). Unique solution: tents at
    (0,0), (3,0) and (2,2).

        1 0 1 1
        .T.. 2
        ...T 0
        .T.. 1

    The search tries (2,0) for the first tree. That passes the forward
    check but leads nowhere, so a stop right after it leaves a wrong tent
    on the working board.
    """
    return Puzzle(
        width=4,
        height=3,
        trees=frozenset({(1, 0), (3, 1), (1, 2)}),
        row_counts=(2, 0, 1),
        col_counts=(1, 0, 1, 1),
    )
