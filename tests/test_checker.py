from checker import check_solved, compute_errors
from grid import Cell, Puzzle, copy_grid, empty_grid


def test_solved_board(small_puzzle, small_solution):
    assert check_solved(small_puzzle, small_solution)


def test_check_is_idempotent(small_puzzle, small_solution):
    before = copy_grid(small_solution)
    first = check_solved(small_puzzle, small_solution)
    second = check_solved(small_puzzle, small_solution)
    assert first == second
    assert small_solution == before


def test_moving_a_tent_into_contact_fails(small_puzzle, small_solution):
    grid = copy_grid(small_solution)
    grid[3][3] = Cell.GRASS
    grid[1][1] = Cell.TENT  # diagonal to (0,0)
    assert not check_solved(small_puzzle, grid)


def test_touching_tents_fail_even_with_right_counts():
    # T ^ ^ T
    # . . . .
    puzzle = Puzzle(4, 2, frozenset({(0, 0), (3, 0)}), (2, 0), (0, 1, 1, 0))
    grid = empty_grid(puzzle)
    grid[0][1] = Cell.TENT
    grid[0][2] = Cell.TENT
    assert not check_solved(puzzle, grid)


def test_tent_without_tree_fails():
    # T . .
    # . . ^
    puzzle = Puzzle(3, 2, frozenset({(0, 0)}), (0, 1), (0, 0, 1))
    grid = empty_grid(puzzle)
    grid[1][2] = Cell.TENT
    assert not check_solved(puzzle, grid)


def test_two_trees_one_tent_fails_matching():
    # T ^ T with counts matching the single tent
    puzzle = Puzzle(3, 1, frozenset({(0, 0), (2, 0)}), (1,), (0, 1, 0))
    grid = empty_grid(puzzle)
    grid[0][1] = Cell.TENT
    assert not check_solved(puzzle, grid)


def test_wrong_counts_fail(small_puzzle):
    assert not check_solved(small_puzzle, empty_grid(small_puzzle))


def test_no_trees_empty_board_is_solved(empty_puzzle):
    assert check_solved(empty_puzzle, empty_grid(empty_puzzle))
    grass = [[Cell.GRASS, Cell.EMPTY], [Cell.GRASS, Cell.GRASS]]
    assert check_solved(empty_puzzle, grass)


def test_errors_clean_board(small_puzzle, small_solution):
    assert compute_errors(small_puzzle, small_solution).ok
    assert compute_errors(small_puzzle, empty_grid(small_puzzle)).ok


def test_errors_touching_and_orphan(small_puzzle):
    grid = empty_grid(small_puzzle)
    grid[0][0] = Cell.TENT
    grid[1][1] = Cell.TENT
    grid[2][0] = Cell.TENT  # (0,2): no orthogonal tree, diagonal to (1,1)
    errors = compute_errors(small_puzzle, grid)
    assert errors.touching_tents == {(0, 0), (1, 1), (0, 2)}
    assert errors.orphan_tents == {(0, 2)}
    assert not errors.ok


def test_errors_row_over_count(small_puzzle):
    grid = empty_grid(small_puzzle)
    grid[0][0] = Cell.TENT
    grid[0][2] = Cell.TENT
    errors = compute_errors(small_puzzle, grid)
    assert errors.bad_rows == {0}
    assert errors.bad_cols == {2}


def test_errors_full_line_short_of_count(small_puzzle):
    grid = empty_grid(small_puzzle)
    for x in (0, 1, 3):
        grid[3][x] = Cell.GRASS
    errors = compute_errors(small_puzzle, grid)
    assert errors.bad_rows == {3}
    assert errors.bad_cols == set()
