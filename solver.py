"""
Backtracking solver for Tents puzzles.
Assigns every tree its own tent while keeping the player's tents and grass.
"""
import logging
import os
import sys
import threading
import time
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Set, Tuple

from grid import (
    Cell, CellGrid, Coord, Puzzle,
    check_grid_shape, copy_grid, empty_grid, tents_touching,
)

logger = logging.getLogger(__name__)

TIMEOUT_ENV_VAR = "TENTS_SOLVER_TIMEOUT"
NO_LIMIT = 0  # explicit "no time limit", ignores the environment


def resolve_timeout(timeout: Optional[float] = None) -> Optional[float]:
    """
    Resolve the solver time limit in seconds.

    Priority:
    1) explicit timeout argument (0 or less means no limit)
    2) env TENTS_SOLVER_TIMEOUT
    3) no limit (None)
    """
    raw = timeout if timeout is not None else os.getenv(TIMEOUT_ENV_VAR)
    if raw is None:
        return None

    try:
        value = float(raw)
        if value > 0:
            return value
    except (TypeError, ValueError):
        pass
    return None


@dataclass
class SolverResult:
    status: str  # solved, multiple, no-solution, timeout, cancelled
    solution: Optional[CellGrid]
    duration_ms: int
    solutions_found: int = 0
    steps: int = 0
    message: str = ""

    @property
    def solved(self) -> bool:
        return self.status in ("solved", "multiple")


@dataclass
class SolverState:
    """Mutable search state. Every trial change is undone on backtrack."""
    cells: CellGrid
    row_rem: List[int]
    col_rem: List[int]
    tents: Set[Coord]    # every tent on the board, fixed or placed by the search
    fixed: Set[Coord]    # tents the player placed before solving
    claimed: Set[Coord]  # tents assigned to a tree on the current branch
    assign: List[Optional[Coord]]


class _SearchAborted(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TentSolver:
    """
    Backtracking search over tree -> tent assignments.

    Trees are visited most-constrained first. For each tree the player's
    own tents are tried before new cells, so solutions stay close to what
    is already on the board. After each trial every tree still waiting for
    a tent must have at least one usable candidate, otherwise the branch
    is dropped.
    """

    def __init__(self, puzzle: Puzzle, max_solutions: int = 1,
                 timeout: Optional[float] = None,
                 stop_event: Optional[threading.Event] = None):
        self.puzzle = puzzle
        self.max_solutions = max(1, max_solutions)
        self.timeout = resolve_timeout(timeout)
        self.stop_event = stop_event
        self.solutions: List[CellGrid] = []
        self.steps = 0

        self._seen: Set[FrozenSet[Coord]] = set()
        self._deadline: Optional[float] = None

        self.trees: List[Coord] = list(puzzle.tree_list)

        # Candidate tent cells per tree, in geometric order
        self.candidates: List[List[Coord]] = [
            [n for n in puzzle.orthogonal_neighbors(tx, ty) if not puzzle.is_tree(*n)]
            for tx, ty in self.trees
        ]

        # MRV: fewest candidates first. sorted() is stable, so ties keep tree order.
        self.order: List[int] = sorted(range(len(self.trees)),
                                       key=lambda i: len(self.candidates[i]))

    def _initial_state(self, grid: CellGrid) -> Optional[SolverState]:
        """Build the search state from the board, or None if it already breaks a rule."""
        puzzle = self.puzzle
        state = SolverState(
            cells=grid,
            row_rem=list(puzzle.row_counts),
            col_rem=list(puzzle.col_counts),
            tents=set(),
            fixed=set(),
            claimed=set(),
            assign=[None] * len(self.trees),
        )

        for y in range(puzzle.height):
            for x in range(puzzle.width):
                if grid[y][x] != Cell.TENT:
                    continue
                if puzzle.is_tree(x, y):
                    logger.debug("Tent on tree cell (%d,%d)", x, y)
                    return None
                state.tents.add((x, y))
                state.fixed.add((x, y))
                state.row_rem[y] -= 1
                state.col_rem[x] -= 1

        if any(r < 0 for r in state.row_rem) or any(c < 0 for c in state.col_rem):
            logger.debug("Fixed tents already exceed a row or column count")
            return None
        if tents_touching(puzzle, state.tents):
            logger.debug("Fixed tents touch each other")
            return None
        for x, y in state.fixed:
            if not puzzle.has_adjacent_tree(x, y):
                logger.debug("Fixed tent (%d,%d) has no adjacent tree", x, y)
                return None

        return state

    def _can_reuse(self, state: SolverState, cell: Coord) -> bool:
        """A player tent can serve a tree if no other tree has claimed it."""
        return cell in state.fixed and cell not in state.claimed

    def _can_place(self, state: SolverState, cell: Coord) -> bool:
        """Check whether a new tent may go on cell."""
        x, y = cell
        if self.puzzle.is_tree(x, y):
            return False
        # Player grass is respected; an existing tent here is either claimed
        # or was offered for reuse already.
        if state.cells[y][x] != Cell.EMPTY:
            return False
        if state.row_rem[y] <= 0 or state.col_rem[x] <= 0:
            return False
        for n in self.puzzle.all_neighbors(x, y):
            if n in state.tents:
                return False
        return True

    def _has_option(self, state: SolverState, tree_idx: int) -> bool:
        return any(self._can_reuse(state, c) or self._can_place(state, c)
                   for c in self.candidates[tree_idx])

    def _forward_check(self, state: SolverState, depth: int) -> bool:
        """Reject the branch if a count went negative or a pending tree is starved."""
        if any(r < 0 for r in state.row_rem) or any(c < 0 for c in state.col_rem):
            return False
        for tree_idx in self.order[depth:]:
            if not self._has_option(state, tree_idx):
                return False
        return True

    def _place(self, state: SolverState, tree_idx: int, cell: Coord) -> None:
        x, y = cell
        state.claimed.add(cell)
        state.tents.add(cell)
        state.assign[tree_idx] = cell
        state.cells[y][x] = Cell.TENT
        state.row_rem[y] -= 1
        state.col_rem[x] -= 1

    def _unplace(self, state: SolverState, tree_idx: int, cell: Coord) -> None:
        x, y = cell
        state.col_rem[x] += 1
        state.row_rem[y] += 1
        state.cells[y][x] = Cell.EMPTY
        state.assign[tree_idx] = None
        state.tents.discard(cell)
        state.claimed.discard(cell)

    def _is_complete(self, state: SolverState) -> bool:
        """All counts met exactly and no tent left without a tree."""
        if any(r != 0 for r in state.row_rem) or any(c != 0 for c in state.col_rem):
            return False
        return len(state.claimed) == len(state.tents)

    def _record(self, state: SolverState) -> None:
        signature = frozenset(state.tents)
        if signature in self._seen:
            return
        self._seen.add(signature)

        solution = copy_grid(state.cells)
        fill_grass(self.puzzle, solution)
        self.solutions.append(solution)

    def _check_abort(self) -> None:
        self.steps += 1
        if self.stop_event is not None and self.stop_event.is_set():
            raise _SearchAborted("cancelled")
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise _SearchAborted("timeout")

    def _backtrack(self, state: SolverState, depth: int) -> bool:
        """Recursive search. Returns True once enough solutions are found."""
        self._check_abort()

        if depth == len(self.order):
            if self._is_complete(state):
                self._record(state)
            return len(self.solutions) >= self.max_solutions

        tree_idx = self.order[depth]
        # Player tents first, then the rest in geometric order
        options = sorted(self.candidates[tree_idx], key=lambda c: c not in state.fixed)

        for cell in options:
            if self._can_reuse(state, cell):
                # Already counted against its row and column
                state.claimed.add(cell)
                state.assign[tree_idx] = cell

                if self._forward_check(state, depth + 1) and self._backtrack(state, depth + 1):
                    return True

                state.assign[tree_idx] = None
                state.claimed.discard(cell)
                continue

            if not self._can_place(state, cell):
                continue

            self._place(state, tree_idx, cell)

            if self._forward_check(state, depth + 1) and self._backtrack(state, depth + 1):
                return True

            self._unplace(state, tree_idx, cell)

        return False

    def run(self, grid: CellGrid) -> SolverResult:
        """
        Complete grid in place. On success grid holds the first solution
        found, with every open cell turned to grass. On any other outcome
        the contents of grid are undefined.
        """
        check_grid_shape(self.puzzle, grid)

        start = time.perf_counter()
        self.solutions = []
        self._seen = set()
        self.steps = 0
        self._deadline = time.monotonic() + self.timeout if self.timeout else None

        def elapsed_ms() -> int:
            return int((time.perf_counter() - start) * 1000)

        state = self._initial_state(grid)
        if state is None:
            return SolverResult(
                status="no-solution",
                solution=None,
                duration_ms=elapsed_ms(),
                message="Current board already breaks a rule.",
            )

        # One frame per tree; the old limit is put back when the search ends
        old_limit = sys.getrecursionlimit()
        needed = len(self.trees) + 200
        if old_limit < needed:
            sys.setrecursionlimit(needed)

        logger.info("Solving %dx%d puzzle with %d trees", self.puzzle.width,
                    self.puzzle.height, len(self.trees))
        aborted = None
        try:
            self._backtrack(state, 0)
        except _SearchAborted as e:
            aborted = e.reason
        finally:
            if old_limit < needed:
                sys.setrecursionlimit(old_limit)
        duration_ms = elapsed_ms()
        logger.info("Search ended in %d ms after %d steps; solutions found %d",
                    duration_ms, self.steps, len(self.solutions))

        solution = None
        if self.solutions:
            for y, row in enumerate(self.solutions[0]):
                grid[y][:] = row
            solution = grid

        if aborted is not None:
            return SolverResult(
                status=aborted,
                solution=solution,
                duration_ms=duration_ms,
                solutions_found=len(self.solutions),
                steps=self.steps,
                message=f"Search stopped early ({aborted}).",
            )
        if not self.solutions:
            return SolverResult(
                status="no-solution",
                solution=None,
                duration_ms=duration_ms,
                steps=self.steps,
                message="No solution found from current state.",
            )
        if len(self.solutions) > 1:
            return SolverResult(
                status="multiple",
                solution=solution,
                duration_ms=duration_ms,
                solutions_found=len(self.solutions),
                steps=self.steps,
                message="Multiple solutions exist.",
            )
        return SolverResult(
            status="solved",
            solution=solution,
            duration_ms=duration_ms,
            solutions_found=1,
            steps=self.steps,
            message="Solved successfully.",
        )


def fill_grass(puzzle: Puzzle, grid: CellGrid) -> None:
    """Turn every empty non-tree cell into grass."""
    for x, y in puzzle.cells():
        if grid[y][x] == Cell.EMPTY:
            grid[y][x] = Cell.GRASS


def solve(puzzle: Puzzle, grid: CellGrid) -> Optional[CellGrid]:
    """
    Complete grid into a full solution, keeping the player's tents.
    Returns the mutated grid, or None if no solution exists from this state.
    Runs without a time limit, so None always means unsolvable.
    """
    result = TentSolver(puzzle, timeout=NO_LIMIT).run(grid)
    return result.solution if result.status == "solved" else None


def count_solutions(puzzle: Puzzle, limit: int = 2,
                    grid: Optional[CellGrid] = None) -> int:
    """Count distinct solutions from grid (default: empty board), up to limit."""
    work = copy_grid(grid) if grid is not None else empty_grid(puzzle)
    result = TentSolver(puzzle, max_solutions=limit, timeout=NO_LIMIT).run(work)
    return result.solutions_found


def verify_puzzle_uniqueness(puzzle: Puzzle) -> Tuple[bool, int]:
    """
    Verify a puzzle has a unique solution.
    Returns (is_unique, solution_count).
    """
    count = count_solutions(puzzle, limit=2)
    return count == 1, count
