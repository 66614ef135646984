"""
Solver Worker
=============
Runs the Tents solver on a background thread so an interactive caller
stays responsive.

Provides:
- Background thread execution on a private copy of the board
- Optional time limit
- Clean stop mechanism via threading.Event
"""

import threading
from typing import Optional

from grid import CellGrid, Puzzle, copy_grid
from solver import SolverResult, TentSolver


class SolverWorker:
    """
    Runs TentSolver in a daemon thread.

    Usage:
        worker = SolverWorker(puzzle, grid, timeout=5.0)
        worker.start()

        # Poll from the UI thread:
        if worker.is_done():
            result = worker.get_result()
    """

    def __init__(
        self,
        puzzle: Puzzle,
        grid: CellGrid,
        timeout: Optional[float] = None,
        max_solutions: int = 1,
        label: str = "solver",
    ):
        self.puzzle = puzzle
        # Never share the caller's board with the solver thread. Each run
        # gets a fresh copy; an aborted search leaves its trial tents behind.
        self._initial = copy_grid(grid)
        self.grid = copy_grid(self._initial)
        self.timeout = timeout
        self.max_solutions = max_solutions
        self.label = label

        self.stop_event = threading.Event()
        self.done_event = threading.Event()
        self._result: Optional[SolverResult] = None
        self._error: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None

    # ── Public API ─────────────────────────────────────────────

    def start(self):
        """Launch the solver in a background daemon thread."""
        self.stop_event.clear()
        self.done_event.clear()
        self._result = None
        self._error = None
        self.grid = copy_grid(self._initial)

        self._thread = threading.Thread(target=self._run, name=self.label, daemon=True)
        self._thread.start()

    def stop(self):
        """Ask the solver to stop at its next step."""
        self.stop_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker to finish. Returns True if it did."""
        return self.done_event.wait(timeout)

    def is_done(self) -> bool:
        return self.done_event.is_set()

    def get_result(self) -> Optional[SolverResult]:
        """Return the solver result. None if not yet done or if it failed."""
        if not self.done_event.is_set():
            return None
        return self._result

    def get_error(self) -> Optional[Exception]:
        return self._error

    # ── Internal ───────────────────────────────────────────────

    def _run(self):
        solver = TentSolver(
            self.puzzle,
            max_solutions=self.max_solutions,
            timeout=self.timeout,
            stop_event=self.stop_event,
        )
        try:
            self._result = solver.run(self.grid)
        except Exception as e:
            self._error = e
        finally:
            self.done_event.set()
