"""Public entry points for verifying and solving maths puzzles."""

from __future__ import annotations
from itertools import islice
from typing import Any, Iterator, Optional

from .core.grid import PuzzleGrid, UNBOUND
from .core.checks import is_solution
from .solvers import BaseSolver, CPSolver


def _default_solver() -> BaseSolver:
    return CPSolver()


def puzzle_solution(grid: Any, solver: Optional[BaseSolver] = None) -> bool:
    """
    Decide whether the puzzle has a solution.

    A fully bound grid is verified directly. A partial grid is searched.
    When `grid` is a mutable list of lists and a solution exists, its
    unbound cells (None or 0) are filled in place with the solution.

    Args:
        grid: Nested lists, a numpy array, a string or a PuzzleGrid.
        solver: Solver to search with (default: CPSolver).

    Returns:
        True if some assignment of the unbound cells satisfies every constraint.

    Raises:
        GridShapeError: If the grid is not a square puzzle.
    """
    puzzle = PuzzleGrid.coerce(grid)
    if puzzle.is_complete():
        return is_solution(puzzle)

    solution = solve(puzzle, solver=solver)
    if solution is None:
        return False

    if isinstance(grid, list):
        for i, row in enumerate(grid):
            if i == 0 or not isinstance(row, list):
                continue
            for j in range(1, len(row)):
                if row[j] is None or row[j] == UNBOUND:
                    row[j] = solution.get(i, j)
    return True


def solve(grid: Any, solver: Optional[BaseSolver] = None) -> Optional[PuzzleGrid]:
    """
    Find one solution.

    Returns:
        The solved grid, or None when no assignment works or the solver's
        search bound was reached.
    """
    solver = solver or _default_solver()
    solution, _ = solver.solve(grid)
    return solution


def iter_solutions(
    grid: Any,
    limit: Optional[int] = None,
    solver: Optional[BaseSolver] = None,
) -> Iterator[PuzzleGrid]:
    """Yield solutions one at a time, stopping after `limit` if given."""
    solver = solver or _default_solver()
    return islice(solver.iter_solutions(grid), limit)


def count_solutions(grid: Any, limit: int = 2, solver: Optional[BaseSolver] = None) -> int:
    """
    Count the number of solutions for a puzzle (up to limit).

    Stops early once limit is reached.
    """
    return sum(1 for _ in iter_solutions(grid, limit=limit, solver=solver))


def has_unique_solution(grid: Any, solver: Optional[BaseSolver] = None) -> bool:
    """Check if a puzzle has exactly one solution."""
    return count_solutions(grid, limit=2, solver=solver) == 1
