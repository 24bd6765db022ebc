"""Depth-First Search solver with backtracking and forward checking."""

from __future__ import annotations
from typing import Iterator, List, Tuple, Optional
import logging

from .base_solver import BaseSolver, SearchRun
from ..core.grid import PuzzleGrid
from ..core.checks import candidate_digits, diagonal_holds, line_feasible, is_solution

log = logging.getLogger(__name__)

Trail = List[Tuple[int, int]]


class DFSSolver(BaseSolver):
    """
    Depth-First Search solver using recursive backtracking.

    Features:
    - Unbound cells are bound in row-major order, digits tried 1 to 9
    - Every binding is pushed on an undo trail and popped on failure
    - Forward checking of the affected row, column and diagonal
    """

    name = "DFS+Backtracking"

    def __init__(
        self,
        forward_checking: bool = True,
        max_nodes: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize the DFS solver.

        Args:
            forward_checking: If True, reject a partial assignment as soon
                              as one of its lines can no longer be completed.
                              If False, only complete grids are checked.
        """
        super().__init__(max_nodes=max_nodes, timeout_seconds=timeout_seconds)
        self.forward_checking = forward_checking

    def _search(self, grid: PuzzleGrid, run: SearchRun) -> Iterator[PuzzleGrid]:
        """Enumerate solutions using DFS with backtracking."""
        if self.forward_checking and not self._all_consistent(grid):
            log.debug("Fixed cells already violate a constraint")
            return

        cells = grid.unbound_cells()
        log.debug("Searching %d unbound cells", len(cells))
        yield from self._backtrack(grid, cells, 0, [], run)

    def _backtrack(
        self,
        grid: PuzzleGrid,
        cells: List[Tuple[int, int]],
        index: int,
        trail: Trail,
        run: SearchRun,
    ) -> Iterator[PuzzleGrid]:
        run.tick()

        if index == len(cells):
            if is_solution(grid):
                yield grid
            return

        row, col = cells[index]
        for value in candidate_digits():
            mark = self._bind(grid, trail, row, col, value)

            if not self.forward_checking or self._consistent_at(grid, row, col):
                yield from self._backtrack(grid, cells, index + 1, trail, run)

            self._undo_to(grid, trail, mark)
            run.stats.backtracks += 1

    @staticmethod
    def _bind(grid: PuzzleGrid, trail: Trail, row: int, col: int, value: int) -> int:
        """Bind a cell and record it. Returns the trail mark to undo to."""
        mark = len(trail)
        grid.set(row, col, value)
        trail.append((row, col))
        return mark

    @staticmethod
    def _undo_to(grid: PuzzleGrid, trail: Trail, mark: int) -> None:
        """Unbind every cell bound since `mark`."""
        while len(trail) > mark:
            row, col = trail.pop()
            grid.clear(row, col)

    def _consistent_at(self, grid: PuzzleGrid, row: int, col: int) -> bool:
        """Check the constraints touching a freshly bound cell."""
        if row == col and not diagonal_holds(grid.body_rows()):
            return False
        header, cells = grid.row_line(row)
        if not line_feasible(header, cells):
            return False
        header, cells = grid.col_line(col)
        return line_feasible(header, cells)

    def _all_consistent(self, grid: PuzzleGrid) -> bool:
        """Check every constraint against the cells bound so far."""
        if not diagonal_holds(grid.body_rows()):
            return False
        for i in range(1, grid.size):
            if not line_feasible(*grid.row_line(i)):
                return False
            if not line_feasible(*grid.col_line(i)):
                return False
        return True
