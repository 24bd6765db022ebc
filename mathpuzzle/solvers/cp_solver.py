"""Constraint Programming (CP) solver using finite-domain propagation."""

from __future__ import annotations
from math import prod
from typing import Iterator, List, Dict, Set, Tuple, Optional
import logging

from .base_solver import BaseSolver, SearchRun
from ..core.grid import PuzzleGrid
from ..core.checks import candidate_digits, is_valid_digit, is_solution

log = logging.getLogger(__name__)

Cell = Tuple[int, int]
Domains = Dict[Cell, Set[int]]
Lines = List[Tuple[int, List[Cell]]]


class CPSolver(BaseSolver):
    """
    Maths puzzle solver using Constraint Programming (CP) techniques.

    This solver uses:
    - Domain tracking: Each body cell has a set of possible digits.
    - Diagonal propagation: all diagonal cells share one domain.
    - Line propagation: distinctness against bound cells, plus removal of
      digits that no sum or product completion of the line supports.
    - Hybrid Search: If propagation stalls, branches on the smallest
      domain (MRV) and propagates again.

    Domains live only inside one search, so a solver can run several
    searches at once.
    """

    name = "Constraint Programming"

    def __init__(
        self,
        use_backup_backtracking: bool = True,
        max_nodes: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(max_nodes=max_nodes, timeout_seconds=timeout_seconds)
        self.use_backup_backtracking = use_backup_backtracking

    def _search(self, grid: PuzzleGrid, run: SearchRun) -> Iterator[PuzzleGrid]:
        """Enumerate solutions using propagation and domain backtracking."""
        run.tick()
        diagonal = [(i, i) for i in range(1, grid.size)]
        lines = self._lines(grid)
        domains = self._initialize_domains(grid)

        if not self._propagate(domains, lines, diagonal):
            log.debug("Initial propagation emptied a domain")
            return

        if all(len(d) == 1 for d in domains.values()):
            self._write(grid, domains)
            if is_solution(grid):
                yield grid
            return

        if self.use_backup_backtracking:
            yield from self._backtrack_on_domains(grid, domains, lines, diagonal, run)

    def propagated_domains(self, grid: PuzzleGrid) -> Optional[Domains]:
        """
        Domains of every body cell after propagation alone.

        Returns:
            None if propagation proves the puzzle has no solution.
        """
        domains = self._initialize_domains(grid)
        diagonal = [(i, i) for i in range(1, grid.size)]
        if not self._propagate(domains, self._lines(grid), diagonal):
            return None
        return domains

    def _initialize_domains(self, grid: PuzzleGrid) -> Domains:
        """Initialize each body cell's domain with 1-9 or its fixed value."""
        domains = {}
        for r in range(1, grid.size):
            for c in range(1, grid.size):
                val = grid.get(r, c)
                if grid.is_empty(r, c):
                    domains[(r, c)] = set(candidate_digits())
                elif is_valid_digit(val):
                    domains[(r, c)] = {val}
                else:
                    domains[(r, c)] = set()
        return domains

    def _lines(self, grid: PuzzleGrid) -> Lines:
        """Every row and column as (header, cell positions)."""
        lines = []
        n = grid.size
        for i in range(1, n):
            lines.append((grid.get(i, 0), [(i, j) for j in range(1, n)]))
            lines.append((grid.get(0, i), [(j, i) for j in range(1, n)]))
        return lines

    def _propagate(self, domains: Domains, lines: Lines, diagonal: List[Cell]) -> bool:
        """
        Prune domains to a fixpoint.

        Returns:
            False as soon as some domain becomes empty.
        """
        if any(not d for d in domains.values()):
            return False

        changed = True
        while changed:
            changed = False

            common = set.intersection(*(domains[pos] for pos in diagonal))
            if not common:
                return False
            for pos in diagonal:
                if domains[pos] != common:
                    domains[pos] = set(common)
                    changed = True

            for header, cells in lines:
                result = self._revise_line(domains, header, cells)
                if result is None:
                    return False
                changed |= result

        return True

    def _revise_line(self, domains: Domains, header: int, cells: List[Cell]) -> Optional[bool]:
        """
        Prune one line. Returns None on a wipe-out, else whether anything changed.
        """
        singles = [next(iter(domains[pos])) for pos in cells if len(domains[pos]) == 1]
        if len(singles) != len(set(singles)):
            return None

        changed = False
        for pos in cells:
            domain = domains[pos]
            if len(domain) > 1 and domain & set(singles):
                domain -= set(singles)
                changed = True

            others = [domains[other] for other in cells if other != pos]
            unsupported = {v for v in domain if not self._supported(header, v, others)}
            if unsupported:
                domain -= unsupported
                changed = True

            if not domain:
                return None
        return changed

    @staticmethod
    def _supported(header: int, value: int, others: List[Set[int]]) -> bool:
        """Whether `value` in one cell leaves the header reachable by sum or product."""
        low_sum = value + sum(min(d) for d in others)
        high_sum = value + sum(max(d) for d in others)
        if low_sum <= header <= high_sum:
            return True

        fixed = value * prod(next(iter(d)) for d in others if len(d) == 1)
        if header <= 0 or header % fixed != 0:
            return False
        low_prod = value * prod(min(d) for d in others)
        high_prod = value * prod(max(d) for d in others)
        return low_prod <= header <= high_prod

    def _write(self, grid: PuzzleGrid, domains: Domains) -> None:
        for (r, c), domain in domains.items():
            grid.set(r, c, next(iter(domain)))

    def _backtrack_on_domains(
        self,
        grid: PuzzleGrid,
        domains: Domains,
        lines: Lines,
        diagonal: List[Cell],
        run: SearchRun,
    ) -> Iterator[PuzzleGrid]:
        """Backtracking on pruned domains with the MRV heuristic."""
        run.tick()

        open_cells = [pos for pos, d in domains.items() if len(d) > 1]
        if not open_cells:
            self._write(grid, domains)
            if is_solution(grid):
                yield grid
            return

        pos = min(open_cells, key=lambda p: (len(domains[p]), p))

        for val in sorted(domains[pos]):
            local = {p: d.copy() for p, d in domains.items()}
            local[pos] = {val}

            if self._propagate(local, lines, diagonal):
                yield from self._backtrack_on_domains(grid, local, lines, diagonal, run)
            else:
                log.debug("%s=%d wiped out a domain", pos, val)
            run.stats.backtracks += 1
