"""Base solver interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Iterator
import logging
import time
import tracemalloc

from ..core.grid import PuzzleGrid
from ..core.checks import is_solution

log = logging.getLogger(__name__)


class SearchLimitExceeded(RuntimeError):
    """Raised when a search runs past its node or time bound."""


@dataclass
class SolverStats:
    """Statistics from a solver run."""
    # Core metrics
    solved: bool = False
    time_seconds: float = 0.0
    memory_bytes: int = 0
    iterations: int = 0

    # Search metrics
    backtracks: int = 0
    nodes_explored: int = 0

    # Additional metadata
    algorithm: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solved": self.solved,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "algorithm": self.algorithm,
            **self.extra
        }


class SearchRun:
    """
    Bookkeeping for one search: its stats and its bounds.

    Each call to solve or iter_solutions gets its own run, so several
    searches on one solver never share counters or deadlines.
    """

    def __init__(self, algorithm: str, max_nodes: Optional[int], timeout_seconds: Optional[float]):
        self.stats = SolverStats(algorithm=algorithm)
        self.max_nodes = max_nodes
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is not None:
            self.deadline: Optional[float] = time.perf_counter() + timeout_seconds
        else:
            self.deadline = None

    def tick(self) -> None:
        """Count one search node and enforce the search bounds."""
        self.stats.iterations += 1
        self.stats.nodes_explored += 1
        if self.max_nodes is not None and self.stats.nodes_explored > self.max_nodes:
            raise SearchLimitExceeded(f"node limit {self.max_nodes} reached")
        if self.deadline is not None and time.perf_counter() > self.deadline:
            raise SearchLimitExceeded(f"time limit {self.timeout_seconds}s reached")


class BaseSolver(ABC):
    """Abstract base class for maths puzzle solvers."""

    name: str = "BaseSolver"

    def __init__(self, max_nodes: Optional[int] = None, timeout_seconds: Optional[float] = None):
        """
        Args:
            max_nodes: Abort the search after this many search nodes.
            timeout_seconds: Abort the search after this much wall time.
        """
        self.max_nodes = max_nodes
        self.timeout_seconds = timeout_seconds
        self.stats = SolverStats(algorithm=self.name)

    def solve(self, grid: Any) -> tuple[Optional[PuzzleGrid], SolverStats]:
        """
        Find one solution with timing and memory tracking.

        Args:
            grid: The puzzle to solve, in any form PuzzleGrid.coerce accepts.

        Returns:
            Tuple of (solution or None, stats).

        Raises:
            GridShapeError: If the grid is malformed.
        """
        puzzle = PuzzleGrid.coerce(grid)
        run = self._start()
        stats = run.stats

        tracemalloc.start()
        start_time = time.perf_counter()

        search = self._search(puzzle.copy(), run)
        try:
            solution = next(search, None)
            if solution is not None:
                solution = solution.copy()
        except SearchLimitExceeded as e:
            log.warning("%s gave up: %s", self.name, e)
            stats.extra["error"] = str(e)
            solution = None
        finally:
            search.close()
            stats.time_seconds = time.perf_counter() - start_time
            current, peak = tracemalloc.get_traced_memory()
            tracemalloc.stop()
            stats.memory_bytes = peak

        stats.solved = solution is not None and is_solution(solution)
        log.info(
            "%s finished: solved=%s nodes=%d backtracks=%d in %.4fs",
            self.name, stats.solved, stats.nodes_explored,
            stats.backtracks, stats.time_seconds,
        )
        return solution, stats

    def iter_solutions(self, grid: Any) -> Iterator[PuzzleGrid]:
        """
        Yield every solution of the puzzle, one at a time.

        The search resumes from where it left off each time the next
        solution is requested. Each yielded grid is an independent copy,
        and several generators on one solver can be interleaved.

        Raises:
            GridShapeError: If the grid is malformed.
            SearchLimitExceeded: If a node or time bound is hit.
        """
        puzzle = PuzzleGrid.coerce(grid)
        run = self._start()
        for solution in self._search(puzzle.copy(), run):
            run.stats.solved = True
            yield solution.copy()

    def _start(self) -> SearchRun:
        run = SearchRun(self.name, self.max_nodes, self.timeout_seconds)
        self.stats = run.stats
        return run

    @abstractmethod
    def _search(self, grid: PuzzleGrid, run: SearchRun) -> Iterator[PuzzleGrid]:
        """
        Internal search to be implemented by subclasses.

        Args:
            grid: A copy of the puzzle (can be modified).
            run: Stats and bounds of this search; call run.tick() per node.

        Yields:
            The working grid each time it holds a solution. Callers copy it
            before resuming the search.
        """
        pass

    def reset_stats(self) -> None:
        """Reset solver statistics."""
        self.stats = SolverStats(algorithm=self.name)
