"""Benchmarking framework for comparing maths puzzle solvers."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union
from concurrent.futures import ThreadPoolExecutor, TimeoutError
import copy
import json
import logging
import os
import time

from tqdm import tqdm

from ..core.grid import PuzzleGrid
from ..solvers import BaseSolver, DFSSolver, CPSolver

log = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    puzzle_id: str
    algorithm: str
    solved: bool
    time_seconds: float
    memory_bytes: int
    iterations: int
    backtracks: int
    nodes_explored: int
    solution: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle_id": self.puzzle_id,
            "algorithm": self.algorithm,
            "solved": self.solved,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "solution": self.solution,
            **self.extra
        }


def load_puzzles(path: str) -> Dict[str, PuzzleGrid]:
    """
    Load puzzles from a JSON file.

    The file holds either an object mapping names to puzzles or a list of
    puzzles. Each puzzle is a nested list (null for unbound cells) or a
    string accepted by PuzzleGrid.from_string.
    """
    with open(path, "r") as f:
        data = json.load(f)

    if isinstance(data, dict):
        items = data.items()
    elif isinstance(data, list):
        items = ((f"puzzle_{i}", p) for i, p in enumerate(data, 1))
    else:
        raise ValueError(f"{path}: expected a JSON object or list, got {type(data).__name__}")

    return {str(name): PuzzleGrid.coerce(p) for name, p in items}


class Benchmark:
    """
    Benchmark framework for comparing maths puzzle solving algorithms.

    Runs every solver on every puzzle and collects performance metrics.
    """

    def __init__(
        self,
        puzzles: Union[Dict[str, PuzzleGrid], List[PuzzleGrid]],
        solvers: Optional[Dict[str, BaseSolver]] = None,
        timeout_seconds: float = 60.0,
    ):
        """
        Initialize the benchmark.

        Args:
            puzzles: Named puzzles, or a list that gets named puzzle_1, puzzle_2...
            solvers: Dict of solver_name -> solver_instance (default: DFS and CP).
            timeout_seconds: Maximum time per puzzle per solver.
        """
        if isinstance(puzzles, dict):
            self.puzzles = dict(puzzles)
        else:
            self.puzzles = {f"puzzle_{i}": p for i, p in enumerate(puzzles, 1)}
        self.timeout_seconds = timeout_seconds

        if solvers is None:
            self.solvers = {
                "DFS": DFSSolver(timeout_seconds=timeout_seconds),
                "CP": CPSolver(timeout_seconds=timeout_seconds),
            }
        else:
            self.solvers = solvers

        self.results: List[BenchmarkResult] = []

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects.
        """
        self.results = []

        total_tests = len(self.puzzles) * len(self.solvers)
        pbar = tqdm(total=total_tests, desc="Benchmarking", disable=not show_progress)

        for puzzle_id, puzzle in self.puzzles.items():
            for solver_name, solver in self.solvers.items():
                result = self._run_single(puzzle, puzzle_id, solver_name, solver)
                self.results.append(result)
                pbar.update(1)

        pbar.close()
        return self.results

    def _run_single(
        self,
        puzzle: PuzzleGrid,
        puzzle_id: str,
        solver_name: str,
        solver: BaseSolver
    ) -> BenchmarkResult:
        """Run a single solver on a single puzzle."""
        # A worker thread cannot be killed, so the solver is also given the
        # budget and stops itself once it runs out.
        if solver.timeout_seconds is None or solver.timeout_seconds > self.timeout_seconds:
            solver = copy.copy(solver)
            solver.timeout_seconds = self.timeout_seconds

        start_time = time.perf_counter()
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(solver.solve, puzzle)
        try:
            solution, stats = future.result(timeout=self.timeout_seconds)
        except TimeoutError:
            executor.shutdown(wait=False, cancel_futures=True)
            elapsed = time.perf_counter() - start_time
            log.warning("%s timed out on %s after %.2fs", solver_name, puzzle_id, elapsed)
            return BenchmarkResult(
                puzzle_id=puzzle_id,
                algorithm=solver_name,
                solved=False,
                time_seconds=elapsed,
                memory_bytes=0,
                iterations=0,
                backtracks=0,
                nodes_explored=0,
                extra={"error": "Timeout"}
            )
        executor.shutdown(wait=True)

        return BenchmarkResult(
            puzzle_id=puzzle_id,
            algorithm=solver_name,
            solved=stats.solved,
            time_seconds=stats.time_seconds,
            memory_bytes=stats.memory_bytes,
            iterations=stats.iterations,
            backtracks=stats.backtracks,
            nodes_explored=stats.nodes_explored,
            solution=solution.to_string() if solution is not None else None,
            extra=dict(stats.extra)
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        summary = {
            "total_puzzles": len(self.puzzles),
            "solvers_tested": list(self.solvers.keys()),
            "results_by_algorithm": {},
        }

        for solver_name in self.solvers:
            solver_results = [r for r in self.results if r.algorithm == solver_name]
            if solver_results:
                solved = [r for r in solver_results if r.solved]
                times = [r.time_seconds for r in solver_results]
                memory = [r.memory_bytes for r in solver_results]

                summary["results_by_algorithm"][solver_name] = {
                    "accuracy": len(solved) / len(solver_results) * 100,
                    "avg_time_seconds": sum(times) / len(times),
                    "max_time_seconds": max(times),
                    "min_time_seconds": min(times),
                    "avg_memory_mb": sum(memory) / len(memory) / (1024 * 1024),
                    "avg_backtracks": sum(r.backtracks for r in solver_results) / len(solver_results),
                    "total_solved": len(solved),
                    "total_tested": len(solver_results)
                }

        return summary

    def save_results(self, output_dir: str) -> None:
        """Save benchmark results and summary to JSON files."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        log.info("Results saved to %s", output_dir)
