"""Solvers module for maths puzzles."""

from .base_solver import BaseSolver, SolverStats, SearchRun, SearchLimitExceeded
from .dfs_solver import DFSSolver
from .cp_solver import CPSolver

__all__ = [
    "BaseSolver",
    "SolverStats",
    "SearchRun",
    "SearchLimitExceeded",
    "DFSSolver",
    "CPSolver"
]
