"""Maths puzzle solver: sum-or-product headers, distinct lines, one shared diagonal digit."""

from .core import PuzzleGrid, GridShapeError, is_solution
from .puzzle import (
    puzzle_solution,
    solve,
    iter_solutions,
    count_solutions,
    has_unique_solution,
)

__version__ = "1.0.0"

__all__ = [
    "PuzzleGrid",
    "GridShapeError",
    "is_solution",
    "puzzle_solution",
    "solve",
    "iter_solutions",
    "count_solutions",
    "has_unique_solution",
]
