"""Core module for maths puzzle grid representation and constraint checks."""

from .grid import PuzzleGrid, GridShapeError, UNBOUND
from .checks import (
    is_valid_digit,
    candidate_digits,
    all_distinct,
    transpose_rows,
    diagonal_cells,
    diagonal_holds,
    line_holds,
    line_feasible,
    all_lines_hold,
    is_solution,
    respects_clues,
)

__all__ = [
    "PuzzleGrid",
    "GridShapeError",
    "UNBOUND",
    "is_valid_digit",
    "candidate_digits",
    "all_distinct",
    "transpose_rows",
    "diagonal_cells",
    "diagonal_holds",
    "line_holds",
    "line_feasible",
    "all_lines_hold",
    "is_solution",
    "respects_clues",
]
