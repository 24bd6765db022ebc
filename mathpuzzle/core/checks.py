"""Constraint checks for maths puzzles.

All functions accept plain sequences or numpy arrays. A value of 0 stands
for an unbound cell.
"""

from __future__ import annotations
from math import prod
from typing import TYPE_CHECKING, Any, List, Sequence, Tuple

from .grid import GridShapeError, PuzzleGrid, UNBOUND

if TYPE_CHECKING:
    import numpy as np


DIGITS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8, 9)


def is_valid_digit(value: Any) -> bool:
    """Check that a bound cell holds one of the digits 1 to 9."""
    return value in DIGITS


def candidate_digits() -> Tuple[int, ...]:
    """The values an unbound cell may take, in search order."""
    return DIGITS


def all_distinct(values: Sequence[int]) -> bool:
    """
    Check that no value appears twice.

    Compares the length of the sequence with the length of its
    duplicate-free version. Empty and single-element sequences pass.
    """
    values = [int(v) for v in values]
    return len(values) == len(set(values))


def transpose_rows(rows: Sequence[Sequence[int]]) -> List[List[int]]:
    """
    Return the transpose of a square grid as new lists.

    Raises:
        GridShapeError: If the rows are ragged or the grid is not square.
    """
    size = len(rows)
    for i, row in enumerate(rows):
        if len(row) != size:
            raise GridShapeError(f"Row {i} has {len(row)} cells, expected {size}")
    return [[int(rows[i][j]) for i in range(size)] for j in range(size)]


def diagonal_cells(body_rows: Sequence[Sequence[int]]) -> List[int]:
    """
    Extract the diagonal from the non-header rows.

    The i-th body row contributes its cell at index i + 1, which is the
    main diagonal once the header column is accounted for.

    Raises:
        GridShapeError: If a row has no cell at the expected offset.
    """
    cells = []
    for i, row in enumerate(body_rows):
        if len(row) <= i + 1:
            raise GridShapeError(
                f"Body row {i} has no diagonal cell at index {i + 1}"
            )
        cells.append(int(row[i + 1]))
    return cells


def diagonal_holds(body_rows: Sequence[Sequence[int]]) -> bool:
    """
    Check that every diagonal cell can share one value.

    Unbound cells agree with anything; all bound cells must be equal.
    """
    bound = {v for v in diagonal_cells(body_rows) if v != UNBOUND}
    return len(bound) <= 1


def line_holds(header: int, cells: Sequence[int]) -> bool:
    """
    Check one fully bound row or column against its header.

    Every cell must be a digit 1-9, the cells must be distinct, and the
    header must equal either their sum or their product.
    """
    if not all(is_valid_digit(c) for c in cells):
        return False
    cells = [int(c) for c in cells]
    if not all_distinct(cells):
        return False
    header = int(header)
    return sum(cells) == header or prod(cells) == header


def line_feasible(header: int, cells: Sequence[int]) -> bool:
    """
    Check whether a partially bound line could still be completed.

    Bound cells must be valid and distinct. The header must lie within
    reach of either the sum or the product of some completion using the
    digits not yet taken. Never rejects a line that has a completion.
    """
    cells = [int(c) for c in cells]
    bound = [c for c in cells if c != UNBOUND]
    free = len(cells) - len(bound)

    if not all(is_valid_digit(c) for c in bound):
        return False
    if not all_distinct(bound):
        return False

    header = int(header)
    if free == 0:
        return sum(bound) == header or prod(bound) == header

    available = sorted(set(DIGITS) - set(bound))
    if len(available) < free:
        return False

    low, high = available[:free], available[-free:]

    partial_sum = sum(bound)
    if partial_sum + sum(low) <= header <= partial_sum + sum(high):
        return True

    partial_prod = prod(bound)
    if header <= 0 or header % partial_prod != 0:
        return False
    quotient = header // partial_prod
    return prod(low) <= quotient <= prod(high)


def all_lines_hold(rows: Sequence[Sequence[int]]) -> bool:
    """Check every row below the first against its own header."""
    return all(line_holds(row[0], row[1:]) for row in rows[1:])


def is_solution(grid: Any) -> bool:
    """
    Check a fully bound grid against every puzzle constraint.

    The diagonal must hold a single digit, and every row and column must
    pass the line check. Columns are checked as the rows of the transpose.

    Raises:
        GridShapeError: If a cell is not an integer, so nothing is silently
            truncated into a digit.
    """
    rows = PuzzleGrid.coerce(grid).grid.tolist()
    if not diagonal_holds(rows[1:]):
        return False
    columns = transpose_rows(rows)
    return all_lines_hold(rows) and all_lines_hold(columns)


def respects_clues(puzzle: PuzzleGrid, solution: PuzzleGrid) -> bool:
    """
    Validate that a solution keeps every bound cell of the puzzle.

    Returns:
        True if sizes match, every clue is preserved and the solution holds.
    """
    if puzzle.size != solution.size:
        return False

    for i in range(puzzle.size):
        for j in range(puzzle.size):
            if i == 0 and j == 0:
                continue
            if not puzzle.is_empty(i, j) and puzzle.get(i, j) != solution.get(i, j):
                return False

    return is_solution(solution)
