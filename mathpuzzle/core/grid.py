"""Maths puzzle grid representation: one header row, one header column, a square body."""

from __future__ import annotations
import numbers
import re
import numpy as np
from typing import List, Tuple, Optional, Sequence, Any


UNBOUND = 0


class GridShapeError(ValueError):
    """Raised when a grid is not a well-formed square puzzle."""


class PuzzleGrid:
    """
    Represents a maths puzzle grid of size R x R.

    Row 0 and column 0 hold the headers: the expected sum or product of the
    remaining cells of their line. Cell (0, 0) is ignored by every check.
    Body cells hold a digit 1-9 or 0 when still unbound.
    """

    def __init__(self, grid: np.ndarray):
        """
        Initialize a puzzle grid.

        Args:
            grid: Square integer array including the header row and column.
                  Headers are taken literally: a header of 0 is a real
                  (unreachable) total, not an unbound cell.

        Raises:
            GridShapeError: If the array is not square, smaller than 2x2,
                or holds values that are not integers.
        """
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
            raise GridShapeError(f"Grid must be square, got shape {grid.shape}")
        if grid.shape[0] < 2:
            raise GridShapeError(f"Grid needs a header and at least one body line, got size {grid.shape[0]}")
        if not np.issubdtype(grid.dtype, np.integer):
            if not np.issubdtype(grid.dtype, np.floating) or not np.all(np.mod(grid, 1) == 0):
                raise GridShapeError(f"Grid must hold integers, got dtype {grid.dtype}")

        self.size = grid.shape[0]
        self.grid = grid.copy().astype(np.int64)

    def copy(self) -> PuzzleGrid:
        """Create a deep copy of the grid."""
        return PuzzleGrid(self.grid)

    @property
    def body_size(self) -> int:
        """Number of cells in each line, excluding the header."""
        return self.size - 1

    def get(self, row: int, col: int) -> int:
        """Get value at position (row, col). 0 means unbound."""
        return int(self.grid[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        """Bind a body cell. Use 0 to unbind."""
        if row == 0 or col == 0:
            raise IndexError(f"({row}, {col}) is a header cell")
        self.grid[row, col] = value

    def clear(self, row: int, col: int) -> None:
        """Unbind the body cell at (row, col)."""
        self.set(row, col, UNBOUND)

    def is_empty(self, row: int, col: int) -> bool:
        return self.grid[row, col] == UNBOUND

    def header_row(self) -> np.ndarray:
        """Column headers, without the ignored corner."""
        return self.grid[0, 1:]

    def header_col(self) -> np.ndarray:
        """Row headers, without the ignored corner."""
        return self.grid[1:, 0]

    def body_rows(self) -> np.ndarray:
        """The non-header rows, each still carrying its header in position 0."""
        return self.grid[1:, :]

    def row_line(self, row: int) -> Tuple[int, np.ndarray]:
        """Header and cells of body row `row` (1-based, as in the grid)."""
        return int(self.grid[row, 0]), self.grid[row, 1:]

    def col_line(self, col: int) -> Tuple[int, np.ndarray]:
        """Header and cells of body column `col` (1-based, as in the grid)."""
        return int(self.grid[0, col]), self.grid[1:, col]

    def diagonal(self) -> np.ndarray:
        """Cells (i, i) for i = 1..R-1."""
        return np.diagonal(self.grid)[1:]

    def transpose(self) -> PuzzleGrid:
        """A new grid whose rows are this grid's columns."""
        return PuzzleGrid(self.grid.T.copy())

    def unbound_cells(self) -> List[Tuple[int, int]]:
        """Positions of all unbound body cells, in row-major order."""
        cells = []
        for i in range(1, self.size):
            for j in range(1, self.size):
                if self.is_empty(i, j):
                    cells.append((i, j))
        return cells

    def count_unbound(self) -> int:
        return int(np.sum(self.grid[1:, 1:] == UNBOUND))

    def is_complete(self) -> bool:
        """Check if every body cell is bound."""
        return self.count_unbound() == 0

    def to_list(self) -> List[List[Optional[int]]]:
        """
        Convert to nested lists, with None for unbound body cells.

        The corner keeps whatever value it was given.
        """
        rows = []
        for i in range(self.size):
            row = []
            for j in range(self.size):
                val = int(self.grid[i, j])
                if i > 0 and j > 0 and val == UNBOUND:
                    row.append(None)
                else:
                    row.append(val)
            rows.append(row)
        return rows

    def to_string(self) -> str:
        """
        Compact one-line form: rows separated by '/', cells by ','.
        Unbound body cells are written as '_'.
        """
        rows = []
        for row in self.to_list():
            rows.append(",".join("_" if v is None else str(v) for v in row))
        return "/".join(rows)

    @classmethod
    def from_string(cls, s: str) -> PuzzleGrid:
        """
        Create a grid from a string representation.

        Args:
            s: Rows separated by '/', ';' or newlines; cells separated by
               commas or whitespace. '_', '.' or '?' mark unbound cells; a
               body cell of '0' is unbound too, while a header of '0' is kept.
        """
        rows = []
        for raw_row in re.split(r"[/;\n]", s.strip()):
            raw_row = raw_row.strip()
            if not raw_row:
                continue
            row = []
            for token in re.split(r"[,\s]+", raw_row):
                if token in ("_", ".", "?"):
                    row.append(None)
                else:
                    try:
                        row.append(int(token))
                    except ValueError:
                        raise GridShapeError(f"Cannot parse cell {token!r}")
            rows.append(row)
        return cls.from_2d_list(rows)

    @classmethod
    def from_2d_list(cls, data: Sequence[Sequence[Any]]) -> PuzzleGrid:
        """
        Create a grid from nested lists. None marks an unbound body cell.

        A header must be given; 0 there is kept as a literal total that no
        line can reach, so such a puzzle simply has no solution.

        Raises:
            GridShapeError: On ragged or non-square input, an unbound
                header, or a cell that is not an integer (bools and
                non-integral floats included).
        """
        size = len(data)
        for i, row in enumerate(data):
            if len(row) != size:
                raise GridShapeError(
                    f"Row {i} has {len(row)} cells, expected {size}"
                )
        arr = np.zeros((size, size), dtype=np.int64)
        for i, row in enumerate(data):
            for j, val in enumerate(row):
                if val is None:
                    if (i == 0) != (j == 0):
                        raise GridShapeError(f"Header of line {max(i, j)} is unbound")
                    arr[i, j] = UNBOUND
                else:
                    arr[i, j] = _cell_value(val, i, j)
        return cls(arr)

    @classmethod
    def coerce(cls, grid: Any) -> PuzzleGrid:
        """Accept a PuzzleGrid, a numpy array, nested lists or a string."""
        if isinstance(grid, PuzzleGrid):
            return grid
        if isinstance(grid, str):
            return cls.from_string(grid)
        if isinstance(grid, np.ndarray):
            return cls(grid)
        return cls.from_2d_list(grid)

    def __str__(self) -> str:
        """Pretty-print the grid with the headers set apart."""
        width = max(len(str(int(v))) for v in self.grid.flatten())
        width = max(width, 1)

        def fmt(i: int, j: int) -> str:
            val = int(self.grid[i, j])
            if i == 0 and j == 0:
                return " " * width
            if i > 0 and j > 0 and val == UNBOUND:
                return ".".rjust(width)
            return str(val).rjust(width)

        lines = []
        for i in range(self.size):
            cells = [fmt(i, j) for j in range(self.size)]
            lines.append(cells[0] + " | " + " ".join(cells[1:]))
            if i == 0:
                lines.append("-" * (width + 1) + "+" + "-" * ((width + 1) * self.body_size))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"PuzzleGrid(size={self.size}, unbound={self.count_unbound()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleGrid):
            return False
        return self.size == other.size and np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.to_string())


def _cell_value(val: Any, row: int, col: int) -> int:
    """Integer value of one input cell, refusing anything that would be truncated."""
    if isinstance(val, (bool, np.bool_)):
        raise GridShapeError(f"Cell ({row}, {col}) holds a bool: {val!r}")
    if isinstance(val, numbers.Integral):
        return int(val)
    if isinstance(val, numbers.Real) and float(val).is_integer():
        return int(val)
    raise GridShapeError(f"Cell ({row}, {col}) is not an integer: {val!r}")
