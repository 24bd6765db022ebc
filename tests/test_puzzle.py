"""Tests for the public puzzle entry points."""

import numpy as np
import pytest

from mathpuzzle import (
    PuzzleGrid,
    GridShapeError,
    puzzle_solution,
    solve,
    iter_solutions,
    count_solutions,
    has_unique_solution,
)
from mathpuzzle.solvers import DFSSolver


def test_puzzle_solution_binds_unknown_cells():
    """Like unifying the caller's variables, the list is filled in place."""
    puzzle = [
        [0, 14, 10, 35],
        [14, None, None, None],
        [15, None, None, None],
        [28, None, 1, None],
    ]
    assert puzzle_solution(puzzle)
    assert puzzle[0] == [0, 14, 10, 35]
    assert puzzle[3][2] == 1
    assert all(v is not None for row in puzzle for v in row)
    assert puzzle[1][1] == puzzle[2][2] == puzzle[3][3]


def test_puzzle_solution_small_grid():
    puzzle = [[0, 3, 2], [3, None, 2], [2, None, None]]
    assert puzzle_solution(puzzle)
    assert puzzle == [[0, 3, 2], [3, 1, 2], [2, 2, 1]]


def test_puzzle_solution_verifies_complete_grid():
    assert puzzle_solution([[0, 3, 2], [3, 1, 2], [2, 2, 1]])
    assert not puzzle_solution([[0, 3, 5], [3, 1, 2], [5, 2, 3]])


def test_puzzle_solution_leaves_grid_alone_when_unsolvable():
    puzzle = [[0, 3, 2], [3, None, 3], [2, None, None]]
    assert not puzzle_solution(puzzle)
    assert puzzle == [[0, 3, 2], [3, None, 3], [2, None, None]]


def test_puzzle_solution_accepts_other_forms():
    assert puzzle_solution("0,3,2/3,_,_/2,_,_")
    assert puzzle_solution(np.array([[0, 3, 2], [3, 0, 0], [2, 0, 0]]))
    assert puzzle_solution(PuzzleGrid.from_string("0,3,2/3,_,_/2,_,_"))


def test_puzzle_solution_shape_error():
    with pytest.raises(GridShapeError):
        puzzle_solution([[0, 3, 2], [3, None, None]])


def test_solve_returns_grid():
    solution = solve("0,3,2/3,_,2/2,_,_")
    assert isinstance(solution, PuzzleGrid)
    assert solution.to_list() == [[0, 3, 2], [3, 1, 2], [2, 2, 1]]


def test_solve_no_solution():
    assert solve("0,3,2/3,_,3/2,_,_") is None


def test_zero_header_has_no_solution():
    puzzle = [[0, 0, 2], [3, None, 2], [2, None, None]]
    assert puzzle_solution(puzzle) is False
    assert puzzle == [[0, 0, 2], [3, None, 2], [2, None, None]]
    assert solve(puzzle) is None
    assert solve(puzzle, solver=DFSSolver()) is None


def test_solve_with_chosen_solver():
    solution = solve("0,3,2/3,_,_/2,_,_", solver=DFSSolver())
    assert solution.to_string() == "0,3,2/3,1,2/2,2,1"


def test_iter_solutions_limit():
    assert len(list(iter_solutions("0,6,6/6,_,_/6,_,_", limit=2))) == 2


def test_count_and_uniqueness():
    assert count_solutions("0,3,2/3,_,_/2,_,_", limit=10) == 2
    assert not has_unique_solution("0,3,2/3,_,_/2,_,_")
    assert has_unique_solution("0,3,2/3,_,2/2,_,_")
    assert count_solutions("0,3,2/3,_,3/2,_,_") == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
