"""Unit tests for the maths puzzle solvers."""

import pytest
from mathpuzzle.core.grid import PuzzleGrid, GridShapeError
from mathpuzzle.core.checks import is_solution, respects_clues
from mathpuzzle.solvers import DFSSolver, CPSolver, SearchLimitExceeded


# A 3x3 puzzle with a single given digit
TEST_PUZZLE = "0,14,10,35/14,_,_,_/15,_,_,_/28,_,1,_"

TEST_SOLUTION = "0,14,10,35/14,7,2,1/15,3,7,5/28,4,1,7"

# Two solutions: 1,2/2,1 and 2,1/1,2
TWO_SOLUTIONS = "0,3,2/3,_,_/2,_,_"

# One clue pins it to 1,2/2,1
UNIQUE = "0,3,2/3,_,2/2,_,_"

# The diagonal digit would have to be 9, which no line of row 3 allows
UNSOLVABLE = "0,14,10,35/14,_,_,_/15,_,_,_/28,_,1,9"

SOLVERS = [DFSSolver, CPSolver]


@pytest.mark.parametrize("solver_cls", SOLVERS)
class TestSolvers:
    """Behaviour shared by every solver."""

    def test_solve_puzzle(self, solver_cls):
        """Test solving a known puzzle."""
        puzzle = PuzzleGrid.from_string(TEST_PUZZLE)
        solution, stats = solver_cls().solve(puzzle)

        assert stats.solved
        assert solution is not None
        assert is_solution(solution)
        assert respects_clues(puzzle, solution)

    def test_input_not_modified(self, solver_cls):
        puzzle = PuzzleGrid.from_string(TEST_PUZZLE)
        solver_cls().solve(puzzle)
        assert puzzle.to_string() == TEST_PUZZLE

    def test_unique_solution(self, solver_cls):
        solution, stats = solver_cls().solve(UNIQUE)
        assert stats.solved
        assert solution.to_string() == "0,3,2/3,1,2/2,2,1"

    def test_unsolvable(self, solver_cls):
        solution, stats = solver_cls().solve(UNSOLVABLE)
        assert solution is None
        assert not stats.solved
        assert "error" not in stats.extra

    def test_out_of_range_clue_is_unsolvable(self, solver_cls):
        solution, stats = solver_cls().solve("0,3,2/3,12,_/2,_,_")
        assert solution is None

    def test_verifies_complete_grid(self, solver_cls):
        solution, stats = solver_cls().solve(TEST_SOLUTION)
        assert stats.solved
        assert solution.to_string() == TEST_SOLUTION

    def test_rejects_complete_wrong_grid(self, solver_cls):
        solution, stats = solver_cls().solve("0,3,5/3,1,2/5,2,3")
        assert solution is None

    def test_enumerates_all_solutions(self, solver_cls):
        found = {s.to_string() for s in solver_cls().iter_solutions(TWO_SOLUTIONS)}
        assert found == {"0,3,2/3,1,2/2,2,1", "0,3,2/3,2,1/2,1,2"}

    def test_search_is_resumable(self, solver_cls):
        """Each solution is an independent grid and the search picks up where it stopped."""
        solutions = solver_cls().iter_solutions(TWO_SOLUTIONS)
        first = next(solutions)
        second = next(solutions)
        assert first != second
        assert is_solution(first)
        assert is_solution(second)
        with pytest.raises(StopIteration):
            next(solutions)

    def test_interleaved_searches_on_one_solver(self, solver_cls):
        """Two open searches on the same solver do not disturb each other."""
        puzzle = "0,6,6/6,_,_/6,_,_"
        expected = {s.to_string() for s in solver_cls().iter_solutions(puzzle)}

        solver = solver_cls()
        outer = solver.iter_solutions(puzzle)
        found = {next(outer).to_string()}
        inner = next(solver.iter_solutions(TEST_PUZZLE))
        found.update(s.to_string() for s in outer)

        assert inner.to_string() == TEST_SOLUTION
        assert found == expected

    def test_shape_error_propagates(self, solver_cls):
        with pytest.raises(GridShapeError):
            solver_cls().solve([[0, 3, 2], [3, 1], [2, 2, 1]])

    def test_stats_collected(self, solver_cls):
        """Test that stats are collected."""
        solution, stats = solver_cls().solve(TEST_PUZZLE)
        assert stats.time_seconds > 0
        assert stats.nodes_explored > 0
        assert stats.algorithm == solver_cls.name


class TestDFSSolver:
    """Tests for DFS solver."""

    def test_first_solution_in_digit_order(self):
        solution, _ = DFSSolver().solve(TWO_SOLUTIONS)
        assert solution.to_string() == "0,3,2/3,1,2/2,2,1"

    def test_without_forward_checking(self):
        solver = DFSSolver(forward_checking=False)
        found = {s.to_string() for s in solver.iter_solutions(TWO_SOLUTIONS)}
        assert found == {"0,3,2/3,1,2/2,2,1", "0,3,2/3,2,1/2,1,2"}

    def test_forward_checking_prunes(self):
        pruned = DFSSolver()
        pruned.solve(TEST_PUZZLE)
        plain = DFSSolver(forward_checking=False, max_nodes=pruned.stats.nodes_explored)
        _, stats = plain.solve(TEST_PUZZLE)
        assert not stats.solved

    def test_node_limit(self):
        solver = DFSSolver(forward_checking=False, max_nodes=5)
        solution, stats = solver.solve(TEST_PUZZLE)
        assert solution is None
        assert "node limit" in stats.extra["error"]

    def test_node_limit_raises_when_iterating(self):
        solver = DFSSolver(forward_checking=False, max_nodes=5)
        with pytest.raises(SearchLimitExceeded):
            list(solver.iter_solutions(TEST_PUZZLE))

    def test_time_limit(self):
        solver = DFSSolver(forward_checking=False, timeout_seconds=0.0)
        solution, stats = solver.solve(TEST_PUZZLE)
        assert solution is None
        assert "time limit" in stats.extra["error"]


class TestCPSolver:
    """Tests for the Constraint Programming solver."""

    def test_propagation_alone(self):
        """A puzzle that propagation settles needs no branching."""
        solver = CPSolver(use_backup_backtracking=False)
        solution, stats = solver.solve(UNIQUE)
        assert stats.solved
        assert stats.backtracks == 0

    def test_diagonal_domains_shared(self):
        domains = CPSolver().propagated_domains(PuzzleGrid.from_string(TEST_PUZZLE))
        diagonal = [domains[(i, i)] for i in range(1, 4)]
        assert diagonal[0] == diagonal[1] == diagonal[2]

    def test_propagation_detects_dead_end(self):
        assert CPSolver().propagated_domains(PuzzleGrid.from_string(UNSOLVABLE)) is None

    def test_agrees_with_dfs(self):
        puzzle = "0,6,6/6,_,_/6,_,_"
        cp = {s.to_string() for s in CPSolver().iter_solutions(puzzle)}
        dfs = {s.to_string() for s in DFSSolver().iter_solutions(puzzle)}
        assert cp == dfs
        assert len(cp) > 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
