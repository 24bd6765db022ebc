"""Command-line interface for the maths puzzle solver."""

import argparse
import logging
import sys

from .core.grid import PuzzleGrid
from .core.checks import is_solution
from .solvers import DFSSolver, CPSolver, SearchLimitExceeded
from .benchmark import Benchmark, load_puzzles


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Maths Puzzle Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a puzzle (rows separated by '/', '_' for unknown cells)
  python -m mathpuzzle.cli solve --puzzle "0,14,10,35/14,_,_,_/15,_,_,_/28,_,1,_"

  # Check a filled-in grid
  python -m mathpuzzle.cli verify --puzzle "0,3,2/3,1,2/2,2,1"

  # Compare solvers on a JSON file of puzzles
  python -m mathpuzzle.cli benchmark --file puzzles.json --output results/
        """
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log search progress"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a maths puzzle")
    _add_puzzle_arguments(solve_parser)
    solve_parser.add_argument(
        "--algorithm", "-a",
        choices=["dfs", "cp", "all"],
        default="cp",
        help="Solving algorithm to use (default: cp)"
    )
    _add_limit_arguments(solve_parser)

    # Verify command
    verify_parser = subparsers.add_parser("verify", help="Check a fully filled-in grid")
    _add_puzzle_arguments(verify_parser)

    # Count command
    count_parser = subparsers.add_parser("count", help="Enumerate solutions")
    _add_puzzle_arguments(count_parser)
    count_parser.add_argument(
        "--algorithm", "-a",
        choices=["dfs", "cp"],
        default="cp",
        help="Solving algorithm to use (default: cp)"
    )
    count_parser.add_argument(
        "--limit", "-n", type=positive_int, default=10,
        help="Stop after this many solutions (default: 10)"
    )
    _add_limit_arguments(count_parser)

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Run solver benchmarks")
    bench_parser.add_argument(
        "--file", "-f", type=str, required=True,
        help="JSON file of puzzles"
    )
    bench_parser.add_argument(
        "--output", "-o", type=str, default="results",
        help="Output directory for results (default: results)"
    )
    bench_parser.add_argument(
        "--timeout", type=float, default=60.0,
        help="Seconds allowed per puzzle per solver (default: 60)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "solve":
        cmd_solve(args)
    elif args.command == "verify":
        cmd_verify(args)
    elif args.command == "count":
        cmd_count(args)
    elif args.command == "benchmark":
        cmd_benchmark(args)


def _add_puzzle_arguments(parser):
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--puzzle", "-p", type=str,
        help="Puzzle string: rows separated by '/', cells by ',', '_' for unknown"
    )
    group.add_argument(
        "--file", "-f", type=str,
        help="File holding one puzzle, one row per line"
    )


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _add_limit_arguments(parser):
    parser.add_argument(
        "--max-nodes", type=int, default=None,
        help="Give up after exploring this many search nodes"
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Give up after this many seconds"
    )


def _read_puzzle(args) -> PuzzleGrid:
    try:
        if args.file:
            with open(args.file, "r") as f:
                return PuzzleGrid.from_string(f.read())
        return PuzzleGrid.from_string(args.puzzle)
    except (OSError, ValueError) as e:
        print(f"Error parsing puzzle: {e}")
        sys.exit(1)


def _make_solvers(args):
    limits = {"max_nodes": args.max_nodes, "timeout_seconds": args.timeout}
    solver_map = {
        "dfs": ("DFS", DFSSolver(**limits)),
        "cp": ("CP", CPSolver(**limits)),
    }
    algorithm = getattr(args, "algorithm", "cp")
    if algorithm == "all":
        return dict(solver_map.values())
    name, solver = solver_map[algorithm]
    return {name: solver}


def cmd_solve(args):
    """Handle the solve command."""
    puzzle = _read_puzzle(args)

    print("Input puzzle:")
    print(puzzle)
    print()

    any_solved = False
    for name, solver in _make_solvers(args).items():
        print(f"Solving with {name}...")
        solution, stats = solver.solve(puzzle)

        if stats.solved:
            any_solved = True
            print(f"✓ Solved in {stats.time_seconds:.4f}s")
            if args.verbose:
                print(f"  Nodes: {stats.nodes_explored:,}")
                print(f"  Backtracks: {stats.backtracks:,}")
                print(f"  Memory: {stats.memory_bytes / 1024:.2f} KB")
            print(solution)
        else:
            reason = stats.extra.get("error", "no solution exists")
            print(f"✗ Failed to solve ({reason})")
            if args.verbose:
                print(f"  Time: {stats.time_seconds:.4f}s")
                print(f"  Nodes: {stats.nodes_explored:,}")
        print()

    if not any_solved:
        sys.exit(2)


def cmd_verify(args):
    """Handle the verify command."""
    puzzle = _read_puzzle(args)

    if not puzzle.is_complete():
        print(f"✗ Grid has {puzzle.count_unbound()} unfilled cells")
        sys.exit(2)

    if is_solution(puzzle):
        print("✓ Valid solution")
    else:
        print("✗ Constraints violated")
        sys.exit(2)


def cmd_count(args):
    """Handle the count command."""
    puzzle = _read_puzzle(args)
    (name, solver), = _make_solvers(args).items()

    count = 0
    try:
        for solution in solver.iter_solutions(puzzle):
            count += 1
            print(f"--- Solution {count} ---")
            print(solution)
            if count >= args.limit:
                print(f"Stopped after {args.limit} solutions")
                break
    except SearchLimitExceeded as e:
        print(f"✗ {name} stopped early ({e})")
        print(f"\nSolutions found before stopping: {count}")
        sys.exit(2)

    print(f"\nSolutions found: {count}")


def cmd_benchmark(args):
    """Handle the benchmark command."""
    try:
        puzzles = load_puzzles(args.file)
    except (OSError, ValueError) as e:
        print(f"Error loading puzzles: {e}")
        sys.exit(1)

    print("=" * 60)
    print("MATHS PUZZLE SOLVER BENCHMARK")
    print("=" * 60)
    print(f"Puzzles: {len(puzzles)}")

    benchmark = Benchmark(puzzles, timeout_seconds=args.timeout)

    print(f"Algorithms: {', '.join(benchmark.solvers.keys())}")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    benchmark.run()
    summary = benchmark.get_summary()

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)

    for algo, stats in summary["results_by_algorithm"].items():
        print(f"\n{algo}:")
        print(f"  Accuracy: {stats['accuracy']:.1f}% ({stats['total_solved']}/{stats['total_tested']})")
        print(f"  Avg Time: {stats['avg_time_seconds']:.4f}s")
        print(f"  Avg Backtracks: {stats['avg_backtracks']:.1f}")
        print(f"  Avg Memory: {stats['avg_memory_mb']:.2f} MB")

    benchmark.save_results(args.output)
    print(f"\nResults saved to {args.output}/")


if __name__ == "__main__":
    main()
