"""Benchmark module for comparing maths puzzle solvers."""

from .benchmark import Benchmark, BenchmarkResult, load_puzzles

__all__ = ["Benchmark", "BenchmarkResult", "load_puzzles"]
