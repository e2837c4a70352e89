"""Top-level solve interface.

Expose `solve_puzzle(puzzle)` that accepts a pre-built Grid, board text, or a
puzzle record as produced by `src.sudoku.loader.load_puzzles`.
"""

from typing import Any

from src.sudoku.grid import Grid
from src.sudoku.parser import parse_grid
from src.sudoku.propagation import (
    DEFAULT_MAX_COMBO,
    DEFAULT_MAX_ROUNDS,
    PropagationResult,
    propagate,
)


def solve_puzzle(
    puzzle: Any,
    max_combo: int = DEFAULT_MAX_COMBO,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
) -> PropagationResult:
    """
    Propagate a puzzle as far as deduction alone allows.
    Accepts:
      - Grid instances (mutated in place)
      - Board text (size inferred, basic rules)
      - Record dictionaries with `grid` and optional `variant` / `size`
    """
    if isinstance(puzzle, Grid):
        grid = puzzle
    elif isinstance(puzzle, str):
        grid = parse_grid(puzzle)
    elif isinstance(puzzle, dict):
        grid = parse_grid(
            str(puzzle.get("grid", "") or ""),
            variant=puzzle.get("variant") or "basic",
            size=puzzle.get("size"),
        )
    else:
        raise TypeError("solve_puzzle expects a Grid, board text, or puzzle dictionary")

    return propagate(grid, max_combo=max_combo, max_rounds=max_rounds)


__all__ = ["solve_puzzle"]
