"""Sudoku-family grid model, constraint groups, and fish elimination."""

from .model import Cell, ConstraintGroup, UnsupportedSizeError, Variant, block_size
from .grid import Grid
from .parser import PuzzleParseError, format_grid, parse_grid
from .propagation import PropagationResult, propagate

__all__ = [
    "Cell",
    "ConstraintGroup",
    "Grid",
    "PropagationResult",
    "PuzzleParseError",
    "UnsupportedSizeError",
    "Variant",
    "block_size",
    "format_grid",
    "parse_grid",
    "propagate",
]
