"""Board text format: parse into a Grid and render a Grid back to text.

One token per cell, read in row-major order; whitespace between tokens is
optional. A token is a decimal digit, an uppercase letter standing for
10 + (letter - 'A'), or one of the placeholders `*`, `0`, `.` for an open cell.
"""

from math import isqrt
from typing import List, Optional, Union

from .grid import Grid
from .model import Variant

PLACEHOLDERS = {"*", "0", "."}


class PuzzleParseError(ValueError):
    """Raised when board text does not describe a valid grid."""


def _tokens(text: str) -> List[str]:
    return [ch for ch in text if not ch.isspace()]


def parse_token(token: str, size: int) -> Optional[int]:
    """Digit encoded by `token`, or None for a placeholder."""
    if token in PLACEHOLDERS:
        return None
    if "1" <= token <= "9":
        digit = int(token)
    elif "A" <= token <= "Z":
        digit = ord(token) - ord("A") + 10
    else:
        raise PuzzleParseError(f"Unrecognized token {token!r}")
    if digit > size:
        raise PuzzleParseError(f"Token {token!r} is out of range for a {size}x{size} grid")
    return digit


def format_token(value: int) -> str:
    if value >= 10:
        return chr(ord("A") + value - 10)
    return str(value)


def read_into(grid: Grid, text: str) -> Grid:
    """Overwrite every cell of `grid` from board text; open cells are cleared."""
    tokens = _tokens(text)
    expected = grid.size * grid.size
    if len(tokens) != expected:
        raise PuzzleParseError(f"Expected {expected} tokens, found {len(tokens)}")

    for index, token in enumerate(tokens):
        r, c = divmod(index, grid.size)
        digit = parse_token(token, grid.size)
        if digit is None:
            grid[r][c].clear()
        else:
            grid[r][c].assign(digit)
    return grid


def parse_grid(
    text: str,
    variant: Union[Variant, str] = Variant.BASIC,
    size: Optional[int] = None,
) -> Grid:
    """Build a grid from board text, inferring the size from the token count if not given."""
    if size is None:
        count = len(_tokens(text))
        size = isqrt(count)
        if size * size != count:
            raise PuzzleParseError(f"Token count {count} is not a perfect square")
    return read_into(Grid(size, variant), text)


def format_grid(grid: Grid) -> str:
    """Fixed-width rendering, one row per line, open cells as 0."""
    lines = []
    for row in grid.cells:
        lines.append("".join(f"{format_token(cell.value_of()):>2}" for cell in row))
    return "\n".join(lines) + "\n"


def format_compact(grid: Grid) -> str:
    """Single-line rendering, one character per cell."""
    return "".join(format_token(cell.value_of()) for row in grid.cells for cell in row)
