"""Grid data structures: cells, constraint groups, and size/variant helpers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Collection, List, Optional, Set, Tuple

Coord = Tuple[int, int]

# Grid size -> side length of a square sub-block.
BLOCK_SIZES = {9: 3, 16: 4}


class UnsupportedSizeError(ValueError):
    """Raised when a grid size has no known sub-block layout."""


class Variant(str, Enum):
    BASIC = "basic"
    DIAGONAL = "diagonal"


def block_size(size: int) -> int:
    if size not in BLOCK_SIZES:
        supported = ", ".join(str(s) for s in sorted(BLOCK_SIZES))
        raise UnsupportedSizeError(f"Unsupported grid size {size}; expected one of: {supported}")
    return BLOCK_SIZES[size]


@dataclass(eq=False)
class Cell:
    """
    One puzzle position. While unset it carries the digits still possible
    there; once assigned, `candidates` collapses to the assigned digit.
    """

    size: int
    value: Optional[int] = None
    candidates: Set[int] = field(default_factory=set)
    changed: bool = False

    def __post_init__(self) -> None:
        if self.value is not None:
            self.candidates = {self.value}
        elif not self.candidates:
            self.candidates = self._all_digits()

    def _all_digits(self) -> Set[int]:
        return set(range(1, self.size + 1))

    def assign(self, digit: int) -> None:
        self.value = digit
        self.candidates = {digit}
        self.changed = True

    def clear(self) -> None:
        self.value = None
        self.candidates = self._all_digits()
        self.changed = True

    def is_set(self) -> bool:
        return self.value is not None

    def value_of(self) -> int:
        """Assigned digit, or 0 when the cell is still open."""
        return self.value if self.value is not None else 0

    def has_candidate(self, digit: int) -> bool:
        return self.value is None and digit in self.candidates

    def discard(self, digit: int) -> bool:
        """Remove `digit` from the candidates. Returns True if something was removed."""
        if self.value is not None or digit not in self.candidates:
            return False
        self.candidates.discard(digit)
        self.changed = True
        return True

    def has_changed(self) -> bool:
        return self.changed

    def reset_changed(self) -> None:
        self.changed = False


@dataclass(eq=False)
class ConstraintGroup:
    """
    One all-different rule over N cells (a row, column, block or diagonal).

    Positions are 0-based indices into `cells`; for a row group the position
    is the column index, for a column group it is the row index.
    """

    label: str
    cells: List[Cell]
    coords: List[Coord]

    def __post_init__(self) -> None:
        if len(self.cells) != len(self.coords):
            raise ValueError("cells and coords must have the same length")

    def __len__(self) -> int:
        return len(self.cells)

    def has_conflict(self) -> bool:
        seen: Set[int] = set()
        for cell in self.cells:
            if not cell.is_set():
                continue
            if cell.value in seen:
                return True
            seen.add(cell.value)
        return False

    def number_positions(self, digit: int, out: Set[int]) -> None:
        """Add to `out` every position where `digit` can still end up.

        Accumulates, so callers may union several groups into one set.
        A cell already set to `digit` counts as its only position.
        """
        for index, cell in enumerate(self.cells):
            if cell.value == digit or cell.has_candidate(digit):
                out.add(index)

    def prune(self, digit: int, keep: Collection[int]) -> int:
        """Remove `digit` from every position not in `keep`; returns how many were removed."""
        removed = 0
        for index, cell in enumerate(self.cells):
            if index in keep:
                continue
            if cell.discard(digit):
                removed += 1
        return removed
