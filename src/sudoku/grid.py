"""Puzzle grid: owns the cells and builds the constraint-group topology."""

from typing import Iterable, List, Optional, Sequence, Set, Union

from . import swordfish
from .model import Cell, ConstraintGroup, Coord, Variant, block_size
from src.utils.trace import Tracer


class Grid:
    """
    A size x size board plus every constraint group covering it.

    `membership[row][col]` lists the indices (into `groups`) of every group
    containing that cell. `row_groups` / `col_groups` hold the row and column
    groups in index order, which is what the fish techniques walk over.
    """

    def __init__(
        self,
        size: int,
        variant: Union[Variant, str] = Variant.BASIC,
        cells: Optional[List[List[Cell]]] = None,
    ) -> None:
        self.size = size
        self.variant = Variant(variant)
        # Validated before any allocation so a bad size fails loudly.
        self.block_size = block_size(size)
        if cells is None:
            cells = [[Cell(size) for _ in range(size)] for _ in range(size)]
        elif len(cells) != size or any(len(row) != size for row in cells):
            raise ValueError(f"cells must be a {size}x{size} table")
        self.cells: List[List[Cell]] = cells
        self.groups: List[ConstraintGroup] = []
        self.membership: List[List[List[int]]] = [[[] for _ in range(size)] for _ in range(size)]
        self.row_groups: List[ConstraintGroup] = []
        self.col_groups: List[ConstraintGroup] = []
        self._build_groups()

    @classmethod
    def from_values(
        cls,
        values: Sequence[Sequence[Optional[int]]],
        variant: Union[Variant, str] = Variant.BASIC,
    ) -> "Grid":
        """Build a grid from a square value table; 0 or None means unset."""
        size = len(values)
        cells: List[List[Cell]] = []
        for r, row in enumerate(values):
            if len(row) != size:
                raise ValueError("values must be a square table")
            cell_row = []
            for c, value in enumerate(row):
                if value is None or value == 0:
                    cell_row.append(Cell(size))
                    continue
                if not isinstance(value, int) or not 1 <= value <= size:
                    raise ValueError(f"value at ({r}, {c}) must be an integer in 1..{size}")
                cell_row.append(Cell(size, value=value))
            cells.append(cell_row)
        return cls(size, variant, cells)

    def _add_group(self, label: str, coords: List[Coord]) -> ConstraintGroup:
        group = ConstraintGroup(
            label=label,
            cells=[self.cells[r][c] for r, c in coords],
            coords=coords,
        )
        index = len(self.groups)
        self.groups.append(group)
        for r, c in coords:
            self.membership[r][c].append(index)
        return group

    def _build_groups(self) -> None:
        size = self.size

        for r in range(size):
            self.row_groups.append(self._add_group(f"row {r}", [(r, c) for c in range(size)]))

        for c in range(size):
            self.col_groups.append(self._add_group(f"col {c}", [(r, c) for r in range(size)]))

        bsize = self.block_size
        for i in range(bsize):
            for j in range(bsize):
                coords = [
                    (x, y)
                    for x in range(i * bsize, (i + 1) * bsize)
                    for y in range(j * bsize, (j + 1) * bsize)
                ]
                self._add_group(f"block {i * bsize + j}", coords)

        if self.variant is Variant.BASIC:
            return

        self._add_group("diagonal", [(i, i) for i in range(size)])
        self._add_group("anti-diagonal", [(i, size - 1 - i) for i in range(size)])

    def __getitem__(self, row: int) -> List[Cell]:
        return self.cells[row]

    def __str__(self) -> str:
        from .parser import format_grid

        return format_grid(self)

    def iter_cells(self) -> Iterable[Cell]:
        for row in self.cells:
            yield from row

    def groups_for(self, row: int, col: int) -> List[ConstraintGroup]:
        return [self.groups[index] for index in self.membership[row][col]]

    def values(self) -> List[List[int]]:
        return [[cell.value_of() for cell in row] for row in self.cells]

    def has_conflict(self) -> bool:
        for group in self.groups:
            if group.has_conflict():
                return True
        return False

    def has_change(self) -> bool:
        return any(cell.has_changed() for cell in self.iter_cells())

    def reset_change(self) -> None:
        for cell in self.iter_cells():
            cell.reset_changed()

    def changed_blocks(self) -> Set[ConstraintGroup]:
        """Every group containing at least one cell changed since the last reset."""
        result: Set[ConstraintGroup] = set()
        for r in range(self.size):
            for c in range(self.size):
                if self.cells[r][c].has_changed():
                    result.update(self.groups[index] for index in self.membership[r][c])
        return result

    def first_unset(self) -> Optional[Coord]:
        """First open cell in row-major order, or None on a full grid."""
        for r in range(self.size):
            for c in range(self.size):
                if not self.cells[r][c].is_set():
                    return r, c
        return None

    def is_set(self) -> bool:
        return all(cell.is_set() for cell in self.iter_cells())

    def apply_swordfish(self, combo_size: int, digit: int, tracer: Optional[Tracer] = None) -> int:
        """Run the column pass then the row pass; returns candidates removed."""
        removed = swordfish.solve(self.col_groups, self.row_groups, combo_size, digit, tracer)
        removed += swordfish.solve(self.row_groups, self.col_groups, combo_size, digit, tracer)
        return removed
