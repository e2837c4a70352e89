"""Tests for grid topology and aggregate queries."""

import pytest

from src.sudoku.grid import Grid
from src.sudoku.model import UnsupportedSizeError, Variant

SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


def _on_diagonal(r, c, size):
    return r == c or r + c == size - 1


@pytest.mark.parametrize("size", [9, 16])
def test_basic_group_counts(size):
    grid = Grid(size, Variant.BASIC)
    assert len(grid.groups) == 3 * size
    assert len(grid.row_groups) == size
    assert len(grid.col_groups) == size
    assert all(len(group) == size for group in grid.groups)


@pytest.mark.parametrize("size", [9, 16])
def test_diagonal_adds_two_groups(size):
    grid = Grid(size, "diagonal")
    assert grid.variant is Variant.DIAGONAL
    assert len(grid.groups) == 3 * size + 2
    assert grid.groups[-2].coords == [(i, i) for i in range(size)]
    assert grid.groups[-1].coords == [(i, size - 1 - i) for i in range(size)]


@pytest.mark.parametrize("size", [9, 16])
@pytest.mark.parametrize("variant", ["basic", "diagonal"])
def test_membership_counts(size, variant):
    grid = Grid(size, variant)
    for r in range(size):
        for c in range(size):
            expected = 3
            if variant == "diagonal":
                expected += (r == c) + (r + c == size - 1)
            assert len(grid.membership[r][c]) == expected


@pytest.mark.parametrize("variant", ["basic", "diagonal"])
def test_membership_mirrors_groups(variant):
    grid = Grid(16, variant)
    for index, group in enumerate(grid.groups):
        for (r, c), cell in zip(group.coords, group.cells):
            assert grid.membership[r][c].count(index) == 1
            assert cell is grid.cells[r][c]

    for r in range(grid.size):
        for c in range(grid.size):
            for group in grid.groups_for(r, c):
                assert (r, c) in group.coords


def test_row_and_column_views_follow_index_order():
    grid = Grid(9)
    for i in range(9):
        assert grid.row_groups[i].coords == [(i, c) for c in range(9)]
        assert grid.col_groups[i].coords == [(r, i) for r in range(9)]
        assert grid.row_groups[i].cells == grid[i]


def test_blocks_are_row_major_within_block():
    grid = Grid(9)
    block = grid.groups[2 * 9 + 5]
    assert block.coords == [(3, 6), (3, 7), (3, 8), (4, 6), (4, 7), (4, 8), (5, 6), (5, 7), (5, 8)]


def test_unsupported_size_fails_at_construction():
    with pytest.raises(UnsupportedSizeError):
        Grid(4)
    with pytest.raises(ValueError):
        Grid(9, "killer")


def test_completed_solution_is_set_without_conflict():
    grid = Grid.from_values(SOLUTION)
    assert not grid.has_conflict()
    assert grid.is_set()
    assert grid.first_unset() is None
    assert grid.values() == SOLUTION


def test_diagonal_variant_flags_ordinary_solution():
    # The classic solution repeats 7 on its main diagonal.
    assert Grid.from_values(SOLUTION, Variant.DIAGONAL).has_conflict()


def test_duplicate_in_row_is_conflict():
    grid = Grid(9)
    grid[4][1].assign(7)
    grid[4][8].assign(7)
    assert grid.has_conflict()
    assert not grid.is_set()


def test_first_unset_scans_row_major():
    values = [row[:] for row in SOLUTION]
    values[0][0] = 0
    assert Grid.from_values(values).first_unset() == (0, 0)

    values = [row[:] for row in SOLUTION]
    values[3][2] = 0
    values[5][0] = 0
    assert Grid.from_values(values).first_unset() == (3, 2)


def test_change_tracking_and_changed_blocks():
    grid = Grid(9, "diagonal")
    assert not grid.has_change()
    assert grid.changed_blocks() == set()

    grid[4][4].discard(3)
    assert grid.has_change()
    changed = grid.changed_blocks()
    assert changed == set(grid.groups_for(4, 4))
    assert len(changed) == 5

    grid.reset_change()
    assert not grid.has_change()
    assert grid.changed_blocks() == set()


def test_changed_blocks_unions_over_cells():
    grid = Grid(9)
    grid[0][0].assign(1)
    grid[8][8].assign(2)
    changed = grid.changed_blocks()
    assert grid.row_groups[0] in changed
    assert grid.col_groups[8] in changed
    assert grid.row_groups[4] not in changed
    assert len(changed) == 6


def test_prebuilt_cells_must_match_size():
    cells = Grid(16).cells
    with pytest.raises(ValueError):
        Grid(9, cells=cells)
    with pytest.raises(ValueError):
        Grid(9, cells=[row[:9] for row in cells[:8]])


def test_from_values_validates_shape_and_range():
    with pytest.raises(ValueError):
        Grid.from_values([[1, 2], [3]])
    bad = [row[:] for row in SOLUTION]
    bad[0][0] = 10
    with pytest.raises(ValueError):
        Grid.from_values(bad)
