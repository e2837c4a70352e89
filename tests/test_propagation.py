"""Tests for the propagation driver."""

from src.sudoku.grid import Grid
from src.sudoku.parser import parse_grid
from src.sudoku.propagation import CONFLICT, MAX_ROUNDS, SOLVED, STALLED, propagate
from src.utils.trace import Tracer

EASY = "003020600900305001001806400008102900700000008006708200002609500800203009005010300"
EASY_SOLUTION = [
    [4, 8, 3, 9, 2, 1, 6, 5, 7],
    [9, 6, 7, 3, 4, 5, 8, 2, 1],
    [2, 5, 1, 8, 7, 6, 4, 9, 3],
    [5, 4, 8, 1, 3, 2, 9, 7, 6],
    [7, 2, 9, 5, 6, 4, 1, 3, 8],
    [1, 3, 6, 7, 9, 8, 2, 4, 5],
    [3, 7, 2, 6, 8, 9, 5, 1, 4],
    [8, 1, 4, 2, 5, 3, 7, 6, 9],
    [6, 9, 5, 4, 1, 7, 3, 8, 2],
]


def test_easy_puzzle_is_solved_by_propagation():
    tracer = Tracer()
    result = propagate(parse_grid(EASY), tracer=tracer)

    assert result.status == SOLVED
    assert result.grid.values() == EASY_SOLUTION
    assert result.assigned == sum(ch == "0" for ch in EASY)
    assert tracer.summary()["action_counts"]["solution_found"] == 1


def test_empty_grid_stalls_after_one_round():
    result = propagate(Grid(9), tracer=Tracer())
    assert result.status == STALLED
    assert result.rounds == 1
    assert result.removed == 0


def test_duplicate_clue_is_reported_as_conflict():
    grid = Grid(9)
    grid[0][0].assign(3)
    grid[0][5].assign(3)
    tracer = Tracer()

    result = propagate(grid, tracer=tracer)

    assert result.status == CONFLICT
    assert result.rounds == 0
    assert tracer.steps[-1].action_type == "conflict"


def test_round_limit_is_respected():
    result = propagate(parse_grid(EASY), max_rounds=1, tracer=Tracer())
    assert result.status == MAX_ROUNDS
    assert result.rounds == 1


def test_later_rounds_only_rescan_changed_groups():
    grid = Grid(9)
    grid[0][0].assign(1)
    tracer = Tracer()

    result = propagate(grid, tracer=tracer)

    assert result.status == STALLED
    assert result.rounds == 2
    assert result.removed == 20
    rounds = [s for s in tracer.steps if s.action_type == "round"]
    # Blocks 4, 5, 7 and 8 hold no cell touched in round one.
    assert [s.reason for s in rounds] == ["Scanning 27 groups", "Scanning 23 groups"]


def test_single_gap_is_filled():
    values = [[(3 * (r % 3) + r // 3 + c) % 9 + 1 for c in range(9)] for r in range(9)]
    values[0][0] = 0
    result = propagate(Grid.from_values(values, "basic"), tracer=Tracer())
    assert result.status == SOLVED
    assert result.grid[0][0].value == 1
