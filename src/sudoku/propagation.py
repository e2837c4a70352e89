"""Round-based constraint propagation: assigned-digit elimination, singles, fish."""

from dataclasses import dataclass
from typing import List, Optional, Set

from .grid import Grid
from .model import ConstraintGroup
from src.utils.trace import Tracer, get_tracer

DEFAULT_MAX_COMBO = 3
DEFAULT_MAX_ROUNDS = 100

SOLVED = "solved"
CONFLICT = "conflict"
STALLED = "stalled"
MAX_ROUNDS = "max_rounds"


@dataclass
class PropagationResult:
    grid: Grid
    status: str
    rounds: int
    removed: int
    assigned: int


def propagate(
    grid: Grid,
    max_combo: int = DEFAULT_MAX_COMBO,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    tracer: Optional[Tracer] = None,
) -> PropagationResult:
    """
    Apply deductions to `grid` in place until it is solved, contradicts
    itself, or a round changes nothing.

    The first round scans every group; each later round only rescans the
    groups that contain a cell changed during the round before.
    """
    tracer = tracer or get_tracer()
    pending: List[ConstraintGroup] = list(grid.groups)
    removed = 0
    assigned = 0
    status = MAX_ROUNDS
    round_number = 0

    if _check_conflict(grid, tracer, round_number):
        return PropagationResult(grid, CONFLICT, round_number, removed, assigned)

    while round_number < max_rounds:
        round_number += 1
        tracer.log_round(round_number, groups_scanned=len(pending))
        grid.reset_change()

        removed += _eliminate_assigned(pending, tracer)
        assigned += _assign_hidden_singles(pending, tracer)
        assigned += _assign_singles(grid, tracer)
        for combo_size in range(1, max_combo + 1):
            for digit in range(1, grid.size + 1):
                removed += grid.apply_swordfish(combo_size, digit, tracer)

        if _check_conflict(grid, tracer, round_number):
            status = CONFLICT
            break
        if grid.is_set():
            tracer.log_solution_found(round_number)
            status = SOLVED
            break
        if not grid.has_change():
            tracer.log_stalled(round_number)
            status = STALLED
            break

        changed = grid.changed_blocks()
        # Keep group order stable so runs are reproducible.
        pending = [group for group in grid.groups if group in changed]

    return PropagationResult(grid, status, round_number, removed, assigned)


def _eliminate_assigned(groups: List[ConstraintGroup], tracer: Tracer) -> int:
    """Remove each assigned digit from the other cells of its groups."""
    removed = 0
    for group in groups:
        for position, cell in enumerate(group.cells):
            if not cell.is_set():
                continue
            pruned = group.prune(cell.value, {position})
            if pruned:
                tracer.log_prune(group.label, cell.value, pruned, reason="assigned digit")
            removed += pruned
    return removed


def _assign_hidden_singles(groups: List[ConstraintGroup], tracer: Tracer) -> int:
    """Assign a digit that has exactly one open position left in a group."""
    assigned = 0
    for group in groups:
        for digit in range(1, len(group) + 1):
            positions: Set[int] = set()
            group.number_positions(digit, positions)
            if len(positions) != 1:
                continue
            position = next(iter(positions))
            cell = group.cells[position]
            if cell.is_set():
                continue
            cell.assign(digit)
            r, c = group.coords[position]
            tracer.log_assign(r, c, digit, reason=f"only place in {group.label}")
            assigned += 1
    return assigned


def _assign_singles(grid: Grid, tracer: Tracer) -> int:
    assigned = 0
    for r in range(grid.size):
        for c in range(grid.size):
            cell = grid[r][c]
            if cell.is_set() or len(cell.candidates) != 1:
                continue
            digit = next(iter(cell.candidates))
            cell.assign(digit)
            tracer.log_assign(r, c, digit)
            assigned += 1
    return assigned


def _check_conflict(grid: Grid, tracer: Tracer, round_number: int) -> bool:
    if grid.has_conflict():
        tracer.log_conflict("Duplicate digit in a group", round_number)
        return True
    for r in range(grid.size):
        for c in range(grid.size):
            cell = grid[r][c]
            if not cell.is_set() and not cell.candidates:
                tracer.log_conflict(f"No candidates left at ({r}, {c})", round_number)
                return True
    return False
