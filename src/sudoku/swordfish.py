"""Fish elimination (X-wing, swordfish, jellyfish) over row or column groups.

If a digit's possible positions in `k` lines are confined to exactly `k`
orthogonal lines, each of those orthogonal lines must take the digit from one
of the `k` chosen lines, so it can be dropped everywhere else along them.
"""

from typing import FrozenSet, List, Optional, Sequence, Set, Tuple

from .model import ConstraintGroup
from src.utils.trace import Tracer, get_tracer

Hit = Tuple[Tuple[int, ...], FrozenSet[int]]


def find_swordfish(
    groups: Sequence[ConstraintGroup],
    combo_size: int,
    digit: int,
    explored: Optional[List[Tuple[int, ...]]] = None,
) -> List[Hit]:
    """
    Return every combination of `combo_size` groups whose positions for
    `digit` cover exactly `combo_size` orthogonal indices.

    Combinations come out in ascending lexicographic order of group index.
    A partial combination whose union already exceeds `combo_size` is dropped
    together with every extension of it.

    If `explored` is given, every partial combination the search descends
    into is appended to it.
    """
    if combo_size < 1 or combo_size > len(groups):
        return []

    positions: List[FrozenSet[int]] = []
    for group in groups:
        found: Set[int] = set()
        group.number_positions(digit, found)
        positions.append(frozenset(found))

    # Lines without the digit at all cannot be part of a pattern.
    usable = [i for i, found in enumerate(positions) if found and len(found) <= combo_size]

    hits: List[Hit] = []
    chosen: List[int] = []

    def _extend(start: int, union: FrozenSet[int]) -> None:
        if len(chosen) == combo_size:
            if len(union) == combo_size:
                hits.append((tuple(chosen), union))
            return
        needed = combo_size - len(chosen)
        for k in range(start, len(usable) - needed + 1):
            index = usable[k]
            merged = union | positions[index]
            if len(merged) > combo_size:
                continue
            chosen.append(index)
            if explored is not None:
                explored.append(tuple(chosen))
            _extend(k + 1, merged)
            chosen.pop()

    _extend(0, frozenset())
    return hits


def solve(
    groups: Sequence[ConstraintGroup],
    orthogonal: Sequence[ConstraintGroup],
    combo_size: int,
    digit: int,
    tracer: Optional[Tracer] = None,
) -> int:
    """
    One fish pass: search `groups`, prune along `orthogonal`.

    Returns the number of candidates removed.
    """
    tracer = tracer or get_tracer()
    removed = 0
    for lines, covered in find_swordfish(groups, combo_size, digit):
        keep = set(lines)
        pruned = 0
        for position in sorted(covered):
            pruned += orthogonal[position].prune(digit, keep)
        if pruned:
            tracer.log_swordfish(
                digit=digit,
                lines=[groups[i].label for i in lines],
                covered=[orthogonal[p].label for p in sorted(covered)],
                removed=pruned,
            )
        removed += pruned
    return removed
