"""Tracing module: logs propagation steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence


@dataclass
class TraceStep:
    """A single step in the propagation process."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'prune', 'swordfish', 'round', 'conflict', 'stalled', 'solution_found'
    row: Optional[int] = None
    col: Optional[int] = None
    digit: Optional[int] = None
    group: Optional[str] = None  # label(s) of the constraint group(s) involved
    removed: Optional[int] = None  # candidates removed by this step
    round_number: Optional[int] = None
    reason: Optional[str] = None


class Tracer:
    """Records propagation steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_assign(self, row: int, col: int, digit: int, reason: str = "single candidate"):
        """Log a cell assignment."""
        if not self.enabled:
            return
        self._record('assign', row=row, col=col, digit=digit, reason=reason)

    def log_prune(self, group: str, digit: int, removed: int, reason: str = ""):
        """Log candidates removed from one constraint group."""
        if not self.enabled:
            return
        self._record('prune', group=group, digit=digit, removed=removed, reason=reason)

    def log_swordfish(self, digit: int, lines: Sequence[str], covered: Sequence[str], removed: int):
        """Log a fish pattern and the eliminations it caused."""
        if not self.enabled:
            return
        self._record(
            'swordfish',
            digit=digit,
            group=", ".join(lines),
            removed=removed,
            reason=f"size {len(lines)} covering {', '.join(covered)}",
        )

    def log_round(self, round_number: int, groups_scanned: int):
        """Log the start of a propagation round."""
        if not self.enabled:
            return
        self._record(
            'round',
            round_number=round_number,
            reason=f"Scanning {groups_scanned} groups",
        )

    def log_conflict(self, reason: str, round_number: Optional[int] = None):
        """Log a detected contradiction."""
        if not self.enabled:
            return
        self._record('conflict', round_number=round_number, reason=reason)

    def log_stalled(self, round_number: int):
        """Log a round that changed nothing."""
        if not self.enabled:
            return
        self._record('stalled', round_number=round_number, reason="No cell changed")

    def log_solution_found(self, round_number: int):
        """Log when every cell is assigned."""
        if not self.enabled:
            return
        self._record('solution_found', round_number=round_number)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'row', 'col', 'digit',
            'group', 'removed', 'round_number', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': sum(1 for s in self.steps if s.action_type == 'assign'),
            'num_rounds': sum(1 for s in self.steps if s.action_type == 'round'),
            'candidates_removed': sum(s.removed or 0 for s in self.steps),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
