"""CLI entrypoint: load puzzle(s), run propagation, and report results."""

import argparse
import csv
import os
import re
from pathlib import Path

from tqdm import tqdm

from solver import solve_puzzle
from src.sudoku.loader import load_puzzles
from src.sudoku.parser import format_compact
from src.sudoku.propagation import DEFAULT_MAX_COMBO, DEFAULT_MAX_ROUNDS
from src.utils.trace import get_tracer, reset_tracer

PUZZLE_SUFFIXES = [".txt", ".json", ".jsonl", ".parquet", ".csv"]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run constraint propagation on Sudoku-family puzzles")
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=os.environ.get("SUDOKU_DATA_PATH"),
        help="Path to a puzzle file or directory of puzzles (default: $SUDOKU_DATA_PATH)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write results CSV")
    parser.add_argument(
        "--variant",
        choices=["basic", "diagonal"],
        default=None,
        help="Rule set to force on every puzzle (default: per-record, else basic)",
    )
    parser.add_argument(
        "--max-combo",
        type=int,
        default=DEFAULT_MAX_COMBO,
        help="Largest fish size to try (2 = X-wing, 3 = swordfish, 4 = jellyfish)",
    )
    parser.add_argument("--max-rounds", type=int, default=DEFAULT_MAX_ROUNDS, help="Propagation round limit")
    parser.add_argument("--trace-dir", type=Path, default=None, help="Write one trace CSV per puzzle here")
    parser.add_argument("--quiet", action="store_true", help="Hide the progress bar")
    args = parser.parse_args(argv)
    if args.input is None:
        parser.error("an input path is required (argument or SUDOKU_DATA_PATH)")
    return args


def collect_puzzles(input_path: Path) -> list:
    puzzles = []
    if input_path.is_file():
        puzzles = load_puzzles(str(input_path))
    elif input_path.is_dir():
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
    else:
        raise ValueError(f"Input path {input_path} is neither file nor directory")
    return puzzles


def trace_name(puzzle_id) -> str:
    """File-safe stem for a puzzle id; never leaves the trace directory."""
    return re.sub(r"[^\w-]", "_", str(puzzle_id)) or "puzzle"


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "status", "grid_solution", "steps"])

        for r in results:
            writer.writerow([r["id"], r["status"], r["grid_solution"], r["steps"]])


def main(argv=None):
    args = parse_args(argv)
    puzzles = collect_puzzles(args.input)
    results = []

    for puzzle in tqdm(puzzles, desc="Solving", unit="puzzle", disable=args.quiet):
        reset_tracer()
        tracer = get_tracer()
        puzzle_id = puzzle.get("id", "unknown")
        if args.variant:
            puzzle = {**puzzle, "variant": args.variant}

        try:
            result = solve_puzzle(puzzle, max_combo=args.max_combo, max_rounds=args.max_rounds)
            summary = tracer.summary()
            results.append({
                "id": puzzle_id,
                "status": result.status,
                "grid_solution": format_compact(result.grid),
                "steps": summary["total_steps"],
            })
        except Exception as e:
            print(f"ERROR: Failed to solve puzzle {puzzle_id}: {e}")
            results.append({
                "id": puzzle_id,
                "status": "error",
                "grid_solution": "",
                "steps": -1,
            })

        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{trace_name(puzzle_id)}.csv")

    if args.output:
        write_results_csv(results, args.output)
    else:
        print(results)
    return results


if __name__ == "__main__":
    main()
