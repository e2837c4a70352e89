import json
import os
import re
from typing import Any, Dict, List, Optional

import pandas as pd

from .parser import PuzzleParseError, format_token, parse_token

GRID_KEYS = ("grid", "puzzle", "board", "quizzes")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .txt, .json, .jsonl, .csv and .parquet.
    Returns a list of records with keys `id`, `grid`, `variant` and `size`.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = os.path.splitext(os.path.basename(file_path))[0]

    def _is_nonempty_str(value: Any) -> bool:
        return isinstance(value, str) and value.strip() != ""

    def _extract_grid_text(record: Dict[str, Any]) -> str:
        for key in GRID_KEYS:
            value = record.get(key)
            if _is_nonempty_str(value):
                return value
            value = _coerce_lists(value)
            # Some datasets store boards as nested lists of ints or strings.
            if isinstance(value, list) and value and isinstance(value[0], list):
                try:
                    return _nested_to_text(value)
                except (PuzzleParseError, TypeError, ValueError):
                    # Leave the board empty so only this record fails to parse.
                    return ""
        return ""

    def _coerce_lists(value: Any) -> Any:
        # Parquet list columns come back as (nested) numpy arrays.
        if hasattr(value, "tolist"):
            value = value.tolist()
        if isinstance(value, (list, tuple)):
            return [_coerce_lists(v) for v in value]
        return value

    def _nested_to_text(rows: List[List[Any]]) -> str:
        size = len(rows)
        lines = []
        for row in rows:
            tokens = []
            for v in row:
                if v is None:
                    tokens.append("0")
                elif isinstance(v, int):
                    tokens.append(format_token(v))
                else:
                    digit = parse_token(str(v).strip() or "0", size)
                    tokens.append(format_token(digit or 0))
            lines.append(" ".join(tokens))
        return "\n".join(lines)

    def _infer_size(value: Any) -> Optional[int]:
        if _is_nonempty_str(value):
            match = re.search(r"(\d+)x\1", value)
            if match:
                return int(match.group(1))
        return None

    def _normalize_record(record: Dict[str, Any], index: int) -> Dict[str, Any]:
        try:
            size = int(record["size"]) if record.get("size") not in (None, "") else None
        except (TypeError, ValueError):
            size = None
        if size is None:
            size = _infer_size(str(record.get("id") or ""))

        variant = record.get("variant")
        return {
            "id": str(record.get("id") or f"{stem}_{index}"),
            "grid": _extract_grid_text(record),
            "variant": variant if _is_nonempty_str(variant) else "basic",
            "size": size,
        }

    def _normalize_all(records: List[Any]) -> List[Dict[str, Any]]:
        return [_normalize_record(r, i) for i, r in enumerate(records) if isinstance(r, dict)]

    # Case 1: Parquet / CSV (tabular, read through pandas)
    if file_path.endswith((".parquet", ".csv")):
        try:
            if file_path.endswith(".parquet"):
                df = pd.read_parquet(file_path)
            else:
                df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
            return _normalize_all(df.to_dict(orient="records"))
        except Exception as e:
            print(f"Error reading {file_path}: {e}")
            return []

    # Case 2: Plain text boards separated by blank lines
    if file_path.endswith(".txt"):
        with open(file_path, "r", encoding="utf-8") as f:
            blocks = re.split(r"\n\s*\n", f.read())
        return _normalize_all([{"grid": block} for block in blocks if block.strip()])

    # Case 3: JSON File (array or object)
    if file_path.endswith(".json"):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            if isinstance(payload, list):
                return _normalize_all(payload)
            if isinstance(payload, dict):
                return _normalize_all([payload])
            return []
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            pass

    # Case 4: JSONL File (Text)
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                data.append(obj)
    return _normalize_all(data)
