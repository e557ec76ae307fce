# backend/app/services/cells.py
"""
Cell model for record-oriented datasets.

A dataset is a list of records (dicts). Every cell is one of:
None, bool, int, float or str. All type dispatch in the engine goes
through the helpers below instead of ad-hoc coercion.
"""
from __future__ import annotations

import math
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple, Union

Cell = Union[None, bool, int, float, str]
Record = Dict[str, Cell]
Dataset = List[Record]


def is_missing(value: Any) -> bool:
    """None, empty string and float NaN all count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_infinite(value: Any) -> bool:
    """True only for numeric +/-inf (NaN excluded)."""
    return isinstance(value, float) and math.isinf(value)


def is_non_finite(value: Any) -> bool:
    return isinstance(value, float) and not math.isfinite(value)


def as_number(value: Any) -> Optional[float]:
    """Return the finite float a cell represents, or None.

    Numbers and numeric strings ("3", " 2.5 ") qualify; bools, text and
    non-finite values do not.
    """
    if is_number(value):
        try:
            f = float(value)
        except OverflowError:
            # int beyond float range
            return None
        return f if math.isfinite(f) else None
    if isinstance(value, str):
        s = value.strip()
        if not s or "_" in s:
            return None
        try:
            f = float(s)
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


def cell_key(value: Cell) -> Tuple[str, Hashable]:
    """Hashable identity for distinct-value counting.

    1 and 1.0 are the same value; 1, "1" and True are three different ones.
    """
    if isinstance(value, bool):
        return ("b", value)
    if is_number(value):
        try:
            return ("n", float(value))
        except OverflowError:
            return ("n", value)
    if isinstance(value, str):
        return ("s", value)
    return ("x", repr(value))


def format_cell(value: Cell) -> str:
    """Display label for a cell (integral floats drop their '.0')."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def columns_of(dataset: Dataset) -> List[str]:
    """Column names of a dataset: the keys of its first record."""
    if not dataset:
        return []
    return list(dataset[0].keys())


def column_values(dataset: Dataset, column: str) -> List[Cell]:
    """All cells of `column`, absent keys reading as None."""
    return [row.get(column) for row in dataset]


def present_values(values: Iterable[Cell]) -> List[Cell]:
    return [v for v in values if not is_missing(v)]


def finite_numbers(values: Iterable[Cell]) -> List[float]:
    out = []
    for v in values:
        f = as_number(v)
        if f is not None:
            out.append(f)
    return out


def format_percent(part: int, whole: int) -> str:
    """Percentage with one decimal place, e.g. '33.3'."""
    if whole <= 0:
        return "0.0"
    return f"{part / whole * 100.0:.1f}"
