# backend/app/services/type_inference.py
from __future__ import annotations

import re
from typing import Sequence

from ..schemas.analysis import ColumnType
from .cells import Cell, as_number, cell_key, present_values

NUMERIC_RATIO = 0.8
DATETIME_RATIO = 0.7
CATEGORICAL_UNIQUE_RATIO = 0.5

# ISO-style prefix (anchored) or a D/M/YY(YY) fragment anywhere in the value
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}")


def looks_like_date(value: Cell) -> bool:
    return DATE_PATTERN.search(str(value)) is not None


def infer_type(values: Sequence[Cell]) -> ColumnType:
    """
    Classify a column from its non-missing values.

    First match wins: numeric (> 80% finite numbers), datetime (> 70% date-like),
    categorical (distinct/total < 0.5), otherwise text. A column with no
    present values is `empty`.
    """
    non_null = present_values(values)
    if not non_null:
        return ColumnType.EMPTY

    total = len(non_null)

    numeric = sum(1 for v in non_null if as_number(v) is not None)
    if numeric / total > NUMERIC_RATIO:
        return ColumnType.NUMERIC

    dates = sum(1 for v in non_null if looks_like_date(v))
    if dates / total > DATETIME_RATIO:
        return ColumnType.DATETIME

    distinct = len({cell_key(v) for v in non_null})
    if distinct / total < CATEGORICAL_UNIQUE_RATIO:
        return ColumnType.CATEGORICAL

    return ColumnType.TEXT
