# backend/app/services/correlation.py
from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from loguru import logger

from ..schemas.analysis import Correlation
from .cells import Dataset, as_number


def pearson(pairs: Sequence[Tuple[float, float]]) -> float:
    """
    Pearson's r by the sum-of-products formula.

    Returns 0 when the denominator vanishes (a constant side, or a single pair).
    """
    n = len(pairs)
    if n == 0:
        return 0.0

    sum_x = sum_y = sum_x2 = sum_y2 = sum_xy = 0.0
    for x, y in pairs:
        sum_x += x
        sum_y += y
        sum_x2 += x * x
        sum_y2 += y * y
        sum_xy += x * y

    num = sum_xy - (sum_x * sum_y) / n
    den_sq = (sum_x2 - (sum_x * sum_x) / n) * (sum_y2 - (sum_y * sum_y) / n)
    # rounding can push a zero variance slightly negative
    if den_sq <= 0:
        return 0.0

    r = num / math.sqrt(den_sq)
    return max(-1.0, min(1.0, r))


def paired_values(dataset: Dataset, col_a: str, col_b: str) -> List[Tuple[float, float]]:
    """Rows where both columns hold finite numbers, as (a, b) tuples."""
    pairs = []
    for row in dataset:
        a = as_number(row.get(col_a))
        b = as_number(row.get(col_b))
        if a is not None and b is not None:
            pairs.append((a, b))
    return pairs


def correlate(dataset: Dataset, numeric_columns: Sequence[str]) -> List[Correlation]:
    """One Correlation per unordered column pair, strongest |r| first."""
    if len(numeric_columns) < 2:
        return []

    correlations: List[Correlation] = []
    for i, col_a in enumerate(numeric_columns):
        for col_b in numeric_columns[i + 1:]:
            pairs = paired_values(dataset, col_a, col_b)
            if not pairs:
                logger.debug(f"No complete rows for pair ({col_a}, {col_b}); skipped")
                continue
            correlations.append(
                Correlation(column_a=col_a, column_b=col_b, coefficient=pearson(pairs))
            )

    # sorted() is stable, so ties keep discovery order
    return sorted(correlations, key=lambda c: abs(c.coefficient), reverse=True)
