# backend/app/services/statistics.py
"""
Descriptive statistics for numeric columns.

Only finite numeric values take part. Quantiles use the lower-index
positions floor(n*p) of the sorted values (no interpolation), and the
median of an even-length column is the upper of the two middle values.
"""
from __future__ import annotations

import warnings
from typing import Optional, Sequence

import numpy as np

from ..core.errors import ZeroVarianceWarning
from ..schemas.analysis import NumericStats
from .cells import Cell, finite_numbers

OUTLIER_IQR_FACTOR = 1.5


def population_std(values: np.ndarray) -> float:
    return float(np.sqrt(np.mean((values - values.mean()) ** 2)))


def compute_stats(values: Sequence[Cell]) -> Optional[NumericStats]:
    """Return NumericStats for the finite numbers in `values`, or None if there are none."""
    nums = finite_numbers(values)
    if not nums:
        return None

    arr = np.sort(np.asarray(nums, dtype=float))
    n = arr.size

    mean = float(arr.mean())
    std = population_std(arr)

    q1 = float(arr[int(n * 0.25)])
    q3 = float(arr[int(n * 0.75)])
    iqr = q3 - q1
    lower = q1 - OUTLIER_IQR_FACTOR * iqr
    upper = q3 + OUTLIER_IQR_FACTOR * iqr
    outliers = int(np.count_nonzero((arr < lower) | (arr > upper)))

    if std > 0:
        skewness: Optional[float] = float(np.mean(((arr - mean) / std) ** 3))
    else:
        warnings.warn(
            "Skewness is undefined for a zero-variance column",
            ZeroVarianceWarning,
            stacklevel=2,
        )
        skewness = None

    return NumericStats(
        count=n,
        mean=mean,
        median=float(arr[n // 2]),
        min=float(arr[0]),
        max=float(arr[-1]),
        std=std,
        q1=q1,
        q3=q3,
        iqr=iqr,
        outlier_count=outliers,
        skewness=skewness,
    )
