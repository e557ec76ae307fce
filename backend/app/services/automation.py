# backend/app/services/automation.py

"""
Automated Preprocessing
-----------------------
One-shot cleaning pipeline with sensible defaults:
- Type detection on the raw data
- Infinite-value sanitization
- Imputation: median for numeric columns, mode for categorical columns
- Duplicate / outlier reporting
- Label encoding of categorical columns
- Standard normalization of numeric columns
- Final re-analysis

Each stage re-analyzes the data it receives, unlike the configurable
pipeline in preprocessing.py which works from a single snapshot.
"""

from __future__ import annotations

import time
from typing import Iterable, List

from loguru import logger

from ..schemas.preprocessing import AutomationResult, ExecutionMetrics
from .cells import Dataset, is_missing
from .preprocessing import (
    apply_categorical_encoding,
    apply_normalization,
    count_non_finite,
    handle_missing_values,
    replace_infinite,
)
from .profiling import analyze


def count_missing(dataset: Dataset, columns: Iterable[str]) -> int:
    cols = list(columns)
    return sum(1 for row in dataset for c in cols if is_missing(row.get(c)))


def automate(dataset: Dataset) -> AutomationResult:
    """Run the default cleaning pipeline on `dataset` and report what it did."""
    started = time.perf_counter()
    data = [dict(row) for row in dataset]
    steps: List[str] = []
    metrics = ExecutionMetrics(rows_processed=len(data))

    # Step 1: validation & type detection (raises EmptyDatasetError)
    initial = analyze(data)
    metrics.columns_processed = initial.column_count
    steps.append(f"Data validation: Detected {initial.column_count} columns with type analysis")

    # Step 2: infinite values
    before = count_non_finite(data)
    if before:
        data = replace_infinite(data)
        metrics.infinite_values_replaced = before - count_non_finite(data)
        steps.append(f"Replaced {metrics.infinite_values_replaced} non-finite values with null")

    # Step 3: imputation
    current = analyze(data)
    missing_cols = [c for c, info in current.columns.items() if info.missing_count > 0]
    if missing_cols:
        before = count_missing(data, missing_cols)
        data = handle_missing_values(data, "fillMedian", current)
        data = handle_missing_values(data, "fillMode", current, columns=current.categorical_columns)
        metrics.missing_values_filled = before - count_missing(data, missing_cols)
        steps.append(
            f"Filled {metrics.missing_values_filled} missing values across "
            f"{len(missing_cols)} columns using median/mode imputation"
        )

    # Step 4: quality checks
    quality = analyze(data)
    if quality.duplicate_stats:
        steps.append(f"Data quality: Detected duplicates in {len(quality.duplicate_stats)} columns")

    # Step 5: outliers (reported, not removed)
    outlier_cols = [
        c for c in quality.numeric_columns
        if quality.columns[c].stats is not None and quality.columns[c].stats.outlier_count > 0
    ]
    if outlier_cols:
        steps.append(f"Outlier detection: Found outliers in {len(outlier_cols)} numeric columns")

    # Step 6: encoding
    if quality.categorical_columns:
        data = apply_categorical_encoding(data, "label", quality.categorical_columns)
        metrics.columns_encoded = len(quality.categorical_columns)
        steps.append(f"Applied Label Encoding to {metrics.columns_encoded} categorical columns")

    # Step 7: normalization
    if quality.numeric_columns:
        data = apply_normalization(data, "standard", quality.numeric_columns)
        metrics.columns_normalized = len(quality.numeric_columns)
        steps.append(f"Applied Standard Normalization to {metrics.columns_normalized} numeric columns")

    # Step 8: final re-analysis
    final = analyze(data)
    metrics.duration_ms = (time.perf_counter() - started) * 1000.0

    logger.info(f"Automated pipeline finished in {metrics.duration_ms:.1f} ms ({len(steps)} steps)")
    return AutomationResult(ok=True, data=data, steps=steps, metrics=metrics, analysis=final)
