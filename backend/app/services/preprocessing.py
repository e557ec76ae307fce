# backend/app/services/preprocessing.py
"""
Preprocessing Service
---------------------
Pure dataset -> dataset operators:
- Infinite-value sanitization
- Missing-value handling (drop rows/columns, mean/median/mode/zero fill)
- Categorical encoding (label / one-hot)
- Numeric normalization (min-max / standard)

and the pipeline that applies them in a fixed order against an analysis
snapshot taken before any transform. Operators never mutate their input;
every call builds new records.
"""
from __future__ import annotations

import warnings
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np
from loguru import logger

from ..core.errors import InvalidOptionError, ZeroVarianceWarning
from ..schemas.analysis import AnalysisResult, ColumnType
from ..schemas.preprocessing import PreprocessOptions, PreprocessResult
from .cells import (
    Cell,
    Dataset,
    as_number,
    cell_key,
    column_values,
    columns_of,
    finite_numbers,
    format_cell,
    is_missing,
    is_non_finite,
    present_values,
)
from .profiling import analyze
from .quality import value_counts
from .statistics import population_std
from .type_inference import infer_type

MISSING_VALUE_METHODS = ("dropRows", "dropColumns", "fillMean", "fillMedian", "fillMode", "fillZero", "none")
ENCODING_METHODS = ("label", "onehot", "none")
NORMALIZATION_METHODS = ("minmax", "standard", "none")

MISSING_VALUE_STEPS = {
    "dropRows": "Dropped rows with missing values",
    "dropColumns": "Dropped columns with missing values",
    "fillMean": "Filled missing values with mean",
    "fillMedian": "Filled missing values with median",
    "fillMode": "Filled missing values with mode",
    "fillZero": "Filled missing values with zero",
}
ENCODING_STEPS = {"label": "Applied Label Encoding", "onehot": "Applied One-Hot Encoding"}
NORMALIZATION_STEPS = {"minmax": "Applied Min-Max Normalization", "standard": "Applied Standard Normalization"}


def _require(option: str, value: str, allowed: Sequence[str]) -> None:
    if value not in allowed:
        raise InvalidOptionError(option, value, allowed)


def validate_options(options: PreprocessOptions) -> None:
    """Fail fast on any unknown method before touching the data."""
    _require("missing_value_method", options.missing_value_method, MISSING_VALUE_METHODS)
    _require("encoding_method", options.encoding_method, ENCODING_METHODS)
    _require("normalization_method", options.normalization_method, NORMALIZATION_METHODS)


def _copy(dataset: Dataset) -> Dataset:
    return [dict(row) for row in dataset]


def _select(dataset: Dataset, columns: Optional[Iterable[str]]) -> List[str]:
    """Requested columns that exist in the dataset, in dataset order."""
    existing = columns_of(dataset)
    if columns is None:
        return existing
    wanted: Set[str] = set(columns)
    return [c for c in existing if c in wanted]


# --------------------------------------------------------------------
# Infinite values
# --------------------------------------------------------------------
def count_non_finite(dataset: Dataset) -> int:
    return sum(1 for row in dataset for v in row.values() if is_non_finite(v))


def replace_infinite(dataset: Dataset) -> Dataset:
    """Replace every non-finite numeric cell with None."""
    return [
        {k: (None if is_non_finite(v) else v) for k, v in row.items()}
        for row in dataset
    ]


# --------------------------------------------------------------------
# Missing values
# --------------------------------------------------------------------
def _fill(dataset: Dataset, fills: Dict[str, Cell]) -> Dataset:
    if not fills:
        return _copy(dataset)
    out = []
    for row in dataset:
        new = dict(row)
        for col, value in fills.items():
            if is_missing(row.get(col)):
                new[col] = value
        out.append(new)
    return out


def _numeric_columns(dataset: Dataset, analysis: Optional[AnalysisResult]) -> Set[str]:
    if analysis is not None:
        return set(analysis.numeric_columns)
    return {
        c for c in columns_of(dataset)
        if infer_type(column_values(dataset, c)) == ColumnType.NUMERIC
    }


def handle_missing_values(
    dataset: Dataset,
    method: str,
    analysis: Optional[AnalysisResult] = None,
    columns: Optional[Iterable[str]] = None,
) -> Dataset:
    """
    Apply one missing-value strategy.

    `analysis` supplies the numeric columns for fillMean/fillMedian (inferred
    from the data when omitted); `columns` restricts the fill methods to a
    subset. Each column is imputed from its own values only.
    """
    _require("missing_value_method", method, MISSING_VALUE_METHODS)
    if method == "none":
        return _copy(dataset)

    cols = columns_of(dataset)

    if method == "dropRows":
        return [
            dict(row) for row in dataset
            if all(not is_missing(row.get(c)) for c in cols)
        ]

    if method == "dropColumns":
        keep = [c for c in cols if all(not is_missing(row.get(c)) for row in dataset)]
        logger.debug(f"dropColumns keeps {len(keep)}/{len(cols)} columns")
        return [{c: row.get(c) for c in keep} for row in dataset]

    targets = _select(dataset, columns)
    fills: Dict[str, Cell] = {}

    if method in ("fillMean", "fillMedian"):
        numeric = _numeric_columns(dataset, analysis)
        for col in targets:
            if col not in numeric:
                continue
            nums = finite_numbers(column_values(dataset, col))
            if not nums:
                continue
            if method == "fillMean":
                fills[col] = float(np.mean(nums))
            else:
                fills[col] = sorted(nums)[len(nums) // 2]

    elif method == "fillMode":
        for col in targets:
            present = present_values(column_values(dataset, col))
            if present:
                fills[col] = value_counts(present, 1)[0][0]

    elif method == "fillZero":
        fills = {col: 0 for col in targets}

    return _fill(dataset, fills)


# --------------------------------------------------------------------
# Categorical encoding
# --------------------------------------------------------------------
def _levels(values: Iterable[Cell]) -> Dict:
    """Distinct present values keyed by cell_key, in order of first appearance."""
    levels: Dict = {}
    for v in values:
        if not is_missing(v):
            levels.setdefault(cell_key(v), v)
    return levels


def apply_categorical_encoding(dataset: Dataset, method: str, columns: Sequence[str]) -> Dataset:
    """Label- or one-hot-encode `columns`; columns missing from the dataset are skipped."""
    _require("encoding_method", method, ENCODING_METHODS)
    targets = _select(dataset, columns)
    if method == "none" or not targets:
        return _copy(dataset)

    levels = {col: _levels(column_values(dataset, col)) for col in targets}

    if method == "label":
        labels = {
            col: {key: idx for idx, key in enumerate(col_levels)}
            for col, col_levels in levels.items()
        }
        out = []
        for row in dataset:
            new = dict(row)
            for col in targets:
                v = row.get(col)
                new[col] = None if is_missing(v) else labels[col][cell_key(v)]
            out.append(new)
        return out

    # onehot: levels whose labels collide (1 and "1") share one indicator
    indicators: Dict[str, Dict[str, Set]] = {}
    for col in targets:
        names: Dict[str, Set] = {}
        for level_key, level_value in levels[col].items():
            names.setdefault(f"{col}_{format_cell(level_value)}", set()).add(level_key)
        indicators[col] = names

    target_set = set(targets)
    out = []
    for row in dataset:
        new = {k: v for k, v in row.items() if k not in target_set}
        for col in targets:
            v = row.get(col)
            key = None if is_missing(v) else cell_key(v)
            for name, keys in indicators[col].items():
                new[name] = 1 if key in keys else 0
        out.append(new)
    return out


# --------------------------------------------------------------------
# Normalization
# --------------------------------------------------------------------
def apply_normalization(dataset: Dataset, method: str, columns: Sequence[str]) -> Dataset:
    """
    Rescale finite numeric cells of `columns` as (x - offset) / scale.

    minmax uses (min, max - min), standard uses (mean, population std).
    Columns with zero range / zero std are left unchanged; missing and
    non-finite cells always pass through.
    """
    _require("normalization_method", method, NORMALIZATION_METHODS)
    targets = _select(dataset, columns)
    if method == "none" or not targets:
        return _copy(dataset)

    transforms: Dict[str, Tuple[float, float]] = {}
    for col in targets:
        nums = finite_numbers(column_values(dataset, col))
        if not nums:
            continue
        arr = np.asarray(nums, dtype=float)
        if method == "minmax":
            offset, scale = float(arr.min()), float(arr.max() - arr.min())
        else:
            offset, scale = float(arr.mean()), population_std(arr)
        if scale > 0:
            transforms[col] = (offset, scale)
        else:
            warnings.warn(
                f"Column '{col}' has zero variance; {method} normalization skipped",
                ZeroVarianceWarning,
                stacklevel=2,
            )

    out = []
    for row in dataset:
        new = dict(row)
        for col, (offset, scale) in transforms.items():
            x = as_number(row.get(col))
            if x is not None:
                new[col] = (x - offset) / scale
        out.append(new)
    return out


# --------------------------------------------------------------------
# Pipeline
# --------------------------------------------------------------------
def _run_steps(
    dataset: Dataset,
    analysis: AnalysisResult,
    options: PreprocessOptions,
) -> Tuple[Dataset, List[str]]:
    validate_options(options)
    data = _copy(dataset)
    steps: List[str] = []

    # 1. infinite values
    if options.handle_infinite:
        replaced = count_non_finite(data)
        data = replace_infinite(data)
        if replaced:
            steps.append(f"Replaced {replaced} non-finite values with null")

    # 2. missing values (types come from the pre-pipeline snapshot)
    if options.missing_value_method != "none":
        data = handle_missing_values(data, options.missing_value_method, analysis)
        steps.append(MISSING_VALUE_STEPS[options.missing_value_method])

    # 3. encoding
    if options.encoding_method != "none":
        data = apply_categorical_encoding(data, options.encoding_method, analysis.categorical_columns)
        steps.append(ENCODING_STEPS[options.encoding_method])

    # 4. normalization
    if options.normalization_method != "none":
        data = apply_normalization(data, options.normalization_method, analysis.numeric_columns)
        steps.append(NORMALIZATION_STEPS[options.normalization_method])

    return data, steps


def preprocess(dataset: Dataset, analysis: AnalysisResult, options: PreprocessOptions) -> Dataset:
    """Apply the configured operators in fixed order; does not re-analyze."""
    data, _ = _run_steps(dataset, analysis, options)
    return data


def run_preprocessing(
    dataset: Dataset,
    options: PreprocessOptions,
    analysis: Optional[AnalysisResult] = None,
) -> PreprocessResult:
    """
    Preprocess and re-analyze, returning the data with a step log.

    Without a prior `analysis` the snapshot is computed from `dataset`.
    The result's analysis is None when the pipeline removed every row.
    """
    if analysis is None:
        analysis = analyze(dataset)

    data, steps = _run_steps(dataset, analysis, options)
    final = analyze(data) if data else None

    logger.info(
        f"Preprocessing applied {len(steps)} step(s): "
        f"{len(dataset)} -> {len(data)} rows"
    )
    return PreprocessResult(ok=True, data=data, steps=steps, analysis=final)
