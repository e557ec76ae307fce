# backend/app/services/profiling.py
"""
Dataset profiling for TabLens.

- Infers a semantic type for every column of a record dataset.
- Computes missing/unique counts, numeric stats, top values and correlations.
- Attaches the infinite-value and duplicate-value quality reports.
- Returns pydantic value objects (serialized by the routers).
"""
from __future__ import annotations

from typing import Any, Dict, List

from loguru import logger

from ..core.errors import EmptyDatasetError
from ..schemas.analysis import AnalysisResult, ColumnAnalysis, ColumnType, ValueCount
from ..utils.io import dataset_to_frame, frame_to_dataset
from .cells import Dataset, column_values, columns_of, format_percent, is_missing, present_values
from .correlation import correlate
from .quality import detect_duplicates, detect_infinite_values, value_counts
from .statistics import compute_stats
from .type_inference import infer_type

TOP_VALUES_LIMIT = 15
TOP_VALUES_MAX_UNIQUE = 50


def analyze_column(values: List[Any]) -> ColumnAnalysis:
    """Type, missing/unique counts, stats and top values for one column."""
    column_type = infer_type(values)
    present = present_values(values)
    missing = sum(1 for v in values if is_missing(v))
    counts = value_counts(present)

    col = ColumnAnalysis(
        type=column_type,
        missing_count=missing,
        missing_percent=format_percent(missing, len(values)),
        unique_count=len(counts),
    )

    if column_type == ColumnType.NUMERIC:
        col.stats = compute_stats(values)

    if column_type == ColumnType.CATEGORICAL and col.unique_count < TOP_VALUES_MAX_UNIQUE:
        col.top_values = [
            ValueCount(value=value, count=count)
            for value, count in counts[:TOP_VALUES_LIMIT]
        ]

    return col


def analyze(dataset: Dataset) -> AnalysisResult:
    """
    Profile a dataset.

    Columns are the keys of the first record; keys that only appear in
    later records are ignored. Raises EmptyDatasetError for zero rows.
    """
    if not dataset:
        raise EmptyDatasetError()

    columns = columns_of(dataset)
    analysis: Dict[str, ColumnAnalysis] = {
        col: analyze_column(column_values(dataset, col)) for col in columns
    }

    def _of_type(column_type: ColumnType) -> List[str]:
        return [c for c in columns if analysis[c].type == column_type]

    numeric_cols = _of_type(ColumnType.NUMERIC)
    has_inf, inf_stats = detect_infinite_values(dataset)

    result = AnalysisResult(
        row_count=len(dataset),
        column_count=len(columns),
        columns=analysis,
        correlations=correlate(dataset, numeric_cols),
        numeric_columns=numeric_cols,
        categorical_columns=_of_type(ColumnType.CATEGORICAL),
        date_columns=_of_type(ColumnType.DATETIME),
        infinite_value_stats=inf_stats,
        has_infinite_values=has_inf,
        duplicate_stats=detect_duplicates(dataset),
    )
    logger.debug(
        f"Analyzed {result.row_count} rows x {result.column_count} cols "
        f"({len(numeric_cols)} numeric, {len(result.correlations)} correlations)"
    )
    return result


def build_preview(dataset: Dataset, n: int = 10) -> Dict[str, Any]:
    """Return preview JSON: first N rows (as the frame sees them), column order, shape, and dtypes."""
    n = max(1, int(n))
    df = dataset_to_frame(dataset)
    dtypes = {col: str(dtype) for col, dtype in df.dtypes.items()}
    return {
        "rows": len(dataset),
        "cols": len(df.columns),
        "columns": list(df.columns),
        "dtypes": dtypes,
        "data": frame_to_dataset(df.head(n)),
    }
