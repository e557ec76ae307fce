# backend/app/schemas/analysis.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_serializer


class ColumnType(str, Enum):
    EMPTY = "empty"
    NUMERIC = "numeric"
    DATETIME = "datetime"
    CATEGORICAL = "categorical"
    TEXT = "text"


class NumericStats(BaseModel):
    """Descriptive statistics of a column's finite numeric values.

    Values keep full float precision; JSON output is rounded to 2 places.
    `skewness` is None for zero-variance columns.
    """
    count: int
    mean: float
    median: float
    min: float
    max: float
    std: float
    q1: float
    q3: float
    iqr: float
    outlier_count: int
    skewness: Optional[float] = None

    @field_serializer("mean", "median", "min", "max", "std", "q1", "q3", "iqr", "skewness")
    def _two_places(self, v: Optional[float]) -> Optional[float]:
        return None if v is None else round(v, 2)


class ValueCount(BaseModel):
    value: Any
    count: int


class ColumnAnalysis(BaseModel):
    type: ColumnType
    missing_count: int
    missing_percent: str
    unique_count: int
    stats: Optional[NumericStats] = None
    top_values: Optional[List[ValueCount]] = None


class Correlation(BaseModel):
    column_a: str
    column_b: str
    coefficient: float

    @field_serializer("coefficient")
    def _three_places(self, v: float) -> float:
        return round(v, 3)


class InfiniteStat(BaseModel):
    count: int
    percentage: str


class DuplicateStat(BaseModel):
    duplicate_count: int
    duplicate_percentage: str
    total_values: int
    unique_values: int
    top_duplicates: List[ValueCount]


class AnalysisResult(BaseModel):
    row_count: int
    column_count: int
    columns: Dict[str, ColumnAnalysis]
    correlations: List[Correlation]
    numeric_columns: List[str]
    categorical_columns: List[str]
    date_columns: List[str]
    infinite_value_stats: Dict[str, InfiniteStat] = {}
    has_infinite_values: bool = False
    duplicate_stats: Dict[str, DuplicateStat] = {}
