# backend/app/schemas/preprocessing.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .analysis import AnalysisResult
from .base import APIResponse


# ============================================================
# OPTIONS
# ============================================================
class PreprocessOptions(BaseModel):
    handle_infinite: bool = False
    missing_value_method: str = "none"    # "dropRows" | "dropColumns" | "fillMean" | "fillMedian" | "fillMode" | "fillZero" | "none"
    encoding_method: str = "none"         # "label" | "onehot" | "none"
    normalization_method: str = "none"    # "minmax" | "standard" | "none"


# ============================================================
# REQUESTS
# ============================================================
class AnalyzeRequest(BaseModel):
    data: List[Dict[str, Any]]


class PreviewRequest(BaseModel):
    data: List[Dict[str, Any]]
    n: Optional[int] = Field(default=None, ge=1)


class PreprocessRequest(BaseModel):
    data: List[Dict[str, Any]]
    # Snapshot taken before any transform; recomputed from `data` if omitted.
    analysis: Optional[AnalysisResult] = None
    options: PreprocessOptions = PreprocessOptions()


# ============================================================
# RESULTS
# ============================================================
class PreprocessResult(APIResponse):
    data: List[Dict[str, Any]]
    steps: List[str]
    analysis: Optional[AnalysisResult] = None


class ExecutionMetrics(BaseModel):
    rows_processed: int = 0
    columns_processed: int = 0
    infinite_values_replaced: int = 0
    missing_values_filled: int = 0
    columns_encoded: int = 0
    columns_normalized: int = 0
    duration_ms: float = 0.0


class AutomationResult(APIResponse):
    data: List[Dict[str, Any]]
    steps: List[str]
    metrics: ExecutionMetrics
    analysis: Optional[AnalysisResult] = None


class DatasetPreviewResponse(APIResponse):
    rows: int
    cols: int
    columns: List[str]
    dtypes: Dict[str, str]
    data: List[Dict[str, Any]]


class AnalyzeResponse(APIResponse):
    analysis: AnalysisResult
