# backend/app/routers/analysis.py
from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, HTTPException
from loguru import logger

from ..core.config import settings
from ..core.errors import EmptyDatasetError, InvalidOptionError
from ..schemas.preprocessing import (
    AnalyzeRequest,
    AnalyzeResponse,
    AutomationResult,
    DatasetPreviewResponse,
    PreprocessRequest,
    PreprocessResult,
    PreviewRequest,
)
from ..services.automation import automate
from ..services.preprocessing import run_preprocessing
from ..services.profiling import analyze, build_preview

router = APIRouter(tags=["analysis"])


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _json_safe(obj: Any) -> Any:
    """
    Recursively replace non-finite floats (NaN / inf / -inf) with None
    so that FastAPI's JSON encoder never crashes.
    """
    if isinstance(obj, float):
        if math.isfinite(obj):
            return obj
        return None
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_json_safe(v) for v in obj]
    return obj


def _empty_dataset(e: EmptyDatasetError) -> HTTPException:
    logger.warning(f"Rejected request: {e}")
    return HTTPException(status_code=422, detail=str(e))


# -------------------------------------------------------------------
# ANALYSIS
# -------------------------------------------------------------------
@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_dataset(req: AnalyzeRequest) -> AnalyzeResponse:
    """
    Profile a dataset: column types, stats, correlations, quality reports.
    """
    try:
        result = analyze(req.data)
    except EmptyDatasetError as e:
        raise _empty_dataset(e)
    return AnalyzeResponse(ok=True, analysis=result)


@router.post("/preview", response_model=DatasetPreviewResponse)
def preview_dataset(req: PreviewRequest) -> DatasetPreviewResponse:
    """
    Return first N rows for a dataset, with column order and dtype map.
    """
    n = min(req.n or settings.preview_rows, settings.max_preview_rows)
    payload = build_preview(req.data, n=n)
    payload["data"] = _json_safe(payload["data"])
    return DatasetPreviewResponse(ok=True, **payload)


# -------------------------------------------------------------------
# PREPROCESSING
# -------------------------------------------------------------------
@router.post("/preprocess", response_model=PreprocessResult)
def preprocess_dataset(req: PreprocessRequest) -> PreprocessResult:
    """
    Apply infinite sanitization, missing-value handling, encoding and
    normalization (in that order), then re-analyze the result.
    """
    try:
        result = run_preprocessing(req.data, req.options, analysis=req.analysis)
    except EmptyDatasetError as e:
        raise _empty_dataset(e)
    except InvalidOptionError as e:
        logger.warning(f"Rejected preprocessing options: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return result.model_copy(update={"data": _json_safe(result.data)})


@router.post("/automate", response_model=AutomationResult)
def automate_dataset(req: AnalyzeRequest) -> AutomationResult:
    """
    Run the default cleaning pipeline (impute, encode, normalize).
    """
    try:
        result = automate(req.data)
    except EmptyDatasetError as e:
        raise _empty_dataset(e)

    return result.model_copy(update={"data": _json_safe(result.data)})
