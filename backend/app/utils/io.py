import numpy as np
import pandas as pd
from typing import Any, Dict, List

from ..services.cells import Dataset, columns_of


def _to_py(obj: Any) -> Any:
    """Convert numpy/pandas scalars to plain cell values."""
    if obj is None or obj is pd.NaT or obj is pd.NA:
        return None
    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    if isinstance(obj, np.generic):
        return obj.item()
    return obj


def frame_to_dataset(df: pd.DataFrame) -> Dataset:
    """DataFrame -> list of records, with NaN/NaT mapped to None."""
    records: List[Dict[str, Any]] = df.replace({np.nan: None}).to_dict(orient="records")
    return [{str(k): _to_py(v) for k, v in row.items()} for row in records]


def dataset_to_frame(dataset: Dataset) -> pd.DataFrame:
    """List of records -> DataFrame, columns in first-record order."""
    return pd.DataFrame.from_records(dataset, columns=columns_of(dataset))
