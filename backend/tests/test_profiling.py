# backend/tests/test_profiling.py
import pandas as pd
import pytest

from backend.app.core.errors import EmptyDatasetError
from backend.app.schemas.analysis import ColumnType
from backend.app.services.profiling import analyze, build_preview
from backend.app.utils.io import frame_to_dataset


def test_linear_columns_correlate(linear_dataset):
    result = analyze(linear_dataset)
    assert result.numeric_columns == ["a", "b"]
    assert len(result.correlations) == 1
    assert result.correlations[0].coefficient == pytest.approx(1.0)
    assert result.model_dump(mode="json")["correlations"][0]["coefficient"] == 1.0


def test_empty_dataset_is_an_error():
    with pytest.raises(EmptyDatasetError):
        analyze([])


def test_columns_come_from_first_record_only():
    data = [{"a": 1, "b": "x"}, {"a": 2, "b": "y", "extra": 5}, {"a": 3}]
    result = analyze(data)
    assert result.column_count == 2
    assert list(result.columns) == ["a", "b"]
    # the absent key in the last record reads as missing
    assert result.columns["b"].missing_count == 1
    assert result.columns["b"].missing_percent == "33.3"


def test_missing_and_unique_counts():
    data = [{"x": 1}, {"x": None}, {"x": ""}, {"x": 1}]
    col = analyze(data).columns["x"]
    assert col.missing_count == 2
    assert col.missing_percent == "50.0"
    assert col.unique_count == 1
    assert analyze([{"y": 1}, {"y": 2}]).columns["y"].missing_percent == "0.0"


def test_stats_only_for_numeric_and_top_values_only_for_categorical():
    colors = ["red", "blue", "red", "red", "blue", "red"]
    data = [{"n": i, "color": c, "name": f"user{i}"} for i, c in enumerate(colors)]
    result = analyze(data)

    assert result.columns["n"].type == ColumnType.NUMERIC
    assert result.columns["n"].stats is not None
    assert result.columns["n"].top_values is None

    color = result.columns["color"]
    assert color.type == ColumnType.CATEGORICAL
    assert color.stats is None
    assert [(v.value, v.count) for v in color.top_values] == [("red", 4), ("blue", 2)]

    assert result.columns["name"].type == ColumnType.TEXT
    assert result.columns["name"].top_values is None
    assert result.categorical_columns == ["color"]


def test_date_columns_and_quality_reports():
    data = [
        {"when": "2024-01-01", "v": float("inf"), "k": "a"},
        {"when": "2024-01-02", "v": 1, "k": "a"},
        {"when": "2024-01-03", "v": 2, "k": "b"},
    ]
    result = analyze(data)
    assert result.date_columns == ["when"]
    assert result.has_infinite_values is True
    assert result.infinite_value_stats["v"].percentage == "33.3"
    assert result.duplicate_stats["k"].duplicate_count == 1


def test_analysis_does_not_mutate_input():
    data = [{"a": 1, "b": None}, {"a": float("inf"), "b": "x"}]
    snapshot = [dict(r) for r in data]
    analyze(data)
    assert data == snapshot


def test_preview_from_frame():
    df = pd.DataFrame({"a": [1, 2, 3], "b": [0.5, None, 1.5], "c": ["x", "y", "z"]})
    data = frame_to_dataset(df)
    assert data[1]["b"] is None

    preview = build_preview(data, n=2)
    assert preview["rows"] == 3
    assert preview["cols"] == 3
    assert preview["columns"] == ["a", "b", "c"]
    assert len(preview["data"]) == 2
    assert preview["data"][1] == {"a": 2, "b": None, "c": "y"}
    assert type(preview["data"][0]["a"]) is int
    assert preview["dtypes"]["a"] == "int64"
    assert preview["dtypes"]["c"] in ("object", "str")


def test_int_beyond_float_range_does_not_crash():
    result = analyze([{"v": 10**400}, {"v": 1}, {"v": 10**400}])
    assert result.columns["v"].type == ColumnType.TEXT
    assert result.columns["v"].stats is None
    assert result.columns["v"].unique_count == 2
    assert result.duplicate_stats["v"].duplicate_count == 1
