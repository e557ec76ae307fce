# backend/tests/test_api.py
from fastapi.testclient import TestClient

from backend.app.main import app

client = TestClient(app)


def _colors():
    colors = ["red", "blue", "red", "red", "blue", "red"]
    return [{"n": i, "color": c} for i, c in enumerate(colors)]


# -----------------------------------------------------------
# HEALTH
# -----------------------------------------------------------
def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


# -----------------------------------------------------------
# ANALYZE
# -----------------------------------------------------------
def test_analyze_happy_path(linear_dataset):
    payload = {"data": linear_dataset}
    r = client.post("/analysis/analyze", json=payload)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["ok"] is True
    analysis = body["analysis"]
    assert analysis["row_count"] == 3
    assert analysis["column_count"] == 2
    assert analysis["numeric_columns"] == ["a", "b"]
    assert analysis["correlations"][0]["coefficient"] == 1.0
    assert analysis["columns"]["a"]["stats"]["mean"] == 2.0


def test_analyze_infinity_in_body():
    body = '{"data": [{"v": Infinity}, {"v": 1}, {"v": 2}]}'
    r = client.post("/analysis/analyze", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 200, r.text
    analysis = r.json()["analysis"]
    assert analysis["has_infinite_values"] is True
    assert analysis["infinite_value_stats"]["v"] == {"count": 1, "percentage": "33.3"}


def test_analyze_huge_integer_in_body():
    body = '{"data": [{"v": 1' + "0" * 400 + '}, {"v": 1}]}'
    r = client.post("/analysis/analyze", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 200, r.text
    assert r.json()["analysis"]["numeric_columns"] == []


def test_analyze_empty_dataset():
    r = client.post("/analysis/analyze", json={"data": []})
    assert r.status_code == 422


# -----------------------------------------------------------
# PREVIEW
# -----------------------------------------------------------
def test_preview():
    r = client.post("/analysis/preview", json={"data": _colors(), "n": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["rows"] == 6
    assert body["cols"] == 2
    assert len(body["data"]) == 2
    assert "n" in body["dtypes"]


# -----------------------------------------------------------
# PREPROCESS
# -----------------------------------------------------------
def test_preprocess_onehot_and_minmax():
    payload = {
        "data": _colors(),
        "options": {"encoding_method": "onehot", "normalization_method": "minmax"},
    }
    r = client.post("/analysis/preprocess", json=payload)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["steps"] == ["Applied One-Hot Encoding", "Applied Min-Max Normalization"]
    first = body["data"][0]
    assert first == {"n": 0.0, "color_red": 1, "color_blue": 0}
    assert body["data"][-1]["n"] == 1.0
    assert body["analysis"]["column_count"] == 3


def test_preprocess_with_prior_analysis():
    data = _colors()
    analysis = client.post("/analysis/analyze", json={"data": data}).json()["analysis"]
    payload = {"data": data, "analysis": analysis, "options": {"encoding_method": "label"}}
    r = client.post("/analysis/preprocess", json=payload)
    assert r.status_code == 200, r.text
    assert [row["color"] for row in r.json()["data"]] == [0, 1, 0, 0, 1, 0]


def test_preprocess_invalid_option():
    payload = {"data": _colors(), "options": {"missing_value_method": "interpolate"}}
    r = client.post("/analysis/preprocess", json=payload)
    assert r.status_code == 400
    assert "interpolate" in r.json()["detail"]


def test_preprocess_empty_dataset():
    r = client.post("/analysis/preprocess", json={"data": []})
    assert r.status_code == 422


# -----------------------------------------------------------
# AUTOMATE
# -----------------------------------------------------------
def test_automate():
    data = _colors()
    data[1]["n"] = None
    r = client.post("/analysis/automate", json={"data": data})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["ok"] is True
    assert body["metrics"]["missing_values_filled"] == 1
    assert body["metrics"]["columns_encoded"] == 1
    assert body["analysis"]["row_count"] == 6
