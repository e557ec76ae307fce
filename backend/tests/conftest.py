# backend/tests/conftest.py
import os
import sys

import pytest

# project root holds the `backend` package
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from backend.app.core.logging_config import setup_logging  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def _quiet_logs():
    setup_logging("WARNING")


@pytest.fixture
def linear_dataset():
    """Two perfectly correlated numeric columns."""
    return [{"a": 1, "b": 2}, {"a": 2, "b": 4}, {"a": 3, "b": 6}]
