# backend/app/core/errors.py
"""
Typed failures raised by the profiling / preprocessing engine.

Routers translate these into HTTP status codes; the engine itself never
catches them.
"""


class EmptyDatasetError(ValueError):
    """Raised when a dataset with zero rows is passed to analysis."""

    def __init__(self, message: str = "Dataset contains no rows to analyze."):
        super().__init__(message)


class InvalidOptionError(ValueError):
    """Raised for an unrecognized operator method string."""

    def __init__(self, option: str, value: str, allowed):
        self.option = option
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Invalid {option} '{value}'. Expected one of: {', '.join(self.allowed)}"
        )


class ZeroVarianceWarning(UserWarning):
    """A statistic or transform was skipped because a column has no spread."""
