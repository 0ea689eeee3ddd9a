"""
Core infrastructure for linfit.

Shared abstractions used by the regression engine.

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy and ErrorKind tags
    validation: Input validators
    datasource: Table splitting (observed column vs variables)
    compute: Timing, tolerances, linear algebra kernels
"""

from linfit.core.protocols import Backend
from linfit.core.result import Result
from linfit.core.datasource import DataSource
from linfit.core.exceptions import (
    ErrorKind,
    LinfitError,
    ValidationError,
    DimensionError,
    InsufficientDataError,
    UnderdeterminedError,
    NumericalError,
    SingularMatrixError,
    NotFittedError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Data
    "DataSource",
    # Exceptions
    "ErrorKind",
    "LinfitError",
    "ValidationError",
    "DimensionError",
    "InsufficientDataError",
    "UnderdeterminedError",
    "NumericalError",
    "SingularMatrixError",
    "NotFittedError",
]
