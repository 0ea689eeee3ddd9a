"""
linfit: multivariable least-squares regression with feature crosses.

Fits y = c0 + sum c_j x_j (+ cross terms) by QR decomposition, with
incremental training, derived power/product features and fit statistics.

Submodules:
    regression: Regression model, feature crosses, fit()
    core: Exceptions, validation, DataSource, linear algebra kernels
"""

__version__ = "0.1.0"

from linfit import regression
from linfit.core.datasource import DataSource
from linfit.core.exceptions import (
    ErrorKind,
    LinfitError,
    ValidationError,
    DimensionError,
    InsufficientDataError,
    UnderdeterminedError,
    SingularMatrixError,
    NotFittedError,
)
from linfit.regression import (
    Regression,
    Observation,
    PowerCross,
    ProductCross,
    pow_cross,
    product_cross,
    observations_from_table,
    fit,
)

__all__ = [
    "__version__",
    "regression",
    "DataSource",
    "Regression",
    "Observation",
    "PowerCross",
    "ProductCross",
    "pow_cross",
    "product_cross",
    "observations_from_table",
    "fit",
    "ErrorKind",
    "LinfitError",
    "ValidationError",
    "DimensionError",
    "InsufficientDataError",
    "UnderdeterminedError",
    "SingularMatrixError",
    "NotFittedError",
]
