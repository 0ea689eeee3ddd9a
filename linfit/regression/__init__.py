"""
Ordinary least-squares regression with feature crosses.

Public API:
    Regression                   - stateful train / add_cross / fit / predict
    fit(observations, ...)       -> LinearSolution
    Observation, ObservationStore
    PowerCross, ProductCross     - built-in feature crosses

Example:
    >>> from linfit.regression import Regression, observations_from_table
    >>> model = Regression()
    >>> model.train(*observations_from_table(rows, observed_index=0))
    >>> solution = model.fit()
    >>> print(solution.summary())
"""

from linfit.regression.crosses import (
    FeatureCross,
    PowerCross,
    ProductCross,
    pow_cross,
    product_cross,
)
from linfit.regression.observations import (
    Observation,
    ObservationStore,
    observations_from_table,
)
from linfit.regression.design import RegressionDesign
from linfit.regression.solution import LinearSolution, LinearParams
from linfit.regression.solvers import fit
from linfit.regression.model import Regression

__all__ = [
    "fit",
    "Regression",
    "FeatureCross",
    "PowerCross",
    "ProductCross",
    "pow_cross",
    "product_cross",
    "Observation",
    "ObservationStore",
    "observations_from_table",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
]
