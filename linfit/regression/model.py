"""
Stateful regression model.

Regression accumulates observations and feature crosses, fits on demand
and serves predictions from the most recent successful fit:

    >>> model = Regression()
    >>> model.train(Observation.of(6, [2]), Observation.of(20, [4]), ...)
    >>> model.add_cross(pow_cross(0, 2))
    >>> model.fit()
    >>> model.predict([6])
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from linfit.core.exceptions import NotFittedError
from linfit.regression.crosses import FeatureCross
from linfit.regression.observations import ObservationStore
from linfit.regression.solution import LinearSolution
from linfit.regression.solvers import _fit


class Regression:
    """
    Incrementally trained least-squares model.

    Nothing is refit automatically: train() and add_cross() only change
    the inputs, and fit() re-solves from scratch. A failed fit raises and
    keeps the previous solution. Not thread-safe; callers sharing an
    instance must serialise train/fit/predict themselves.

    Args:
        tol: Absolute pivot tolerance passed to every fit
    """

    def __init__(self, *, tol: float | None = None):
        self._store = ObservationStore()
        self._crosses: list[FeatureCross] = []
        self._solution: LinearSolution | None = None
        self._tol = tol
        self._stale = False

    # === Inputs ===

    def train(self, *observations: Any) -> None:
        """
        Append Observation instances or (observed, variables) pairs.

        All records are validated first; if any is rejected nothing is stored.
        """
        self._store.append(*observations)
        if observations and self._solution is not None:
            self._stale = True

    def add_cross(self, *crosses: FeatureCross) -> None:
        """
        Register feature crosses, applied after those already registered.

        Cached cross values on stored observations are discarded, since
        they were computed for the previous cross list.
        """
        if not crosses:
            return
        self._crosses.extend(crosses)
        self._store.clear_crosses()
        if self._solution is not None:
            self._stale = True

    @property
    def observations(self) -> ObservationStore:
        return self._store

    @property
    def crosses(self) -> tuple[FeatureCross, ...]:
        return tuple(self._crosses)

    # === Fitting ===

    def fit(self) -> LinearSolution:
        """
        Solve for coefficients on all stored observations.

        Raises:
            InsufficientDataError: Fewer than 3 observations trained
            UnderdeterminedError: Fewer observations than coefficients
            SingularMatrixError: Rank-deficient design matrix
        """
        solution = _fit(
            self._store, crosses=self._crosses, tol=self._tol, backend='auto', stacklevel=3,
        )
        self._solution = solution
        self._stale = False
        return solution

    @property
    def solution(self) -> LinearSolution | None:
        return self._solution

    @property
    def ready(self) -> bool:
        """True once a fit has succeeded."""
        return self._solution is not None

    @property
    def is_stale(self) -> bool:
        """True if inputs changed since the last successful fit."""
        return self._stale

    # === Predictions and accessors ===

    def predict(self, variables: ArrayLike) -> float:
        """
        Predict the observed value for a raw variable vector.

        Raises:
            NotFittedError: No successful fit yet
            DimensionError: Wrong number of variables
        """
        if self._solution is None:
            raise NotFittedError("Regression has not been fit yet; call fit() first")
        return self._solution.predict(variables)

    def coeff(self, i: int) -> float:
        """Coefficient i (0 is the bias); 0.0 when unfit or out of range."""
        if self._solution is None:
            return 0.0
        return self._solution.coeff(i)

    def coefficients(self) -> NDArray[np.floating[Any]]:
        """All coefficients, bias first; empty when unfit."""
        if self._solution is None:
            return np.empty(0, dtype=np.float64)
        return self._solution.coefficients.copy()

    @property
    def r_squared(self) -> float:
        return self._solution.r_squared if self._solution is not None else float('nan')

    @property
    def variance_observed(self) -> float:
        return self._solution.variance_observed if self._solution is not None else float('nan')

    @property
    def variance_predicted(self) -> float:
        return self._solution.variance_predicted if self._solution is not None else float('nan')

    def __repr__(self) -> str:
        state = 'fit' if self._solution is not None else 'unfit'
        return (
            f"Regression(n={len(self._store)}, crosses={len(self._crosses)}, "
            f"state={state})"
        )
