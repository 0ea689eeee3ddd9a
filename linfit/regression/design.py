"""
Regression Design.

Design turns stored observations into the (X, y) pair a least-squares
backend consumes. Column layout of X:

    [ 1 | raw variables (v) | cross outputs (k) ]

so coefficient 0 is the bias, 1..v the variable terms and v+1..v+k the
cross terms, in registration order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from linfit.core.exceptions import DimensionError, UnderdeterminedError
from linfit.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
)
from linfit.regression.crosses import FeatureCross, apply_crosses
from linfit.regression.observations import Observation


def cache_crosses(
    observations: Sequence[Observation],
    crosses: Sequence[FeatureCross],
) -> int:
    """
    Compute and store cross outputs on every observation lacking them.

    Writes onto the stored Observation objects, not copies, so the values
    used to build X are the ones kept for later fits. An observation whose
    cache was computed under this same cross tuple is left untouched; one
    cached under any other cross list is recomputed (or cleared, when
    `crosses` is empty).

    Returns:
        Number of observations that were filled in or cleared
    """
    crosses = tuple(crosses)

    updated = 0
    for obs in observations:
        if obs.cross_layout == crosses and bool(obs.crosses) == bool(crosses):
            continue
        if crosses:
            obs.crosses = tuple(apply_crosses(obs.variables, crosses).tolist())
        else:
            obs.crosses = ()
        obs.cross_layout = crosses
        updated += 1
    return updated


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design matrix specification.

    Immutable after construction.

    Construction:
        RegressionDesign.from_observations(store)   # after cache_crosses()
        RegressionDesign.from_arrays(X, y)           # X already has bias column
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _n_variables: int
    _n_crosses: int

    @classmethod
    def from_observations(cls, observations: Sequence[Observation]) -> RegressionDesign:
        """
        Build the design from observations with cached crosses.

        Raises:
            DimensionError: Observations disagree on variable or cross count
            UnderdeterminedError: Fewer observations than model terms
            ValidationError: Non-finite values in X or y
        """
        if len(observations) == 0:
            raise UnderdeterminedError(
                "No observations to build a design from",
                n_observations=0,
                n_terms=1,
            )

        first = observations[0]
        v, k = len(first.variables), len(first.crosses)
        for i, obs in enumerate(observations):
            if len(obs.variables) != v:
                raise DimensionError(
                    f"Observation {i} has {len(obs.variables)} variables, "
                    f"expected {v} (from observation 0)"
                )
            if len(obs.crosses) != k:
                raise DimensionError(
                    f"Observation {i} has {len(obs.crosses)} cross values, "
                    f"expected {k} (from observation 0)"
                )

        n = len(observations)
        X = np.empty((n, 1 + v + k), dtype=np.float64)
        y = np.empty(n, dtype=np.float64)
        X[:, 0] = 1.0
        for i, obs in enumerate(observations):
            y[i] = obs.observed
            X[i, 1:] = obs.variables + obs.crosses

        return cls.from_arrays(X, y, n_crosses=k)

    @classmethod
    def from_arrays(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        n_crosses: int = 0,
    ) -> RegressionDesign:
        """
        Build directly from arrays. X must already contain the bias column.
        """
        X = check_array(X, 'X')
        y = check_array(y, 'y')
        check_2d(X, 'X')
        check_1d(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))
        return cls._build(X, y, n_variables=X.shape[1] - 1 - n_crosses, n_crosses=n_crosses)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        n_variables: int,
        n_crosses: int,
    ) -> RegressionDesign:
        """Internal builder with validation."""
        check_finite(X, 'X')
        check_finite(y, 'y')

        n, p = X.shape
        if n < p:
            raise UnderdeterminedError(
                f"Not enough observations to support this many terms: "
                f"{n} observations for {p} coefficients "
                f"(1 bias + {n_variables} variables + {n_crosses} crosses)",
                n_observations=n,
                n_terms=p,
            )

        return cls(_X=X, _y=y, _n=n, _n_variables=n_variables, _n_crosses=n_crosses)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p), bias column first."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Observed values (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of coefficients (1 + v + k)."""
        return self._X.shape[1]

    @property
    def n_variables(self) -> int:
        return self._n_variables

    @property
    def n_crosses(self) -> int:
        return self._n_crosses
