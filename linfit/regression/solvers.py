"""
Solver dispatch for regression.

This module provides the fit() function (public API) and backend selection.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Literal
import warnings

from linfit.core.exceptions import DimensionError, InsufficientDataError
from linfit.regression.backends.cpu import CPUQRBackend
from linfit.regression.crosses import FeatureCross
from linfit.regression.design import RegressionDesign, cache_crosses
from linfit.regression.observations import (
    MIN_TRAINING_OBSERVATIONS,
    Observation,
    ObservationStore,
)
from linfit.regression.solution import LinearSolution


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_qr']


def fit(
    observations: ObservationStore | Iterable[Any],
    *,
    crosses: Sequence[FeatureCross] = (),
    tol: float | None = None,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit a linear model by ordinary least squares.

    Solves min_c ||y - Xc||^2 where each row of X is
    [1, variables..., cross outputs...] for one observation.

    Steps, all on the caller's Observation objects:
        1. cache cross outputs on observations that lack them
        2. build the design matrix
        3. QR solve
        4. write predicted and residual back onto every observation

    Args:
        observations: An ObservationStore, or any iterable of Observation
            instances / (observed, variables) pairs
        crosses: Feature crosses, applied in this order
        tol: Absolute pivot tolerance for the singularity check
        backend: Computational backend ('auto', 'cpu', 'cpu_qr')

    Returns:
        LinearSolution with coefficients, statistics and predict()

    Raises:
        InsufficientDataError: Fewer than 3 observations
        UnderdeterminedError: Fewer observations than coefficients
        SingularMatrixError: Rank-deficient design matrix
        DimensionError: Inconsistent variable counts or out-of-range cross index

    Example:
        >>> from linfit.regression import fit, observations_from_table
        >>> data = observations_from_table(rows, observed_index=0)
        >>> solution = fit(data)
        >>> solution.coefficients
    """
    return _fit(observations, crosses=crosses, tol=tol, backend=backend, stacklevel=3)


def _fit(
    observations: ObservationStore | Iterable[Any],
    *,
    crosses: Sequence[FeatureCross],
    tol: float | None,
    backend: BackendChoice,
    stacklevel: int,
) -> LinearSolution:
    """
    Shared body of fit() and Regression.fit().

    Backend warnings are re-issued here with `stacklevel` chosen by the
    public entry point, so they point at the caller's code.
    """
    if not isinstance(observations, ObservationStore):
        observations = ObservationStore(observations)

    if not observations.is_fit_eligible:
        raise InsufficientDataError(
            f"Not enough data points: {len(observations)} observations, "
            f"need at least {MIN_TRAINING_OBSERVATIONS}",
            n_observations=len(observations),
            min_required=MIN_TRAINING_OBSERVATIONS,
        )

    crosses = tuple(crosses)

    # === Construct Design ===
    cache_crosses(observations, crosses)
    design = RegressionDesign.from_observations(observations)
    expected = sum(c.arity for c in crosses)
    if design.n_crosses != expected:
        raise DimensionError(
            f"Design has {design.n_crosses} cross columns, "
            f"registered crosses produce {expected}"
        )

    # === Solve ===
    backend_impl = _get_backend(backend, tol)
    result = backend_impl.solve(design)

    # === Wrap and Record ===
    solution = LinearSolution(_result=result, _design=design, _crosses=crosses)
    _record_predictions(observations, solution)
    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=stacklevel)
    return solution


def _record_predictions(
    observations: Sequence[Observation],
    solution: LinearSolution,
) -> None:
    """Store each observation's prediction and residual on the observation."""
    for obs, predicted in zip(observations, solution.fitted_values):
        obs.predicted = float(predicted)
        obs.residual = obs.predicted - obs.observed


def _get_backend(choice: BackendChoice, tol: float | None) -> CPUQRBackend:
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend(tol=tol)

    raise ValueError(f"Unknown backend: {choice!r}")
