"""
Regression solution types.

Contains the parameter payload computed by backends and the user-facing
solution wrapper, which is also the prediction service.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from linfit.core.exceptions import DimensionError
from linfit.core.result import Result
from linfit.core.validation import check_array, check_1d
from linfit.regression.crosses import FeatureCross, apply_crosses

if TYPE_CHECKING:
    from linfit.regression.design import RegressionDesign


def evaluate_linear(
    coefficients: NDArray[np.floating[Any]],
    features: NDArray[np.floating[Any]],
) -> float:
    """
    bias + sum_j coefficients[j + 1] * features[j].

    Accumulates term by term in a fixed order, so the fitting path and the
    prediction path give bit-identical values for identical features.
    Terms beyond the fitted coefficient count contribute 0.
    """
    total = float(coefficients[0])
    n_terms = coefficients.shape[0]
    for j, value in enumerate(features):
        if j + 1 >= n_terms:
            break
        total += float(coefficients[j + 1]) * float(value)
    return total


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for a least-squares fit.

    This is the immutable data computed by backends. Residuals follow
    the predicted - observed convention.
    """
    coefficients: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    variance_observed: float
    variance_predicted: float
    r_squared: float
    rss: float
    tss: float
    rank: int
    df_residual: int


@dataclass
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result together with the design it was solved on
    and the crosses that produced the design's cross columns. Predictions
    always re-apply exactly those crosses.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'
    _crosses: tuple[FeatureCross, ...] = ()

    # === Coefficients ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        """Coefficients in design column order; index 0 is the bias."""
        return self._result.params.coefficients

    @property
    def n_terms(self) -> int:
        """Number of fitted coefficients (1 + variables + cross outputs)."""
        return self.coefficients.shape[0]

    @property
    def bias(self) -> float:
        return float(self.coefficients[0])

    def coeff(self, i: int) -> float:
        """Coefficient i, or 0.0 for any index outside [0, n_terms)."""
        if not 0 <= i < self.n_terms:
            return 0.0
        return float(self.coefficients[i])

    @property
    def term_names(self) -> tuple[str, ...]:
        names = ['(bias)']
        names.extend(f"x{i}" for i in range(self._design.n_variables))
        for cross in self._crosses:
            if cross.arity == 1:
                names.append(cross.name)
            else:
                names.extend(f"{cross.name}[{j}]" for j in range(cross.arity))
        return tuple(names)

    # === Fit statistics ===

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def variance_observed(self) -> float:
        return self._result.params.variance_observed

    @property
    def variance_predicted(self) -> float:
        return self._result.params.variance_predicted

    @property
    def r_squared(self) -> float:
        """variance_predicted / variance_observed; NaN for a constant target."""
        return self._result.params.r_squared

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def residual_std_error(self) -> float:
        df = self._result.params.df_residual
        if df <= 0:
            return 0.0
        return float(np.sqrt(self.rss / df))

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def n_variables(self) -> int:
        return self._design.n_variables

    @property
    def crosses(self) -> tuple[FeatureCross, ...]:
        return self._crosses

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # === Prediction ===

    def extend(self, variables: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Raw variables followed by every cross output, in registration order.

        Raises:
            DimensionError: Wrong number of variables for this fit
        """
        values = check_array(variables, 'variables')
        check_1d(values, 'variables')
        if values.shape[0] != self.n_variables:
            raise DimensionError(
                f"variables: expected {self.n_variables} values, got {values.shape[0]}"
            )
        return np.concatenate([values, apply_crosses(values, self._crosses)])

    def predict(self, variables: ArrayLike) -> float:
        """Predicted value for one raw variable vector."""
        return evaluate_linear(self.coefficients, self.extend(variables))

    # === Reporting ===

    def summary(self) -> str:
        """Text report of the fit."""
        lines = [
            "Linear Regression Results",
            "=" * 60,
            f"Observations: {self.n_observations}",
            f"Variables: {self.n_variables}",
            f"Crosses: {', '.join(c.name for c in self._crosses) or '-'}",
            f"Rank: {self.rank}",
            f"R-squared: {self.r_squared:.6f}",
            f"Variance (observed): {self.variance_observed:.6f}",
            f"Variance (predicted): {self.variance_predicted:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            "",
            "Coefficients:",
            "-" * 60,
        ]

        for i, (name, coef) in enumerate(zip(self.term_names, self.coefficients)):
            lines.append(f"  c[{i}] {name:<16} {coef:16.6f}")

        lines.append("-" * 60)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for warning in self.warnings:
            lines.append(f"Warning: {warning}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n_observations}, p={self.n_terms}, "
            f"r_squared={self.r_squared:.4f})"
        )
