"""
CPU backend for least-squares regression.

Factorizes the design matrix with Householder QR (LAPACK via SciPy) and
solves R c = Q'y by back substitution. QR is used instead of the normal
equations (X'X)^-1 X'y because it does not square the condition number
of X, which matters once columns are widely scaled (raw populations next
to percentages) or nearly collinear (x and x^2).
"""

from typing import Any

import numpy as np

from linfit.core.result import Result
from linfit.core.compute.timing import Timer
from linfit.core.compute.linalg.qr import qr_cpu, back_substitute
from linfit.regression.design import RegressionDesign
from linfit.regression.solution import LinearParams, evaluate_linear


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Implements the Backend protocol for RegressionDesign -> LinearParams.

    Args:
        tol: Absolute pivot tolerance for back substitution. None uses
             max(n, p) * eps * max|diag(R)|.
    """

    def __init__(self, tol: float | None = None):
        self._tol = tol

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. Compute QR decomposition: X = QR
            2. Solve R c = Q'y from the last coefficient to the first
            3. Predict every observation, then residuals and variances

        Raises:
            SingularMatrixError: If X is rank-deficient
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        X = design.X
        y = design.y
        n = design.n

        # === QR Decomposition and Solve ===
        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X, tol=self._tol)
            Qty = qr_result.Q.T @ y

        with timer.section('back_substitution'):
            coefficients = back_substitute(qr_result.R, Qty, tol=qr_result.tol)
        coefficients.setflags(write=False)

        # === Predictions and Residuals ===
        with timer.section('predictions'):
            fitted_values = np.array(
                [evaluate_linear(coefficients, X[i, 1:]) for i in range(n)],
                dtype=np.float64,
            )
            residuals = fitted_values - y

        # === Summary Statistics ===
        with timer.section('statistics'):
            variance_observed = float(np.mean((y - np.mean(y)) ** 2))
            variance_predicted = float(np.mean((fitted_values - np.mean(fitted_values)) ** 2))
            if np.all(y == y[0]):
                variance_observed = 0.0
                r_squared = float('nan')
                message = (
                    "R-squared is undefined: all observed values are identical "
                    "(observed variance is 0); r_squared is NaN"
                )
                warnings_list.append(message)
            else:
                r_squared = variance_predicted / variance_observed
            rss = float(residuals @ residuals)
            tss = variance_observed * n

        timer.stop()

        fitted_values.setflags(write=False)
        residuals.setflags(write=False)

        params = LinearParams(
            coefficients=coefficients,
            fitted_values=fitted_values,
            residuals=residuals,
            variance_observed=variance_observed,
            variance_predicted=variance_predicted,
            r_squared=r_squared,
            rss=rss,
            tss=tss,
            rank=qr_result.rank,
            df_residual=n - qr_result.rank,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'tol': qr_result.tol,
            'n_variables': design.n_variables,
            'n_crosses': design.n_crosses,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
