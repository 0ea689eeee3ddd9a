"""
QR decomposition and back substitution.

The factorization itself is LAPACK's Householder QR (via SciPy). The
triangular solve is done here by explicit back substitution so that a
vanishing pivot is reported as a SingularMatrixError instead of leaking
Inf/NaN into the coefficients.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr

from linfit.core.exceptions import SingularMatrixError
from linfit.core.compute.tolerances import singular_pivot_tolerance


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthonormal columns (n x p, economy form)
        R: Upper triangular matrix (p x p)
        rank: Numerical rank determined from R diagonal
        tol: Absolute pivot tolerance used for the rank
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    tol: float


def qr_cpu(
    X: NDArray[np.floating[Any]],
    tol: float | None = None,
) -> QRResult:
    """
    Economy QR decomposition using LAPACK (via SciPy).

    Computes X = QR where Q has orthonormal columns and R is upper
    triangular. No column pivoting: column j of R belongs to column j
    of X, so coefficients come out in design-matrix order.

    Args:
        X: Matrix to decompose (n x p), n >= p
        tol: Absolute pivot tolerance. Defaults to
             singular_pivot_tolerance(R, X.shape).

    Returns:
        QRResult with Q, R, numerical rank and the tolerance used
    """
    Q, R = qr(X, mode='economic')

    if tol is None:
        tol = singular_pivot_tolerance(R, X.shape)

    diag_R = np.abs(np.diag(R))
    rank = int(np.sum(diag_R > tol))

    return QRResult(Q=Q, R=R, rank=rank, tol=tol)


def back_substitute(
    R: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    tol: float = 0.0,
) -> NDArray[np.floating[Any]]:
    """
    Solve R c = b for upper triangular R, last coefficient first.

        c[p-1] = b[p-1] / R[p-1, p-1]
        c[i]   = (b[i] - sum_{j>i} c[j] R[i, j]) / R[i, i]

    Args:
        R: Upper triangular matrix (p x p)
        b: Right-hand side (p,)
        tol: Pivots with |R[i, i]| <= tol are treated as zero

    Returns:
        Solution vector c (p,)

    Raises:
        SingularMatrixError: On a zero pivot or a non-finite solution
    """
    p = R.shape[0]
    c = np.zeros(p, dtype=np.float64)

    for i in range(p - 1, -1, -1):
        pivot = R[i, i]
        if not np.isfinite(pivot) or abs(pivot) <= tol:
            rank = int(np.sum(np.abs(np.diag(R)) > tol))
            raise SingularMatrixError(
                f"Design matrix is rank-deficient: pivot R[{i}, {i}] = {pivot:.3g} "
                f"is below tolerance {tol:.3g} (rank={rank}, expected={p}). "
                f"This indicates collinear columns.",
                matrix_name='X',
                rank=rank,
                expected_rank=p,
                pivot_index=i,
            )
        c[i] = (b[i] - R[i, i + 1:] @ c[i + 1:]) / pivot

    if not np.all(np.isfinite(c)):
        raise SingularMatrixError(
            "Back substitution produced non-finite coefficients; "
            "the design matrix is ill-conditioned.",
            matrix_name='X',
            expected_rank=p,
        )

    return c
