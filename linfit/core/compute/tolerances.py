"""
Numerical tolerances.

Two concerns live here:
- the pivot tolerance that decides when back substitution must give up
  on a rank-deficient design matrix;
- tolerance tiers describing how closely results are expected to match
  a reference, used by the test suite when comparing coefficients.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Well-conditioned problems solved in double precision
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, well-conditioned design',
)

# Widely scaled or nearly collinear columns (cond > 1e4)
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)

# Multiplier on machine epsilon for the relative pivot threshold.
SINGULAR_PIVOT_SCALE = 1.0


def singular_pivot_tolerance(
    R: NDArray[np.floating[Any]],
    shape: tuple[int, int],
    scale: float = SINGULAR_PIVOT_SCALE,
) -> float:
    """
    Absolute threshold below which a diagonal entry of R counts as zero.

    Uses max(n, p) * eps * max|diag(R)|, the usual LAPACK-style rank
    cutoff. An all-zero diagonal yields 0.0, so every pivot fails.

    Args:
        R: Upper triangular factor (p x p)
        shape: Shape (n, p) of the factorized matrix
        scale: Multiplier on the default threshold

    Returns:
        Non-negative tolerance
    """
    diag_R = np.abs(np.diag(R))
    if diag_R.size == 0:
        return 0.0
    eps = np.finfo(np.float64).eps
    return float(scale * max(shape) * eps * diag_R.max())


def select_tolerance(is_ill_conditioned: bool = False) -> ToleranceTier:
    """Select the comparison tier for a problem's conditioning."""
    if is_ill_conditioned:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
