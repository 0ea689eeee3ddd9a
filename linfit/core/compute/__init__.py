"""
Shared numeric infrastructure for linfit.

This module provides timing utilities, tolerances and linear algebra
kernels. Regression-specific backends live in regression/backends/.

Submodules:
    timing: Execution timing utilities
    tolerances: Pivot tolerance and comparison tiers
    linalg: Linear algebra kernels (QR, back substitution)
"""

from linfit.core.compute.timing import Timer

__all__ = [
    "Timer",
]
