"""
Linear algebra kernels for linfit.

All functions follow these conventions:
    - Factorizations use SciPy (LAPACK under the hood)
    - Each decomposition returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    qr: QR decomposition and back substitution
"""

from linfit.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    back_substitute,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "back_substitute",
]
