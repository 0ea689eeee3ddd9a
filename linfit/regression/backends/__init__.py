"""
Regression backends.

Available backends:
    CPUQRBackend: QR decomposition with explicit back substitution
"""

from linfit.regression.backends.cpu import CPUQRBackend

__all__ = [
    "CPUQRBackend",
]
