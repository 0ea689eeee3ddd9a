"""
Wall-clock timing for fits.

A Timer measures one computation end to end and, inside it, any number of
named stages. Stage times accumulate across repeated entries.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Stage timer for a single fit.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X)
        with timer.section('back_substitution'):
            coefficients = back_substitute(qr_result.R, Qty)
        timer.stop()

        timer.result()
        # {'total_seconds': 4e-4, 'qr_decomposition': 3e-4, 'back_substitution': 1e-4}
    """

    def __init__(self) -> None:
        self._stages: dict[str, float] = {}
        self._began: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        """Begin (or restart) the overall measurement."""
        self._began = time.perf_counter()
        self._total = None

    def stop(self) -> None:
        if self._began is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._began

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named stage.

        The stage is recorded even when its body raises.
        """
        began = time.perf_counter()
        try:
            yield
        finally:
            self._stages[name] = self._stages.get(name, 0.0) + (time.perf_counter() - began)

    def result(self) -> dict[str, float]:
        """
        Total and per-stage seconds, total first.

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._stages}
