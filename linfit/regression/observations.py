"""
Training observations and the append-only store that owns them.

An Observation is one training example: an observed target value and its
raw variable vector. A fit fills in the derived fields (cached cross
outputs, predicted value, residual) on the stored object itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, overload
import numpy as np
from numpy.typing import ArrayLike, NDArray

from linfit.core.datasource import DataSource
from linfit.core.exceptions import ValidationError
from linfit.core.validation import check_array, check_1d

MIN_TRAINING_OBSERVATIONS = 3


@dataclass(eq=False)
class Observation:
    """
    One training record.

    `observed` and `variables` are fixed at construction. `crosses`,
    `predicted` and `residual` are written by a fit; `predicted` and
    `residual` are NaN until then, `crosses` is empty.

    `cross_layout` is the cross tuple `crosses` was computed under; a fit
    with a different cross list recomputes them.
    """
    observed: float
    variables: tuple[float, ...]
    crosses: tuple[float, ...] = field(default=())
    predicted: float = float('nan')
    residual: float = float('nan')
    cross_layout: tuple[Any, ...] = field(default=(), repr=False)

    def __post_init__(self):
        self.observed = float(self.observed)
        values = check_array(self.variables, 'variables')
        check_1d(values, 'variables')
        self.variables = tuple(float(v) for v in values)
        self.crosses = tuple(float(v) for v in self.crosses)
        self.cross_layout = tuple(self.cross_layout)

    @classmethod
    def of(cls, observed: float, variables: ArrayLike) -> Observation:
        """Convenience constructor: Observation.of(11.2, [587000, 16.5, 6.2])."""
        return cls(observed=observed, variables=tuple(np.ravel(variables)))

    @property
    def n_variables(self) -> int:
        return len(self.variables)

    @property
    def features(self) -> NDArray[np.floating[Any]]:
        """Raw variables followed by cached cross outputs."""
        return np.array(self.variables + self.crosses, dtype=np.float64)


def _coerce(record: Any) -> Observation:
    """Accept an Observation or an (observed, variables) pair."""
    if isinstance(record, Observation):
        return record
    try:
        observed, variables = record
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Expected Observation or (observed, variables) pair, got {record!r}"
        ) from e
    return Observation.of(observed, variables)


class ObservationStore(Sequence[Observation]):
    """
    Ordered, append-only collection of observations.

    Entries are never removed or replaced; fits mutate the derived fields
    of the stored objects in place.
    """

    def __init__(self, observations: Iterable[Any] = ()):
        self._observations: list[Observation] = []
        self.append(*observations)

    # === Construction ===

    @classmethod
    def from_datasource(cls, source: DataSource) -> ObservationStore:
        """Build a store from a DataSource's 'y' and 'X' arrays, row by row."""
        X, y = source['X'], source['y']
        return cls(Observation.of(obs, row) for obs, row in zip(y, X))

    # === Mutation ===

    def append(self, *observations: Any) -> None:
        """Append records in order. Accepts Observation or (observed, variables)."""
        # Coerce everything before storing anything
        coerced = [_coerce(r) for r in observations]
        self._observations.extend(coerced)

    def clear_crosses(self) -> None:
        """Drop every cached cross tuple so the next fit recomputes them."""
        for obs in self._observations:
            obs.crosses = ()
            obs.cross_layout = ()

    # === Access ===

    @overload
    def __getitem__(self, index: int) -> Observation: ...

    @overload
    def __getitem__(self, index: slice) -> list[Observation]: ...

    def __getitem__(self, index):
        return self._observations[index]

    def __len__(self) -> int:
        return len(self._observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self._observations)

    @property
    def is_fit_eligible(self) -> bool:
        """True once enough observations exist to attempt a fit."""
        return len(self._observations) >= MIN_TRAINING_OBSERVATIONS

    @property
    def observed(self) -> NDArray[np.floating[Any]]:
        return np.array([o.observed for o in self._observations], dtype=np.float64)

    @property
    def predicted(self) -> NDArray[np.floating[Any]]:
        return np.array([o.predicted for o in self._observations], dtype=np.float64)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return np.array([o.residual for o in self._observations], dtype=np.float64)

    def __repr__(self) -> str:
        return f"ObservationStore(n={len(self)})"


def observations_from_table(table: ArrayLike, observed_index: int) -> list[Observation]:
    """
    Reshape a row-major table into observation records.

    The column at `observed_index` becomes each record's observed value;
    the remaining columns, in their original order, become its variables.
    """
    source = DataSource.from_table(table, observed_index)
    return list(ObservationStore.from_datasource(source))
