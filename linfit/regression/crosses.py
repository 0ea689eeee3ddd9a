"""
Feature crosses: derived features computed from an observation's variables.

Each FeatureCross defines:
- the variable indices it reads
- a fixed output arity (how many derived values every call returns)
- a pure calculate(variables) -> values

Crosses are plain frozen values (kind + bound indices + parameters),
not closures, so they can be compared, printed and round-tripped through
to_dict()/from_dict().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from linfit.core.exceptions import DimensionError, ValidationError


class FeatureCross(ABC):
    """Abstract derived feature over a raw variable vector."""

    @property
    @abstractmethod
    def kind(self) -> str:
        ...

    @property
    @abstractmethod
    def variable_indices(self) -> tuple[int, ...]:
        """Variable indices this cross reads."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Readable label, e.g. 'x0^2' or 'x0*x1'."""
        ...

    @property
    def arity(self) -> int:
        """Number of values every calculate() call returns."""
        return 1

    @abstractmethod
    def _compute(self, variables: NDArray) -> NDArray:
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        ...

    def calculate(self, variables: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Derive this cross's values from a raw variable vector.

        Raises:
            DimensionError: If a bound index is outside the vector.
                This is a caller bug, not a recoverable condition.
        """
        values = np.asarray(variables, dtype=np.float64)
        size = values.shape[0] if values.ndim == 1 else 0
        for i in self.variable_indices:
            if not 0 <= i < size:
                raise DimensionError(
                    f"{self.name}: variable index {i} out of range for "
                    f"{size} variables"
                )
        return self._compute(values)

    @staticmethod
    def from_dict(spec: dict[str, Any]) -> FeatureCross:
        """Rebuild a cross from its to_dict() form."""
        kind = spec.get('kind')
        if kind == 'power':
            return PowerCross(index=int(spec['index']), power=float(spec['power']))
        if kind == 'product':
            return ProductCross(indices=tuple(int(i) for i in spec['indices']))
        raise ValidationError(
            f"Unknown cross kind: {kind!r}. Available: 'power', 'product'"
        )


@dataclass(frozen=True)
class PowerCross(FeatureCross):
    """Power of one variable: [variables[index] ** power]."""
    index: int
    power: float

    @property
    def kind(self) -> str:
        return 'power'

    @property
    def variable_indices(self) -> tuple[int, ...]:
        return (self.index,)

    @property
    def name(self) -> str:
        return f"x{self.index}^{self.power:g}"

    def _compute(self, variables: NDArray) -> NDArray:
        return np.array([variables[self.index] ** self.power], dtype=np.float64)

    def to_dict(self) -> dict[str, Any]:
        return {'kind': self.kind, 'index': self.index, 'power': self.power}


@dataclass(frozen=True)
class ProductCross(FeatureCross):
    """Product of several variables: [prod(variables[i] for i in indices)]."""
    indices: tuple[int, ...]

    def __post_init__(self):
        # Accept any iterable of ints, store a hashable tuple
        object.__setattr__(self, 'indices', tuple(self.indices))

    @property
    def kind(self) -> str:
        return 'product'

    @property
    def variable_indices(self) -> tuple[int, ...]:
        return self.indices

    @property
    def name(self) -> str:
        return "*".join(f"x{i}" for i in self.indices)

    def _compute(self, variables: NDArray) -> NDArray:
        output = 1.0
        for i in self.indices:
            output *= variables[i]
        return np.array([output], dtype=np.float64)

    def to_dict(self) -> dict[str, Any]:
        return {'kind': self.kind, 'indices': list(self.indices)}


def pow_cross(index: int, power: float) -> PowerCross:
    """Cross raising variable `index` to `power`."""
    return PowerCross(index=index, power=float(power))


def product_cross(*indices: int) -> ProductCross:
    """Cross multiplying the variables at `indices`."""
    return ProductCross(indices=indices)


def apply_crosses(
    variables: ArrayLike,
    crosses: tuple[FeatureCross, ...] | list[FeatureCross],
) -> NDArray[np.floating[Any]]:
    """
    Concatenate every cross's output, in registration order.

    Returns an empty float array when there are no crosses.
    """
    if not crosses:
        return np.empty(0, dtype=np.float64)
    return np.concatenate([c.calculate(variables) for c in crosses])
