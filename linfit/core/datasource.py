"""
Tabular DataSource for linfit.

DataSource is the "I have a table" abstraction. It splits a row-major
numeric table into the observed column (y) and the remaining variable
columns (X). It knows nothing about regressions, crosses or fitting.

Usage:
    from linfit import DataSource

    ds = DataSource.from_table(rows, observed_index=0)
    ds = DataSource.from_dataframe(df, observed='price')
    ds = DataSource.from_file("data.csv", observed='price')

    X = ds['X']   # (n, m - 1), original column order kept
    y = ds['y']   # (n,)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from linfit.core.exceptions import ValidationError
from linfit.core.validation import check_array, check_2d, check_index

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Split view of a numeric table. Construct via factory classmethods.

    Holds 'X' (variables, n x (m - 1)) and 'y' (observed values, n,),
    plus metadata describing where they came from.
    """
    _data: dict[str, NDArray[np.floating[Any]]]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Array Access ===

    def keys(self) -> frozenset[str]:
        """Return the names of all available arrays."""
        return frozenset(self._data.keys())

    def __getitem__(self, key: str) -> NDArray[np.floating[Any]]:
        """
        Access a named array.

        Raises:
            KeyError: If key not found, listing the available keys
        """
        if key not in self._data:
            raise KeyError(
                f"DataSource has no array '{key}'. Available: {self.keys()}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._metadata.get('n_observations', 0)

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Names of the variable columns, if the table had a header."""
        return self._metadata.get('columns')

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    # === Factory Methods ===

    @classmethod
    def from_table(cls, table: ArrayLike, observed_index: int) -> DataSource:
        """
        Split a row-major table on its observed column.

        The observed column may be first, last, any interior position,
        or a negative index counted from the end. All other columns keep
        their relative order and become the variable vector.

        Args:
            table: Rows of equal length (n x m, m >= 1)
            observed_index: Column holding the observed (target) value

        Raises:
            ValidationError: Ragged or non-numeric table
            DimensionError: Table not 2D, or observed_index out of range
        """
        data = check_array(table, 'table')
        check_2d(data, 'table')
        n, m = data.shape
        if m == 0:
            raise ValidationError("table: rows have no columns")

        col = check_index(observed_index, m, 'observed_index')
        return cls(
            _data={
                'X': np.delete(data, col, axis=1),
                'y': data[:, col].copy(),
            },
            _metadata={
                'n_observations': n,
                'source': 'table',
                'observed_index': col,
            },
        )

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, observed: str | int) -> DataSource:
        """
        Construct from a pandas DataFrame.

        Args:
            df: Numeric DataFrame
            observed: Column label (or position) of the observed value
        """
        labels = list(df.columns)
        if isinstance(observed, str):
            if observed not in labels:
                raise ValidationError(
                    f"observed: no column {observed!r}. Available: {labels}"
                )
            observed_index = labels.index(observed)
        else:
            observed_index = observed

        ds = cls.from_table(df.to_numpy(dtype=np.float64), observed_index)
        col = ds._metadata['observed_index']
        ds._metadata.update(
            source='dataframe',
            observed=str(labels[col]),
            columns=tuple(str(c) for i, c in enumerate(labels) if i != col),
        )
        return ds

    @classmethod
    def from_file(cls, path: str | Path, *, observed: str | int) -> DataSource:
        """Construct from a CSV/TSV file with a header row."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix not in ('.csv', '.tsv'):
            raise ValidationError(f"Unknown file format: {suffix}")

        import pandas as pd
        df = pd.read_csv(path, sep='\t' if suffix == '.tsv' else ',')
        ds = cls.from_dataframe(df, observed=observed)
        ds._metadata['source_path'] = str(path)
        return ds
