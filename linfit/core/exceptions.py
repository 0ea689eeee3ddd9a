"""
Exception hierarchy for linfit.

All exceptions inherit from LinfitError to allow catching any
library-specific error. Every exception class is tagged with an ErrorKind
so callers can branch on the category without matching class names.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure categories a fit/predict sequence can report."""
    INSUFFICIENT_DATA = 'insufficient_data'
    UNDERDETERMINED = 'underdetermined'
    SINGULAR_MATRIX = 'singular_matrix'
    NOT_FITTED = 'not_fitted'
    PRECONDITION = 'precondition'


class LinfitError(Exception):
    """Base exception for all linfit errors."""
    kind: ErrorKind | None = None


class ValidationError(LinfitError):
    """
    Input validation failed.

    Raised when caller-provided inputs break a precondition: non-numeric
    or non-finite data, bad table shapes, out-of-range column indices.
    These are programming errors and are never recovered from internally.
    """
    kind = ErrorKind.PRECONDITION


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when observations disagree on their variable or cross count,
    or when a feature cross is bound to an index the variable vector
    does not have.
    """
    pass


class InsufficientDataError(LinfitError):
    """
    Too few observations have been trained to attempt a fit.

    Attributes:
        n_observations: Number of observations currently stored
        min_required: Minimum number of observations needed
    """
    kind = ErrorKind.INSUFFICIENT_DATA

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        min_required: int | None = None
    ):
        super().__init__(message)
        self.n_observations = n_observations
        self.min_required = min_required


class UnderdeterminedError(LinfitError):
    """
    Fewer observations than model terms.

    Least squares has no unique solution when N < 1 + v + k
    (bias + raw variables + cross outputs).

    Attributes:
        n_observations: Number of rows in the design matrix
        n_terms: Number of columns (coefficients) in the design matrix
    """
    kind = ErrorKind.UNDERDETERMINED

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        n_terms: int | None = None
    ):
        super().__init__(message)
        self.n_observations = n_observations
        self.n_terms = n_terms


class NumericalError(LinfitError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when back substitution meets a pivot of R that is zero to
    working precision, i.e. the design matrix lacks full column rank.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Expected rank (number of columns)
        pivot_index: Column whose pivot failed, if known
    """
    kind = ErrorKind.SINGULAR_MATRIX

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        pivot_index: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank
        self.pivot_index = pivot_index


class NotFittedError(LinfitError):
    """
    A prediction was requested before any successful fit.
    """
    kind = ErrorKind.NOT_FITTED
