"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from linfit.regression import Observation


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def exact_linear_data(rng):
    """Noise-free y = a + X b, so a fit must recover a and b."""
    n, p = 30, 3
    X = rng.standard_normal((n, p)) * [1.0, 10.0, 0.1]
    intercept = 2.5
    beta = np.array([1.5, -3.0, 0.75])
    y = intercept + X @ beta
    return X, y, np.concatenate([[intercept], beta])


@pytest.fixture
def murder_observations():
    """
    Murders per annum per 1,000,000 inhabitants against inhabitants,
    percent with incomes below $5000 and percent unemployed. Every
    variable correlates positively with the target.
    """
    return [
        Observation.of(11.2, [587000, 16.5, 6.2]),
        Observation.of(13.4, [643000, 20.5, 6.4]),
        Observation.of(40.7, [635000, 26.3, 9.3]),
        Observation.of(5.3, [692000, 16.5, 5.3]),
        Observation.of(24.8, [1248000, 19.2, 7.3]),
        Observation.of(12.7, [643000, 16.5, 5.9]),
        Observation.of(20.9, [1964000, 20.2, 6.4]),
        Observation.of(35.7, [1531000, 21.3, 7.6]),
        Observation.of(8.7, [713000, 17.2, 4.9]),
        Observation.of(9.6, [749000, 14.3, 6.4]),
        Observation.of(14.5, [7895000, 18.1, 6.0]),
        Observation.of(26.9, [762000, 23.1, 7.4]),
        Observation.of(15.7, [2793000, 19.1, 5.8]),
        Observation.of(36.2, [741000, 24.7, 8.6]),
        Observation.of(18.1, [625000, 18.6, 6.5]),
        Observation.of(28.9, [854000, 24.9, 8.3]),
        Observation.of(14.9, [716000, 17.9, 6.7]),
        Observation.of(25.8, [921000, 22.4, 8.6]),
        Observation.of(21.7, [595000, 20.2, 8.4]),
        Observation.of(25.7, [3353000, 16.9, 6.7]),
    ]


@pytest.fixture
def golden_table():
    """Nine rows, observed value in column 0."""
    return [
        [651, 1, 23],
        [762, 2, 26],
        [856, 3, 30],
        [1063, 4, 34],
        [1190, 5, 43],
        [1298, 6, 48],
        [1421, 7, 52],
        [1440, 8, 57],
        [1518, 9, 58],
    ]


@pytest.fixture
def quadratic_observations():
    """y = x + x^2 exactly."""
    return [Observation.of(x + x ** 2, [x]) for x in (2.0, 4.0, 5.0, 8.0, 12.0)]
