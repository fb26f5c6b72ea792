"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from matrixmath import BufferPool, Matrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def pool():
    """Fresh buffer pool, isolated from the thread default."""
    return BufferPool()


@pytest.fixture
def well_conditioned(rng):
    """Factory for diagonally dominant (hence invertible) square matrices."""
    def make(size):
        data = rng.uniform(-1.0, 1.0, (size, size))
        data += np.eye(size) * (size + 1)
        return Matrix.from_rows(data)
    return make


@pytest.fixture
def singular_3x3():
    """Third row is the sum of the first two."""
    return Matrix.from_rows([[1, 2, 3], [4, 5, 6], [5, 7, 9]])
