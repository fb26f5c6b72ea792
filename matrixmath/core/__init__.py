"""
Core infrastructure for matrixmath.

This module provides shared abstractions and utilities used by the matrix
engine.

Key components:
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Buffer pool and tolerance tiers
"""

from matrixmath.core.exceptions import (
    MatrixMathError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    PoolError,
)

__all__ = [
    # Exceptions
    "MatrixMathError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "PoolError",
]
