"""
Chain operations that leave their inputs untouched.

Each function clones the first matrix and applies the matching Matrix
method to the clone, so add(a, b, c) is a.clone().add(b, c).
"""

from __future__ import annotations

from matrixmath.core.exceptions import ValidationError
from matrixmath.matrix.matrix import Matrix


def _first(matrix: Matrix, operation: str) -> Matrix:
    if not isinstance(matrix, Matrix):
        raise ValidationError(
            f"{operation}: first operand must be a Matrix, got {type(matrix).__name__}"
        )
    return matrix.clone()


def add(first: Matrix, *others: Matrix) -> Matrix:
    """Sum of matrices as a new matrix. Mismatched shapes are skipped."""
    return _first(first, 'add').add(*others)


def subtract(first: Matrix, *others: Matrix) -> Matrix:
    """Difference of matrices as a new matrix. Mismatched shapes are skipped."""
    return _first(first, 'subtract').subtract(*others)


def multiply(first: Matrix, *operands: Matrix | float) -> Matrix:
    """Product of matrices and scalars as a new matrix."""
    return _first(first, 'multiply').multiply(*operands)


def divide(first: Matrix, *others: Matrix, strict: bool = False) -> Matrix:
    """Quotient of matrices as a new matrix. See Matrix.divide()."""
    return _first(first, 'divide').divide(*others, strict=strict)
