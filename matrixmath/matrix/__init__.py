"""
Dense matrix arithmetic.

Public API:
    Matrix          - Row-major matrix with chainable in-place operations
    MatrixData      - Values plus shape, as returned by Matrix.get_data()
    add(a, ...)     - New matrix: a + ...
    subtract(a, ...)- New matrix: a - ...
    multiply(a, ...)- New matrix: a * ... (matrices and scalars)
    divide(a, ...)  - New matrix: a * inverse(...)
    LogFormat       - Layout options for Matrix.to_log_string()
    format_matrix   - Render a matrix as text
"""

from matrixmath.matrix.matrix import Matrix, MatrixData
from matrixmath.matrix.operations import add, subtract, multiply, divide
from matrixmath.matrix.formatting import LogFormat, format_matrix

__all__ = [
    "Matrix",
    "MatrixData",
    "add",
    "subtract",
    "multiply",
    "divide",
    "LogFormat",
    "format_matrix",
]
