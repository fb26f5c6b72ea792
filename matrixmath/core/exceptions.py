"""
Exception hierarchy for matrixmath.

All exceptions inherit from MatrixMathError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Structural mismatches inside an operation chain (wrong shape,
      non-square, singular, ambiguous resize) are NOT errors: the
      offending operand is skipped. These exceptions cover invalid input
      and the opt-in strict mode only.
"""


class MatrixMathError(Exception):
    """Base exception for all matrixmath errors."""
    pass


class ValidationError(MatrixMathError):
    """
    Input validation failed.

    Raised when user-provided inputs are not usable as matrix data or
    operands at all (non-numeric values, negative dimensions, operands of
    the wrong type).
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when input data has an unusable number of dimensions, or when
    a strict-mode operation requires a square matrix and gets another shape.
    """
    pass


class NumericalError(MatrixMathError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular.

    Only raised by strict-mode inversion and division. The default
    behaviour for a singular matrix is to leave it unchanged.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        determinant: The determinant that was found, if computed
        size: Number of rows (== columns) of the matrix
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        determinant: float | None = None,
        size: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.determinant = determinant
        self.size = size


class PoolError(MatrixMathError):
    """
    Invalid request to a buffer pool.

    Attributes:
        length: The requested buffer length
    """

    def __init__(self, message: str, length: int | None = None):
        super().__init__(message)
        self.length = length
