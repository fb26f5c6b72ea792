"""
Matrix: dense row-major matrix with in-place, chainable arithmetic.

Every mutating method works on the instance and returns it, so calls can
be chained:

    >>> m = Matrix(2, 2).set_data([1, 2, 4, 1])
    >>> m.power(3).to_array()
    array([25., 22., 44., 25.])

Structural mismatches never raise. An operand with the wrong shape is
skipped, a non-square matrix has no determinant (None) and is not
inverted, a singular matrix is left unchanged, and set_data() with an
ambiguous new length does nothing. Each of these is logged at DEBUG level.
Invalid input (non-numeric data, negative sizes, operands that are not
matrices or numbers) raises ValidationError.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from matrixmath.core.compute.pool import BufferPool, get_default_pool
from matrixmath.core.compute.tolerances import CPU_FP64, ToleranceTier
from matrixmath.core.exceptions import DimensionError, ValidationError
from matrixmath.core.validation import (
    check_2d,
    check_array,
    check_dimension,
    check_max_ndim,
    check_power,
)
from matrixmath.matrix import _chain, _cofactor
from matrixmath.matrix.formatting import LogFormat, format_matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatrixData:
    """
    Snapshot of a matrix's values together with its shape.

    Passing a MatrixData to Matrix.set_data() restores both values and shape.

    Attributes:
        values: Row-major values (a copy, never the matrix's own buffer)
        rows: Number of rows
        cols: Number of columns
    """
    values: NDArray[np.float64]
    rows: int
    cols: int

    def to_2d(self) -> NDArray[np.float64]:
        """Values reshaped to (rows, cols)."""
        return self.values.reshape(self.rows, self.cols)


def _identity_pattern(length: int, cols: int) -> NDArray[np.float64]:
    return (np.arange(length) % (cols + 1) == 0).astype(np.float64)


def _check_matrices(matrices: Sequence[Any], operation: str) -> Sequence[Matrix]:
    for position, matrix in enumerate(matrices):
        if not isinstance(matrix, Matrix):
            raise ValidationError(
                f"{operation}: operand {position} must be a Matrix, "
                f"got {type(matrix).__name__}"
            )
    return matrices


def _check_operands(operands: Sequence[Any], operation: str) -> Sequence[Any]:
    for position, operand in enumerate(operands):
        if not isinstance(operand, Matrix) and not _chain.is_scalar(operand):
            raise ValidationError(
                f"{operation}: operand {position} must be a Matrix or a real number, "
                f"got {type(operand).__name__}"
            )
    return operands


class Matrix:
    """
    Dense matrix stored as a flat row-major float64 buffer.

    Args:
        rows: Number of rows (default 0)
        cols: Number of columns (default: same as rows)
        initialize: If True, square matrices start as identity and others
            as zeros. If False, every value is NaN until set.
        pool: BufferPool for temporaries. Defaults to the calling thread's
            pool.

    The value at row r, column c lives at flat index r * cols + c and is
    available as matrix[r * cols + c].
    """

    def __init__(
        self,
        rows: int = 0,
        cols: int | None = None,
        initialize: bool = True,
        *,
        pool: BufferPool | None = None,
    ):
        rows = check_dimension(rows, 'rows')
        cols = rows if cols is None else check_dimension(cols, 'cols')

        self._rows = rows
        self._cols = cols
        self._values = np.full(rows * cols, np.nan, dtype=np.float64)
        self._pool = pool if pool is not None else get_default_pool()
        self._scratch: _cofactor._ScratchCache | None = None
        # Guards _scratch during determinant and inverse
        self._lock = threading.RLock()

        if initialize:
            if rows == cols:
                self.set_identity_data()
            else:
                self.set_empty_data()

    # ------------------------------------------------------------------
    # Alternate constructors
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls, size: int, *, pool: BufferPool | None = None) -> Matrix:
        """Create a size x size identity matrix."""
        return cls(size, size, pool=pool)

    @classmethod
    def from_rows(cls, rows: ArrayLike, *, pool: BufferPool | None = None) -> Matrix:
        """
        Create a matrix from nested rows.

        Args:
            rows: 2D array-like, e.g. [[1, 2], [3, 4]]
            pool: BufferPool for temporaries

        Raises:
            ValidationError: If the data is not numeric or the rows are ragged
            DimensionError: If the data is not 2D
        """
        data = check_array(rows, 'rows')
        check_2d(data, 'rows')
        matrix = cls(data.shape[0], data.shape[1], initialize=False, pool=pool)
        np.copyto(matrix._values, data.ravel())
        return matrix

    def _new_like(self, rows: int, cols: int) -> Matrix:
        return type(self)(rows, cols, initialize=False, pool=self._pool)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def length(self) -> int:
        """Number of values (rows * cols)."""
        return self._values.size

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def is_square(self) -> bool:
        return self._rows == self._cols

    @property
    def pool(self) -> BufferPool:
        return self._pool

    # ------------------------------------------------------------------
    # Data access
    # ------------------------------------------------------------------

    def set_data(
        self,
        values: ArrayLike | MatrixData,
        rows: int | None = None,
        cols: int | None = None,
    ) -> Matrix:
        """
        Replace the values of this matrix.

        If the number of values equals the current length, the values are
        copied in and the shape stays the same unless both rows and cols
        are given and multiply to that length.

        If the number of values differs, the call is ignored unless both
        rows and cols are given and rows * cols equals the number of values.

        A MatrixData, or a 2D array, supplies its own rows and cols when
        they are not passed explicitly.

        Args:
            values: Flat row-major values, a 2D array, or a MatrixData
            rows: New number of rows
            cols: New number of columns

        Returns:
            This matrix
        """
        if isinstance(values, MatrixData):
            if rows is None and cols is None:
                rows, cols = values.rows, values.cols
            values = values.values

        data = check_array(values, 'values')
        check_max_ndim(data, 2, 'values')
        if data.ndim == 2:
            if rows is None and cols is None:
                rows, cols = data.shape
            data = data.ravel()
        elif data.ndim == 0:
            data = data.reshape(1)

        if rows is not None:
            rows = check_dimension(rows, 'rows')
        if cols is not None:
            cols = check_dimension(cols, 'cols')

        count = data.size
        size_hint = rows is not None and cols is not None and rows * cols == count

        if count == self.length:
            np.copyto(self._values, data)
            if size_hint:
                self._rows, self._cols = rows, cols
            return self

        if not size_hint:
            logger.debug(
                "set_data: ignoring %d values for %dx%d matrix without a matching "
                "size hint (rows=%s, cols=%s)",
                count, self._rows, self._cols, rows, cols,
            )
            return self

        self._values = np.array(data, dtype=np.float64)
        self._rows, self._cols = rows, cols
        return self

    def set_empty_data(self) -> Matrix:
        """Set every value to 0."""
        self._values.fill(0.0)
        return self

    def set_identity_data(self) -> Matrix:
        """Set values to the identity pattern: 1 on the diagonal, 0 elsewhere."""
        np.copyto(self._values, _identity_pattern(self.length, self._cols))
        return self

    def get_data(self) -> MatrixData:
        """Copy of the values tagged with rows and cols."""
        return MatrixData(values=self._values.copy(), rows=self._rows, cols=self._cols)

    def to_array(self) -> NDArray[np.float64]:
        """Copy of the values as a flat row-major array."""
        return self._values.copy()

    def copy(self, other: Matrix) -> Matrix:
        """
        Make this matrix a copy of `other`, shape and values.

        The existing buffer is reused when the lengths match.
        """
        _check_matrices((other,), 'copy')
        if other is self:
            return self
        if other.length == self.length:
            np.copyto(self._values, other._values)
        else:
            self._values = other._values.copy()
        self._rows, self._cols = other.rows, other.cols
        return self

    def clone(self) -> Matrix:
        """New matrix with the same shape, values and pool."""
        return type(self)(0, 0, initialize=False, pool=self._pool).copy(self)

    def __getitem__(self, index: Any) -> Any:
        value = self._values[index]
        if isinstance(value, np.ndarray):
            return value.copy()
        return float(value)

    def __setitem__(self, index: Any, value: Any) -> None:
        self._values[index] = value

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[float]:
        return iter(self._values.tolist())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._rows}x{self._cols}, {self._values.tolist()})"

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _elementwise(self, ufunc: np.ufunc, matrices: Sequence[Any], operation: str) -> Matrix:
        for position, matrix in enumerate(_check_matrices(matrices, operation)):
            if matrix.shape != self.shape:
                logger.debug(
                    "%s: skipping operand %d, %dx%d does not match %dx%d",
                    operation, position, matrix.rows, matrix.cols, self._rows, self._cols,
                )
                continue
            ufunc(self._values, matrix._values, out=self._values)
        return self

    def add(self, *matrices: Matrix) -> Matrix:
        """
        Add matrices into this matrix, in order.

        Matrices whose shape differs from this one are skipped.
        """
        return self._elementwise(np.add, matrices, 'add')

    def subtract(self, *matrices: Matrix) -> Matrix:
        """
        Subtract matrices from this matrix, in order.

        Matrices whose shape differs from this one are skipped.
        """
        return self._elementwise(np.subtract, matrices, 'subtract')

    def multiply(self, *operands: Matrix | float) -> Matrix:
        """
        Multiply this matrix by each operand in turn.

        Operands are matrices (matrix product) or real numbers (scalar
        product). A matrix whose row count differs from the running
        product's column count is skipped, and the chain continues.

        Returns:
            This matrix, holding the final product and its shape
        """
        return _chain.multiply_chain(self, _check_operands(operands, 'multiply'))

    def divide(self, *matrices: Matrix, strict: bool = False) -> Matrix:
        """
        Multiply this matrix by the inverse of each matrix in turn.

        Non-square matrices are dropped. A singular matrix cannot be
        inverted and is multiplied in unchanged, unless `strict`.

        Args:
            *matrices: Divisors
            strict: Raise DimensionError for non-square and
                SingularMatrixError for singular divisors

        Returns:
            This matrix
        """
        inverses = []
        for position, matrix in enumerate(_check_matrices(matrices, 'divide')):
            if not matrix.is_square:
                if strict:
                    raise DimensionError(
                        f"divide: operand {position} is not square "
                        f"({matrix.rows}x{matrix.cols})"
                    )
                logger.debug("divide: dropping non-square operand %d (%dx%d)",
                             position, matrix.rows, matrix.cols)
                continue
            inverses.append(matrix.clone().invert(strict=strict))
        return self.multiply(*inverses)

    def power(self, exponent: int) -> Matrix:
        """
        Raise this matrix to a non-negative integer power.

        Non-square matrices are left unchanged. Power 0 gives the identity.
        """
        if not self.is_square:
            logger.debug("power: %dx%d matrix is not square, left unchanged",
                         self._rows, self._cols)
            return self
        exponent = check_power(exponent, 'exponent')
        if exponent == 0:
            return self.set_identity_data()
        base = self.clone()
        return self.multiply(*([base] * (exponent - 1)))

    def transpose(self) -> Matrix:
        """Swap rows and columns."""
        rows, cols = self._rows, self._cols
        with self._pool.borrow(self.length) as buffer:
            buffer.reshape(cols, rows)[...] = self._values.reshape(rows, cols).T
            np.copyto(self._values, buffer)
        self._rows, self._cols = cols, rows
        return self

    def invert(self, strict: bool = False) -> Matrix:
        """
        Replace this matrix with its inverse.

        Non-square and singular matrices are left unchanged, unless
        `strict`, which raises DimensionError or SingularMatrixError.
        """
        return _cofactor.invert(self, strict=strict)

    def get_determinant(self) -> float | None:
        """Determinant, or None if the matrix is not square."""
        return _cofactor.determinant(self)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def equals(self, other: Any) -> bool:
        """Exact comparison of shape and every value."""
        if not isinstance(other, Matrix):
            return False
        if other.shape != self.shape:
            return False
        return bool(np.array_equal(self._values, other._values))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def allclose(self, other: Any, tolerance: ToleranceTier = CPU_FP64) -> bool:
        """Comparison of shape and values up to the tolerance tier."""
        if not isinstance(other, Matrix) or other.shape != self.shape:
            return False
        return bool(np.allclose(self._values, other._values,
                                rtol=tolerance.rtol, atol=tolerance.atol))

    def is_identity(self) -> bool:
        """
        Check the values against the identity pattern.

        The pattern is positional (index % (cols + 1) == 0), so non-square
        matrices are generally not identity.
        """
        return bool(np.array_equal(self._values, _identity_pattern(self.length, self._cols)))

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def to_log_string(self, fmt: LogFormat | None = None, **overrides: Any) -> str:
        """
        Render the matrix as an indented, delimited block of rows.

        Args:
            fmt: Base format (default LogFormat())
            **overrides: LogFormat fields to replace, e.g. separator=', '
        """
        return format_matrix(self, fmt, **overrides)
