"""
matrixmath: dense matrix arithmetic for Python.

Matrices are stored as flat row-major float64 buffers and mutated in
place by chainable methods. Determinant and inverse use cofactor
expansion; temporaries are recycled through a per-thread buffer pool.

Submodules:
    matrix: Matrix class and chain operations
    core: Exceptions, validation, buffer pool, tolerances
"""

import logging

__version__ = "0.1.0"

from matrixmath.core.exceptions import (
    MatrixMathError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    PoolError,
)
from matrixmath.core.compute.pool import BufferPool, get_default_pool
from matrixmath.matrix import (
    Matrix,
    MatrixData,
    add,
    subtract,
    multiply,
    divide,
    LogFormat,
    format_matrix,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Matrix
    "Matrix",
    "MatrixData",
    "add",
    "subtract",
    "multiply",
    "divide",
    "LogFormat",
    "format_matrix",
    # Buffer pool
    "BufferPool",
    "get_default_pool",
    # Exceptions
    "MatrixMathError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "PoolError",
]
