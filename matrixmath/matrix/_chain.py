"""
Chain multiplication engine.

Folds a sequence of matrices and scalars left to right into one running
product. All temporaries come from the owning matrix's BufferPool; the
final product is written back with set_data().

Floating point behaviour:
    - Scalars are applied as v * (s * (1/s)) / (1/s), which makes
      multiply(2, 3) and multiply(6) agree bit for bit and turns
      multiplication by 1/10 into an exact division by 10
    - Matrix products accumulate over the shared dimension in index order,
      one rounding per multiply and per add, with no fused multiply-add
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Sequence, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from matrixmath.matrix.matrix import Matrix

logger = logging.getLogger(__name__)


def is_scalar(operand: Any) -> bool:
    """Check whether an operand is a real number (bools excluded)."""
    return isinstance(operand, numbers.Real) and not isinstance(operand, bool)


def scale_in_place(values: NDArray[np.float64], scalar: float) -> None:
    """
    Multiply every element of `values` by `scalar`, in place.

    For finite non-zero scalars the product is computed as
    v * (s * (1/s)) / (1/s). Scalars without a finite reciprocal (zero,
    inf, NaN, subnormals too small to invert) fall back to v * s.
    """
    scalar = float(scalar)
    factor = 1.0 / scalar if scalar != 0.0 else math.inf
    if math.isfinite(scalar) and math.isfinite(factor):
        np.multiply(values, scalar * factor, out=values)
        np.divide(values, factor, out=values)
    else:
        np.multiply(values, scalar, out=values)


def accumulate_product(
    left: NDArray[np.float64],
    right: NDArray[np.float64],
    rows: int,
    inner: int,
    cols: int,
    out: NDArray[np.float64],
    term: NDArray[np.float64],
) -> None:
    """
    Row-major matrix product out = left @ right.

    Args:
        left: Flat (rows x inner) values
        right: Flat (inner x cols) values
        rows, inner, cols: Dimensions of the product
        out: Flat (rows x cols) buffer receiving the product
        term: Flat (rows x cols) scratch buffer
    """
    acc = out.reshape(rows, cols)
    scratch = term.reshape(rows, cols)
    a = left.reshape(rows, inner)
    b = right.reshape(inner, cols)
    acc.fill(0.0)
    for k in range(inner):
        np.multiply(a[:, k:k + 1], b[k:k + 1, :], out=scratch)
        acc += scratch


def _skip_identity_prefix(matrix: Matrix, operands: Sequence[Any]) -> tuple[int, Matrix]:
    """
    Find where a chain on an identity matrix does its first real work.

    Returns the index of the first operand still to be applied and the
    matrix whose values seed the running product. Scalar 1 and same-size
    identity operands are no-ops. A following matrix whose row count fits
    would be copied exactly by the product, so it becomes the seed. Matrices
    with non-finite values are not used as seeds, since 0 * inf in the full
    product yields NaN.
    """
    size = matrix.rows
    for index, operand in enumerate(operands):
        if is_scalar(operand):
            if operand == 1:
                continue
            return index, matrix
        if operand.rows != size:
            return index, matrix
        if operand.cols == size and operand.is_identity():
            continue
        if np.isfinite(operand._values).all():
            return index + 1, operand
        return index, matrix
    return len(operands), matrix


def multiply_chain(matrix: Matrix, operands: Sequence[Any]) -> Matrix:
    """
    Multiply `matrix` in place by each operand in turn.

    Operands must already be validated as Matrix instances or real numbers.
    A matrix operand whose row count differs from the running product's
    column count is skipped.
    """
    pool = matrix._pool
    start, seed = 0, matrix
    if operands and matrix.is_square and matrix.is_identity():
        start, seed = _skip_identity_prefix(matrix, operands)

    rows, cols = seed.rows, seed.cols
    current = pool.acquire(seed.length)
    np.copyto(current, seed._values)
    if seed is not matrix:
        # -0.0 becomes 0.0, as it would in the accumulated product
        current += 0.0

    try:
        for position in range(start, len(operands)):
            operand = operands[position]
            if is_scalar(operand):
                scale_in_place(current, operand)
                continue

            if cols != operand.rows:
                logger.debug(
                    "multiply: skipping operand %d, %dx%d cannot follow %dx%d",
                    position, operand.rows, operand.cols, rows, cols,
                )
                continue

            length = rows * operand.cols
            previous, current = current, pool.acquire(length)
            try:
                with pool.borrow(length) as term:
                    accumulate_product(previous, operand._values, rows, cols,
                                       operand.cols, current, term)
            finally:
                pool.release(previous)
            cols = operand.cols

        matrix.set_data(current, rows, cols)
    finally:
        pool.release(current)

    return matrix
