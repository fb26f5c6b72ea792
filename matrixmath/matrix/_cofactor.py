"""
Determinant and inverse by cofactor expansion.

Sizes 1-3 use closed forms. Larger determinants expand along the first
row; inverses build the full cofactor matrix, transpose it into the
adjugate and scale by 1/det. The cost grows factorially with the size.

Minors are written into a scratch matrix cached on the owning instance,
so one level of the recursion reuses a single (n-1)x(n-1) matrix for all
of its minors. Each minor in turn caches its own scratch for the level
below. Every use of a matrix's scratch happens under that matrix's lock,
so concurrent calls on one instance do not share minors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from matrixmath.core.exceptions import DimensionError, SingularMatrixError
from matrixmath.matrix._chain import scale_in_place

if TYPE_CHECKING:
    from matrixmath.matrix.matrix import Matrix

logger = logging.getLogger(__name__)


@dataclass
class _ScratchCache:
    """Reusable matrices for one square size."""
    size: int
    minor: Matrix
    work: Matrix


def _scratch(matrix: Matrix) -> _ScratchCache:
    # Caller holds matrix._lock
    size = matrix.rows
    cache = matrix._scratch
    if cache is None or cache.size != size:
        cache = _ScratchCache(
            size=size,
            minor=matrix._new_like(size - 1, size - 1),
            work=matrix._new_like(size, size),
        )
        matrix._scratch = cache
    return cache


def fill_minor(
    values: NDArray[np.float64],
    size: int,
    row: int,
    col: int,
    out: NDArray[np.float64],
) -> None:
    """Write the minor of a flat (size x size) matrix without `row` and `col` into `out`."""
    src = values.reshape(size, size)
    dst = out.reshape(size - 1, size - 1)
    dst[:row, :col] = src[:row, :col]
    dst[:row, col:] = src[:row, col + 1:]
    dst[row:, :col] = src[row + 1:, :col]
    dst[row:, col:] = src[row + 1:, col + 1:]


def determinant(matrix: Matrix) -> float | None:
    """
    Determinant of a square matrix.

    Returns:
        The determinant, 1.0 for the empty 0x0 matrix, or None when the
        matrix is not square
    """
    if not matrix.is_square:
        return None

    size = matrix.rows
    values = matrix._values

    if size == 0:
        return 1.0

    if size == 1:
        return float(values[0])

    # [[a, b], [c, d]] -> a*d - b*c
    if size == 2:
        a, b, c, d = values.tolist()
        return a * d - b * c

    # [[a, b, c], [d, e, f], [g, h, i]]
    if size == 3:
        a, b, c, d, e, f, g, h, i = values.tolist()
        return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)

    with matrix._lock:
        cache = _scratch(matrix)
        first_row = values[:size].tolist()
        result = 0.0
        for col in range(size):
            fill_minor(values, size, 0, col, cache.minor._values)
            sign = -1.0 if col % 2 else 1.0
            result += sign * first_row[col] * determinant(cache.minor)
    return result


def _singular(matrix: Matrix, det: float, strict: bool) -> Matrix:
    if strict:
        raise SingularMatrixError(
            f"Cannot invert {matrix.rows}x{matrix.cols} matrix: determinant is {det}",
            matrix_name='matrix',
            determinant=det,
            size=matrix.rows,
        )
    logger.debug("invert: %dx%d matrix is singular, left unchanged",
                 matrix.rows, matrix.cols)
    return matrix


def invert(matrix: Matrix, strict: bool = False) -> Matrix:
    """
    Invert a square matrix in place.

    Non-square and singular matrices are left unchanged unless `strict`,
    in which case DimensionError or SingularMatrixError is raised.
    """
    if not matrix.is_square:
        if strict:
            raise DimensionError(
                f"Cannot invert non-square {matrix.rows}x{matrix.cols} matrix"
            )
        logger.debug("invert: %dx%d matrix is not square, left unchanged",
                     matrix.rows, matrix.cols)
        return matrix

    size = matrix.rows
    values = matrix._values

    if size == 0:
        return matrix

    if size == 1:
        det = float(values[0])
        if det == 0:
            return _singular(matrix, det, strict)
        values[0] = 1.0 / det
        return matrix

    if size == 2:
        a, b, c, d = values.tolist()
        det = a * d - b * c
        if det == 0:
            return _singular(matrix, det, strict)
        values[:] = (d, -b, -c, a)
        scale_in_place(values, 1.0 / det)
        return matrix

    with matrix._lock:
        cache = _scratch(matrix)
        cofactors = cache.work._values
        for row in range(size):
            for col in range(size):
                fill_minor(values, size, row, col, cache.minor._values)
                sign = -1.0 if (row + col) % 2 else 1.0
                cofactors[row * size + col] = sign * determinant(cache.minor)

        # Expansion along the first row, reusing its cofactors
        det = 0.0
        for a, cofactor in zip(values[:size].tolist(), cofactors[:size].tolist()):
            det += a * cofactor

        if det == 0:
            return _singular(matrix, det, strict)

        adjugate = cache.work.transpose()
        scale_in_place(adjugate._values, 1.0 / det)
        return matrix.copy(adjugate)
