"""
Tests for determinant and inverse by cofactor expansion.
"""

import numpy as np
import pytest

from matrixmath import DimensionError, Matrix, SingularMatrixError
from matrixmath.core.compute.tolerances import CPU_FP64, select_tolerance


# ═══════════════════════════════════════════════════════════════════════
# Determinant
# ═══════════════════════════════════════════════════════════════════════


class TestDeterminant:

    def test_non_square_is_none(self):
        assert Matrix(3, 2).set_data([3, 0, 2, 0, 0, 1]).get_determinant() is None

    def test_empty_matrix(self):
        assert Matrix(0).get_determinant() == 1.0

    def test_1x1(self):
        assert Matrix(1, 1).set_data([3]).get_determinant() == 3

    def test_2x2(self):
        assert Matrix(2, 2).set_data([4, 6, 3, 8]).get_determinant() == 14

    def test_3x3(self):
        m = Matrix(3, 3).set_data([6, 1, 1, 4, -2, 5, 2, 8, 7])
        assert m.get_determinant() == -306

    def test_4x4(self):
        m = Matrix(4, 4).set_data([6, 1, 1, 3, 4, -2, 5, 6, 2, 8, 7, -3, 6, 2, 4, 1])
        assert m.get_determinant() == 708

    def test_returns_python_float(self):
        assert isinstance(Matrix(2).get_determinant(), float)

    def test_singular(self):
        assert Matrix(2, 2).set_data([3, 4, 6, 8]).get_determinant() == 0

    @pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 6])
    def test_identity(self, size):
        assert Matrix.identity(size).get_determinant() == 1

    def test_matrix_unchanged(self):
        data = [6, 1, 1, 3, 4, -2, 5, 6, 2, 8, 7, -3, 6, 2, 4, 1]
        m = Matrix(4, 4).set_data(data)
        m.get_determinant()
        assert list(m) == data

    @pytest.mark.parametrize("size", [4, 5, 6])
    def test_matches_numpy(self, rng, size):
        data = rng.standard_normal((size, size))
        det = Matrix.from_rows(data).get_determinant()
        tol = select_tolerance(size)
        np.testing.assert_allclose(det, np.linalg.det(data), rtol=tol.rtol, atol=tol.atol)

    def test_swapping_rows_flips_sign(self, rng):
        data = rng.integers(-5, 6, (5, 5)).astype(float)
        swapped = data[[1, 0, 2, 3, 4]]
        assert (Matrix.from_rows(swapped).get_determinant()
                == -Matrix.from_rows(data).get_determinant())


class TestScratchCache:

    def test_scratch_reused_between_calls(self):
        m = Matrix.from_rows(np.arange(25.0).reshape(5, 5))
        m.get_determinant()
        minor = m._scratch.minor
        m.get_determinant()
        assert m._scratch.minor is minor
        assert minor.shape == (4, 4)

    def test_scratch_rebuilt_after_resize(self):
        m = Matrix(4, 4).set_data([6, 1, 1, 3, 4, -2, 5, 6, 2, 8, 7, -3, 6, 2, 4, 1])
        assert m.get_determinant() == 708
        m.set_data(np.eye(5) * 2, 5, 5)
        assert m.get_determinant() == 32
        assert m._scratch.size == 5

    def test_closed_forms_need_no_scratch(self):
        m = Matrix(3, 3).set_data([6, 1, 1, 4, -2, 5, 2, 8, 7])
        m.get_determinant()
        assert m._scratch is None


# ═══════════════════════════════════════════════════════════════════════
# Inverse
# ═══════════════════════════════════════════════════════════════════════


class TestInvert:

    def test_3x3_exact(self):
        m = Matrix(3, 3).set_data([3, 0, 2, 2, 0, -2, 0, 1, 1])
        m.invert()
        assert list(m) == [0.2, 0.2, 0, -0.2, 0.3, 1, 0.2, -0.3, 0]

    def test_2x2_exact(self):
        m = Matrix(2, 2).set_data([4, 7, 2, 6])
        m.invert()
        assert list(m) == [0.6, -0.7, -0.2, 0.4]

    def test_1x1(self):
        m = Matrix(1, 1).set_data([4])
        m.invert()
        assert m[0] == 0.25

    def test_returns_instance(self):
        m = Matrix(3, 3).set_data([3, 0, 2, 2, 0, -2, 0, 1, 1])
        assert m.invert() is m

    def test_non_square_unchanged(self):
        m = Matrix(3, 2).set_data([3, 0, 2, 0, 0, 1])
        m.invert()
        assert m.shape == (3, 2)
        assert list(m) == [3, 0, 2, 0, 0, 1]

    def test_singular_2x2_unchanged(self):
        m = Matrix(2, 2).set_data([3, 4, 6, 8])
        determinant = m.get_determinant()
        m.invert()
        assert determinant == 0
        assert list(m) == [3, 4, 6, 8]

    def test_singular_3x3_unchanged(self, singular_3x3):
        before = singular_3x3.to_array()
        singular_3x3.invert()
        np.testing.assert_array_equal(singular_3x3.to_array(), before)

    def test_singular_1x1_unchanged(self):
        m = Matrix(1, 1).set_data([0])
        m.invert()
        assert m[0] == 0

    def test_empty_matrix(self):
        m = Matrix(0)
        m.invert()
        assert m.shape == (0, 0)

    def test_identity_is_its_own_inverse(self):
        assert Matrix.identity(4).invert().is_identity()

    @pytest.mark.parametrize("size", [2, 3, 4, 5])
    def test_product_with_inverse_is_identity(self, well_conditioned, size):
        m = well_conditioned(size)
        product = m.clone().multiply(m.clone().invert())
        assert product.allclose(Matrix.identity(size), CPU_FP64)

    @pytest.mark.parametrize("size", [2, 3, 4, 5])
    def test_double_inverse_restores(self, well_conditioned, size):
        m = well_conditioned(size)
        assert m.clone().invert().invert().allclose(m, CPU_FP64)


class TestStrictInvert:

    def test_singular_raises(self, singular_3x3):
        with pytest.raises(SingularMatrixError) as exc_info:
            singular_3x3.invert(strict=True)
        assert exc_info.value.determinant == 0
        assert exc_info.value.size == 3

    def test_non_square_raises(self):
        with pytest.raises(DimensionError, match="non-square"):
            Matrix(2, 3).invert(strict=True)

    def test_invertible_unaffected(self):
        m = Matrix(2, 2).set_data([4, 7, 2, 6])
        assert list(m.invert(strict=True)) == [0.6, -0.7, -0.2, 0.4]
