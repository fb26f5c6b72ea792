"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_max_ndim / check_2d: dimensionality checks
    - check_dimension: row and column counts
    - check_power: matrix exponents
"""

import numpy as np
import pytest

from matrixmath.core.exceptions import DimensionError, ValidationError
from matrixmath.core.validation import (
    check_2d,
    check_array,
    check_dimension,
    check_max_ndim,
    check_power,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "values")
        assert isinstance(result, np.ndarray)
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_int_array_promoted_to_float(self):
        result = check_array(np.array([1, 2, 3], dtype=np.int32), "values")
        assert np.issubdtype(result.dtype, np.floating)

    def test_float_array_passthrough(self):
        arr = np.array([1.0, 2.0], dtype=np.float64)
        assert check_array(arr, "values").dtype == np.float64

    def test_nested_list_to_2d(self):
        result = check_array([[1, 2], [3, 4]], "rows")
        assert result.shape == (2, 2)

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "values")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b"], "values")

    def test_rejects_complex(self):
        with pytest.raises(ValidationError, match="complex"):
            check_array([1 + 2j, 3], "values")

    def test_error_message_includes_name(self):
        with pytest.raises(ValidationError, match="my_var"):
            check_array(["a"], "my_var")

    def test_empty_array(self):
        result = check_array([], "values")
        assert len(result) == 0


# ═══════════════════════════════════════════════════════════════════════
# Dimensionality
# ═══════════════════════════════════════════════════════════════════════


class TestNdim:

    def test_max_ndim_accepts_lower(self):
        check_max_ndim(np.zeros(3), 2, "values")
        check_max_ndim(np.zeros((2, 2)), 2, "values")

    def test_max_ndim_rejects_higher(self):
        with pytest.raises(DimensionError, match="at most 2D"):
            check_max_ndim(np.zeros((2, 2, 2)), 2, "values")

    def test_check_2d_passes(self):
        check_2d(np.zeros((2, 3)), "rows")

    def test_check_2d_rejects_1d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "rows")


# ═══════════════════════════════════════════════════════════════════════
# check_dimension / check_power
# ═══════════════════════════════════════════════════════════════════════


class TestCheckDimension:

    def test_accepts_zero_and_positive(self):
        assert check_dimension(0, "rows") == 0
        assert check_dimension(4, "rows") == 4

    def test_accepts_numpy_integer(self):
        assert check_dimension(np.int64(3), "rows") == 3

    def test_rejects_negative(self):
        with pytest.raises(ValidationError, match="non-negative"):
            check_dimension(-1, "rows")

    def test_rejects_float(self):
        with pytest.raises(ValidationError, match="cols"):
            check_dimension(2.0, "cols")

    def test_rejects_bool(self):
        with pytest.raises(ValidationError):
            check_dimension(True, "rows")


class TestCheckPower:

    def test_accepts_non_negative(self):
        assert check_power(0, "exponent") == 0
        assert check_power(5, "exponent") == 5

    def test_rejects_negative(self):
        with pytest.raises(ValidationError, match="invert"):
            check_power(-2, "exponent")

    def test_rejects_fraction(self):
        with pytest.raises(ValidationError, match="integer power"):
            check_power(0.5, "exponent")
