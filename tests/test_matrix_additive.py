# -*- coding: utf-8 -*-
"""
Prism: Dense matrices and color transforms
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Scalar and elementwise addition / subtraction.
"""

import numpy as np
import pytest

from prism_matrix import DimensionMismatchError, Matrix


class TestScalar:

    def test_iadd_scalar_in_place(self, random_matrix):
        a = random_matrix(3, 3)
        before = a.to_array()
        alias = a

        a += 2.5

        assert alias is a
        np.testing.assert_allclose(a.to_array(), before + 2.5)

    def test_add_scalar_returns_new_matrix(self, random_matrix):
        a = random_matrix(4, 4)
        before = a.to_array()

        b = a + 3.0

        assert b is not a
        np.testing.assert_array_equal(a.to_array(), before)
        np.testing.assert_allclose(b.to_array(), before + 3.0)

    def test_scalar_on_the_left(self, random_matrix):
        a = random_matrix(2, 3)
        assert 1.5 + a == a + 1.5

    def test_isub_scalar(self, random_matrix):
        a = random_matrix(2, 2)
        before = a.to_array()
        a -= 0.75
        np.testing.assert_allclose(a.to_array(), before - 0.75)

    def test_sub_scalar(self, random_matrix):
        a = random_matrix(3, 2)
        before = a.to_array()
        b = a - 4.0
        np.testing.assert_array_equal(a.to_array(), before)
        np.testing.assert_allclose(b.to_array(), before - 4.0)

    def test_scalar_minus_matrix(self, random_matrix):
        a = random_matrix(3, 3)
        assert (10.0 - a).allclose(-(a - 10.0), 1e-12)

    def test_negate(self, random_matrix):
        a = random_matrix(2, 2)
        np.testing.assert_array_equal((-a).to_array(), -a.to_array())
        assert (+a) == a and (+a) is not a

    def test_integer_matrix_keeps_dtype_in_place(self):
        a = Matrix(2, 2, dtype=np.int64)
        a += 3
        assert a.dtype == np.int64
        np.testing.assert_array_equal(a.to_array(), [[4, 3], [3, 4]])


class TestElementwise:

    @pytest.mark.parametrize("rows, columns", [(2, 2), (3, 3), (4, 4), (2, 5)])
    def test_add(self, random_matrix, rows, columns):
        a = random_matrix(rows, columns)
        b = random_matrix(rows, columns)
        c = a + b
        for i in range(rows):
            for j in range(columns):
                assert c[i][j] == a[i][j] + b[i][j]

    def test_iadd(self, random_matrix):
        a = random_matrix(3, 4)
        b = random_matrix(3, 4)
        expected = a.to_array() + b.to_array()
        a += b
        np.testing.assert_allclose(a.to_array(), expected)

    def test_sub(self, random_matrix):
        a = random_matrix(4, 4)
        b = random_matrix(4, 4)
        c = a - b
        np.testing.assert_allclose(c.to_array(), a.to_array() - b.to_array())

    def test_isub(self, random_matrix):
        a = random_matrix(2, 2)
        b = random_matrix(2, 2)
        expected = a.to_array() - b.to_array()
        a -= b
        np.testing.assert_allclose(a.to_array(), expected)

    def test_commutative(self, random_matrix):
        a = random_matrix(3, 3)
        b = random_matrix(3, 3)
        assert (a + b).allclose(b + a)

    def test_associative(self, random_matrix):
        a = random_matrix(4, 2)
        b = random_matrix(4, 2)
        c = random_matrix(4, 2)
        assert ((a + b) + c).allclose(a + (b + c))

    def test_add_then_subtract_restores(self, random_matrix):
        a = random_matrix(3, 3)
        b = random_matrix(3, 3)
        assert ((a + b) - b).allclose(a)


class TestShapeErrors:

    @pytest.mark.parametrize("op", [
        lambda a, b: a + b,
        lambda a, b: a - b,
    ])
    def test_mismatch_raises(self, op):
        with pytest.raises(DimensionMismatchError):
            op(Matrix(2, 2), Matrix(3, 3))

    def test_mismatch_is_a_value_error(self):
        with pytest.raises(ValueError, match="2x3"):
            Matrix(2, 3) + Matrix(3, 2)

    def test_in_place_mismatch_leaves_operand_untouched(self, random_matrix):
        a = random_matrix(2, 2)
        before = a.to_array()
        with pytest.raises(DimensionMismatchError):
            a += Matrix(2, 3)
        with pytest.raises(DimensionMismatchError):
            a -= Matrix(1, 1)
        np.testing.assert_array_equal(a.to_array(), before)

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            Matrix(2, 2) + "1"
