# -*- coding: utf-8 -*-
"""
Prism: Dense matrices and color transforms
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Construction, element access, copy/swap/clear semantics and rendering.
"""

import copy

import numpy as np
import pytest

from prism_matrix import Matrix


class TestConstruction:

    def test_default_is_empty(self):
        empty = Matrix()
        assert empty.rows() == 0
        assert empty.columns() == 0

        duplicate = Matrix(empty.rows(), empty.columns())
        assert duplicate.shape == (0, 0)
        assert duplicate == empty

    @pytest.mark.parametrize("size", [1, 2, 3, 4, 7])
    def test_square_is_identity(self, size):
        m = Matrix(size, size)
        assert m.shape == (size, size)
        np.testing.assert_array_equal(m.to_array(), np.eye(size))

    @pytest.mark.parametrize("rows, columns", [(2, 5), (5, 2), (1, 4), (6, 2)])
    def test_rectangular_is_generalized_identity(self, rows, columns):
        m = Matrix(rows, columns)
        assert m.rows() == rows
        assert m.columns() == columns
        for i in range(rows):
            for j in range(columns):
                assert m[i][j] == (1.0 if i == j else 0.0)

    @pytest.mark.parametrize("rows, columns", [(0, 5), (3, 0)])
    def test_zero_dimension_collapses_to_empty(self, rows, columns):
        assert Matrix(rows, columns).shape == (0, 0)

    def test_negative_dimension_rejected(self):
        with pytest.raises(ValueError):
            Matrix(-1, 2)

    def test_from_rows(self):
        m = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
        assert m.shape == (2, 3)
        assert m.dtype == np.float64
        assert m[1][2] == 6.0

    def test_from_rows_empty(self):
        assert Matrix.from_rows([]).shape == (0, 0)

    def test_from_rows_rejects_ragged_rows(self):
        with pytest.raises(ValueError):
            Matrix.from_rows([[1, 2], [3]])

    def test_identity_helper(self):
        assert Matrix.identity(3) == Matrix(3, 3)

    def test_integer_dtype(self):
        m = Matrix(2, 2, dtype=np.int64)
        assert m.dtype == np.int64
        assert m[1][1] == 1


class TestAccess:

    def test_chained_index_writes_through(self, rng):
        m = Matrix(2, 2)
        values = rng.uniform(-5.0, 5.0, size=(2, 2))
        for i in range(2):
            for j in range(2):
                m[i][j] = values[i, j]
        for i in range(2):
            for j in range(2):
                assert m[i][j] == values[i, j]
                assert m[i, j] == values[i, j]

    def test_tuple_index_writes_through(self):
        m = Matrix(3, 3)
        m[2, 0] = 7.5
        assert m[2][0] == 7.5

    def test_iteration_yields_rows(self):
        m = Matrix.from_rows([[1, 2], [3, 4]])
        assert [list(row) for row in m] == [[1.0, 2.0], [3.0, 4.0]]

    def test_to_array_is_a_copy(self):
        m = Matrix(2, 2)
        arr = m.to_array()
        arr[0, 0] = 42.0
        assert m[0][0] == 1.0

    def test_numpy_conversion(self):
        m = Matrix.from_rows([[1, 2], [3, 4]])
        np.testing.assert_array_equal(np.asarray(m), [[1.0, 2.0], [3.0, 4.0]])

    def test_array_without_copy_shares_buffer(self):
        m = Matrix(2, 2)
        view = m.__array__(copy=False)
        view[0, 0] = 5.0
        assert m[0][0] == 5.0

    def test_array_with_copy_is_independent(self):
        m = Matrix(2, 2)
        arr = m.__array__(copy=True)
        arr[0, 0] = 5.0
        assert m[0][0] == 1.0

    def test_array_dtype_conversion(self):
        m = Matrix.from_rows([[1.5, 2], [3, 4]])
        arr = np.asarray(m, dtype=np.int64)
        assert arr.dtype == np.int64
        np.testing.assert_array_equal(arr, [[1, 2], [3, 4]])
        assert m[0][0] == 1.5

    def test_array_without_copy_rejects_dtype_change(self):
        with pytest.raises(ValueError, match="without copying"):
            Matrix(2, 2).__array__(np.int64, copy=False)


class TestCopySwapClear:

    def test_copy_is_deep(self, random_matrix):
        m = random_matrix(3, 3)
        snapshot = m.to_array()
        duplicate = m.copy()

        m.clear()

        np.testing.assert_array_equal(m.to_array(), np.zeros((3, 3)))
        np.testing.assert_array_equal(duplicate.to_array(), snapshot)

    @pytest.mark.parametrize("copier", [copy.copy, copy.deepcopy])
    def test_copy_module(self, random_matrix, copier):
        m = random_matrix(2, 4)
        duplicate = copier(m)
        assert duplicate == m
        duplicate[0][0] += 1.0
        assert duplicate != m

    def test_copy_keeps_luma(self):
        m = Matrix(4, 4)
        m.set_luma_preset("crt")
        assert m.copy().luma_preset() == "crt"

    def test_clear_keeps_shape(self, random_matrix):
        m = random_matrix(2, 5)
        m.clear()
        assert m.shape == (2, 5)
        assert not m.to_array().any()

    def test_swap(self, random_matrix):
        a = random_matrix(2, 2)
        b = Matrix(3, 3)
        b.set_luma_preset("ntsc")
        a_values = a.to_array()

        a.swap(b)

        assert a.shape == (3, 3)
        assert a == Matrix(3, 3)
        assert a.luma_preset() == "ntsc"
        assert b.shape == (2, 2)
        np.testing.assert_array_equal(b.to_array(), a_values)
        assert b.luma_preset() == "hdtv"

    def test_swap_after_clear(self, random_matrix):
        m = random_matrix(2, 2)
        values = m.to_array()
        cleared = m.copy()
        cleared.clear()

        cleared.swap(m)

        np.testing.assert_array_equal(cleared.to_array(), values)
        np.testing.assert_array_equal(m.to_array(), np.zeros((2, 2)))


class TestComparisonAndRendering:

    def test_equality_requires_same_shape(self):
        assert Matrix(2, 2) != Matrix(2, 3)
        assert Matrix(2, 2) == Matrix.from_rows([[1, 0], [0, 1]])

    def test_equality_with_other_types(self):
        assert Matrix(1, 1) != 1.0

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Matrix(2, 2))

    def test_allclose(self):
        a = Matrix(2, 2)
        b = a + 0.00005
        assert a.allclose(b)
        assert not a.allclose(a + 0.001)
        assert not a.allclose(Matrix(3, 3))

    def test_str_renders_rows(self):
        text = str(Matrix.from_rows([[1, -2.5], [3, 4]]))
        lines = text.splitlines()
        assert lines[0] == "["
        assert lines[-1] == "]"
        assert len(lines) == 4
        assert "-2.5" in lines[1]

    def test_str_empty(self):
        assert str(Matrix()) == "[]"

    def test_repr(self):
        assert repr(Matrix(2, 3)) == "Matrix(rows=2, columns=3, dtype=float64)"
