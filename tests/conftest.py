# -*- coding: utf-8 -*-
"""
Prism: Dense matrices and color transforms
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Shared fixtures for the matrix test suite.
"""

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from prism_matrix import Matrix

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20260417)


@pytest.fixture
def random_matrix(rng: np.random.Generator) -> Callable[[int, int], Matrix]:
    """Factory for matrices with uniform entries in [-10, 10)."""
    def make(rows: int, columns: int) -> Matrix:
        return Matrix.from_rows(rng.uniform(-10.0, 10.0, size=(rows, columns)))
    return make


@pytest.fixture
def invertible_matrix(random_matrix: Callable[[int, int], Matrix]) -> Callable[[int], Matrix]:
    """Factory for square matrices that are guaranteed to invert."""
    def make(size: int) -> Matrix:
        while True:
            m = random_matrix(size, size)
            if abs(m.determinant()) > 1e-3:
                return m
    return make


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR
