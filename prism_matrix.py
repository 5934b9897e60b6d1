# -*- coding: utf-8 -*-
"""
Prism: Dense matrices and color transforms
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: prism_matrix.py — Dense row-major matrix engine.

The Matrix type owns one C-contiguous numpy buffer of ``rows × columns``
elements. Elementwise arithmetic is vectorized through numpy; the loops that
numpy does not express directly (matrix product, minor extraction, Laplace
determinant, adjugate) are Numba kernels.

Conventions:
─────────────
  Construction:
    Matrix(r, c) is the generalized identity: 1 on (i, i) for i < min(r, c),
    0 elsewhere. A shape with a zero dimension collapses to the canonical
    empty 0×0 matrix.

  Determinant (Laplace expansion along row 0):
        det(A) = Σ_j (−1)^j · A[0][j] · det(minor(A, 0, j))
    with closed forms for 1×1 and 2×2. Cost is O(n!) for n×n; the engine is
    meant for the small matrices of color and geometry pipelines.

  Adjugate / inverse:
        adj(A)[i][j] = (−1)^(i+j) · det(minor(A, j, i))
        A⁻¹          = adj(A) / det(A)
    ``inverse()`` works in place and returns False for a singular matrix,
    leaving the buffer untouched.

  Color transforms (4×4, column vectors [R, G, B, 1]ᵀ):
        brightness(f):  diag(f, f, f, 1)
        saturation(s):  M[i][j] = L_j·(1 − s) + s·δ_ij   for i, j < 3
        hue(θ):         H = P · R_b(θ) · P⁻¹,  P = R_r · R_g · S
    where L is the per-matrix luma vector and S shears the luma axis onto
    the blue axis so that R_b rotates hue while preserving luminance.

References:
    [1] Haeberli, P., "Matrix Operations for Image Processing", SGI (1993)
    [2] ITU-R BT.709-6 (HDTV luma coefficients)
    [3] ITU-R BT.601-7 (NTSC / SDTV luma coefficients)
"""

from __future__ import annotations

import logging
import math
import warnings
from numbers import Number
from typing import Any, Dict, Final, Iterator, NamedTuple, Optional, Sequence, Tuple, TypeAlias, Union

import numpy as np
import numpy.typing as npt
from numba import njit

__all__ = [
    # --- Type Aliases ---
    "Scalar",

    # --- Constants ---
    "LUMA_PRESETS",
    "DEFAULT_LUMA_PRESET",
    "DYNAMIC_LUMA",
    "LUMA_SUM_TOLERANCE",

    # --- Errors ---
    "MatrixError",
    "DimensionMismatchError",
    "SingularMatrixError",

    # --- Classes ---
    "HueResult",
    "Matrix",
]

logger = logging.getLogger(__name__)

# --- Type Aliases ---
Scalar: TypeAlias = Union[int, float, complex, np.number]

# ═══════════════════════════════════════════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════════════════════════════════════════

# Luma weights (red, green, blue). Each triple sums to 1.
_HDTV_LUMA: Final[Tuple[float, float, float]] = (0.2126, 0.7152, 0.0722)
_LED_LUMA: Final[Tuple[float, float, float]] = (0.212, 0.701, 0.087)
_CRT_LUMA: Final[Tuple[float, float, float]] = (0.3086, 0.6094, 0.0820)
_NTSC_LUMA: Final[Tuple[float, float, float]] = (0.299, 0.587, 0.114)
_AVERAGE_LUMA: Final[Tuple[float, float, float]] = (1.0 / 3.0, 1.0 / 3.0, 1.0 / 3.0)

LUMA_PRESETS: Final[Dict[str, Tuple[float, float, float]]] = {
    "hdtv": _HDTV_LUMA,
    "led": _LED_LUMA,
    "crt": _CRT_LUMA,
    "ntsc": _NTSC_LUMA,
    "average": _AVERAGE_LUMA,
}
DEFAULT_LUMA_PRESET: Final[str] = "hdtv"

# Name reported by luma_preset() for a vector that matches no preset.
DYNAMIC_LUMA: Final[str] = "dynamic"

# Luma vectors further than this from unit sum trigger a RuntimeWarning.
LUMA_SUM_TOLERANCE: Final[float] = 1e-3

_INV_SQRT2: Final[float] = 1.0 / math.sqrt(2.0)
_INV_SQRT3: Final[float] = 1.0 / math.sqrt(3.0)
_SQRT2_SQRT3: Final[float] = math.sqrt(2.0) / math.sqrt(3.0)


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════

class MatrixError(Exception):
    """Base class for matrix engine errors."""


class DimensionMismatchError(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class SingularMatrixError(MatrixError, ArithmeticError):
    """A matrix with a zero determinant was used as a divisor."""


class HueResult(NamedTuple):
    """
    Hue rotation matrix together with the luma preset that produced it.

    ``luma_preset`` is one of the ``LUMA_PRESETS`` keys, or ``"dynamic"``
    when the luma vector was set by hand.
    """
    matrix: "Matrix"
    luma_preset: str


# ═══════════════════════════════════════════════════════════════════════════════
# Numba Kernels
# ═══════════════════════════════════════════════════════════════════════════════

@njit(cache=True)
def _matmul_kernel(a, b, out):
    """
    Dense product ``out += a @ b`` over C-contiguous 2-D arrays.

    ``out`` must be zero-filled with shape (a.rows, b.columns); the inner
    dimension is not checked here.
    """
    rows = a.shape[0]
    inner = a.shape[1]
    cols = b.shape[1]
    for i in range(rows):
        for j in range(cols):
            acc = out[i, j]
            for k in range(inner):
                acc += a[i, k] * b[k, j]
            out[i, j] = acc
    return out


@njit(cache=True)
def _minor_kernel(m, row, col):
    """Copy of ``m`` without ``row`` and ``col``, relative order preserved."""
    n_rows = m.shape[0]
    n_cols = m.shape[1]
    out = np.empty((n_rows - 1, n_cols - 1), dtype=m.dtype)
    r = 0
    for i in range(n_rows):
        if i == row:
            continue
        c = 0
        for j in range(n_cols):
            if j == col:
                continue
            out[r, c] = m[i, j]
            c += 1
        r += 1
    return out


# Self-recursive kernels: no on-disk cache.
@njit
def _determinant_kernel(m):
    """
    Laplace expansion along the first row of a square float64 or complex128 matrix.

    Requires n ≥ 1. 1×1 and 2×2 are closed forms and stop the recursion.
    """
    n = m.shape[0]
    if n == 1:
        return m[0, 0]
    if n == 2:
        return m[0, 0] * m[1, 1] - m[1, 0] * m[0, 1]

    total = np.zeros(1, dtype=m.dtype)[0]
    sign = 1.0
    for j in range(n):
        if m[0, j] != 0.0:
            total += sign * m[0, j] * _determinant_kernel(_minor_kernel(m, 0, j))
        sign = -sign
    return total


@njit
def _adjugate_kernel(m):
    """
    Transposed cofactor matrix of a square float64 or complex128 matrix (n ≥ 1).

    The cofactor of (j, i) is written to (i, j), which realizes the
    transpose without a second pass.
    """
    n = m.shape[0]
    out = np.empty((n, n), dtype=m.dtype)
    if n == 1:
        out[0, 0] = 1.0
        return out
    for i in range(n):
        for j in range(n):
            sign = 1.0 if (i + j) % 2 == 0 else -1.0
            out[i, j] = sign * _determinant_kernel(_minor_kernel(m, j, i))
    return out


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (Number, np.number)) and not isinstance(value, bool)


# ═══════════════════════════════════════════════════════════════════════════════
# Matrix
# ═══════════════════════════════════════════════════════════════════════════════

class Matrix:
    """
    Dense, row-major, resizable 2-D numeric matrix.

    Element access is ``m[row][column]`` (the row is a writable numpy view)
    or ``m[row, column]``. Indices are not validated beyond what numpy does
    natively; callers are expected to stay within ``rows()``/``columns()``.

    Copies are deep: no two matrices share a buffer. Each matrix carries its
    own luma vector, consumed by ``saturation()`` and ``hue()`` and inherited
    by every matrix derived from it.

    Parameters:
        rows: Number of rows (≥ 0).
        columns: Number of columns (≥ 0).
        dtype: numpy scalar type of the elements (default float64).

    Examples:
        m = Matrix(3, 3)              # 3×3 identity
        m[0][2] = 5.0
        d = m.determinant()
        if m.inverse():
            ...
    """

    __slots__ = ("_data", "_luma")

    # numpy defers to our reflected operators instead of broadcasting.
    __array_ufunc__ = None

    # Luma presets, exposed as named values on the type.
    HDTV_LUMA_RED: Final[float] = _HDTV_LUMA[0]
    HDTV_LUMA_GREEN: Final[float] = _HDTV_LUMA[1]
    HDTV_LUMA_BLUE: Final[float] = _HDTV_LUMA[2]

    LED_LUMA_RED: Final[float] = _LED_LUMA[0]
    LED_LUMA_GREEN: Final[float] = _LED_LUMA[1]
    LED_LUMA_BLUE: Final[float] = _LED_LUMA[2]

    CRT_LUMA_RED: Final[float] = _CRT_LUMA[0]
    CRT_LUMA_GREEN: Final[float] = _CRT_LUMA[1]
    CRT_LUMA_BLUE: Final[float] = _CRT_LUMA[2]

    NTSC_LUMA_RED: Final[float] = _NTSC_LUMA[0]
    NTSC_LUMA_GREEN: Final[float] = _NTSC_LUMA[1]
    NTSC_LUMA_BLUE: Final[float] = _NTSC_LUMA[2]

    AVERAGE_LUMA_RED: Final[float] = _AVERAGE_LUMA[0]
    AVERAGE_LUMA_GREEN: Final[float] = _AVERAGE_LUMA[1]
    AVERAGE_LUMA_BLUE: Final[float] = _AVERAGE_LUMA[2]

    def __init__(self, rows: int = 0, columns: int = 0, dtype: npt.DTypeLike = np.float64) -> None:
        if rows < 0 or columns < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got {rows}x{columns}")
        if rows == 0 or columns == 0:
            rows = columns = 0
        self._data: np.ndarray = np.eye(rows, columns, dtype=dtype)
        self._luma: np.ndarray = np.array(LUMA_PRESETS[DEFAULT_LUMA_PRESET], dtype=np.float64)

    # ──────────────────────────────────────────────────────────────────────
    # Construction helpers
    # ──────────────────────────────────────────────────────────────────────

    @classmethod
    def _from_array(cls, data: np.ndarray, luma: Optional[np.ndarray] = None) -> "Matrix":
        """Wrap ``data`` (taken over, not copied unless non-contiguous)."""
        m = cls.__new__(cls)
        if data.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got {data.ndim} dimension(s)")
        if data.shape[0] == 0 or data.shape[1] == 0:
            data = np.empty((0, 0), dtype=data.dtype)
        m._data = np.ascontiguousarray(data)
        if luma is None:
            m._luma = np.array(LUMA_PRESETS[DEFAULT_LUMA_PRESET], dtype=np.float64)
        else:
            m._luma = luma.copy()
        return m

    @classmethod
    def from_rows(cls, rows: Union[Sequence[Sequence[Scalar]], np.ndarray],
                  dtype: npt.DTypeLike = None) -> "Matrix":
        """
        Build a matrix from nested row sequences (or a 2-D array).

        Args:
            rows: Row-major values, e.g. ``[[1, 2], [3, 4]]``.
            dtype: Element type; defaults to float64.

        Returns:
            A new matrix owning a copy of the values.
        """
        data = np.array(rows, dtype=np.float64 if dtype is None else dtype)
        if data.size == 0:
            data = data.reshape(0, 0)
        return cls._from_array(data)

    @classmethod
    def identity(cls, size: int, dtype: npt.DTypeLike = np.float64) -> "Matrix":
        return cls(size, size, dtype=dtype)

    @classmethod
    def rotation_x(cls, angle: float) -> "Matrix":
        """4×4 homogeneous rotation about the X axis by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return cls._from_array(np.array([
            [1.0, 0.0, 0.0, 0.0],
            [0.0,   c,  -s, 0.0],
            [0.0,   s,   c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]))

    @classmethod
    def rotation_y(cls, angle: float) -> "Matrix":
        """4×4 homogeneous rotation about the Y axis by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return cls._from_array(np.array([
            [  c, 0.0,   s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [ -s, 0.0,   c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]))

    @classmethod
    def rotation_z(cls, angle: float) -> "Matrix":
        """4×4 homogeneous rotation about the Z axis by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return cls._from_array(np.array([
            [  c,  -s, 0.0, 0.0],
            [  s,   c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]))

    def _derive(self, data: np.ndarray) -> "Matrix":
        """New matrix over ``data`` inheriting this matrix's luma vector."""
        return Matrix._from_array(data, self._luma)

    def copy(self) -> "Matrix":
        return self._derive(self._data.copy())

    def __copy__(self) -> "Matrix":
        return self.copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Matrix":
        return self.copy()

    # ──────────────────────────────────────────────────────────────────────
    # Storage & access
    # ──────────────────────────────────────────────────────────────────────

    def rows(self) -> int:
        return self._data.shape[0]

    def columns(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._data.shape[0], self._data.shape[1])

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def __getitem__(self, key: Any) -> Any:
        # m[r] is a writable row view so that m[r][c] = v stores in place.
        return self._data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[key] = value

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._data)

    def __array__(self, dtype: npt.DTypeLike = None, copy: Optional[bool] = None) -> np.ndarray:
        """
        numpy conversion protocol.

        ``copy=True`` always copies, ``copy=None`` copies only for a dtype
        change, ``copy=False`` returns the live buffer and raises
        ``ValueError`` when a dtype change would need a copy.
        """
        if copy:
            return np.array(self._data, dtype=dtype, copy=True)
        if dtype is not None and np.dtype(dtype) != self._data.dtype:
            if copy is False:
                raise ValueError(
                    f"Cannot convert a {self._data.dtype} matrix to {np.dtype(dtype)} without copying"
                )
            return self._data.astype(dtype)
        return self._data

    def to_array(self) -> np.ndarray:
        """Copy of the elements as a (rows, columns) numpy array."""
        return self._data.copy()

    def swap(self, other: "Matrix") -> None:
        """Exchange buffers, dimensions and luma vectors with ``other`` (O(1))."""
        self._data, other._data = other._data, self._data
        self._luma, other._luma = other._luma, self._luma

    def clear(self) -> None:
        """Zero every element; the shape is unchanged."""
        self._data.fill(0)

    # ──────────────────────────────────────────────────────────────────────
    # Comparison & rendering
    # ──────────────────────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def allclose(self, other: "Matrix", tolerance: float = 1e-4) -> bool:
        """True when shapes match and every element differs by at most ``tolerance``."""
        return self.shape == other.shape and bool(
            np.allclose(self._data, other._data, rtol=0.0, atol=tolerance)
        )

    def __str__(self) -> str:
        if self._data.size == 0:
            return "[]"
        cells = [[format(v.item(), ".6g") for v in row] for row in self._data]
        width = max(len(cell) for row in cells for cell in row)
        lines = ["  [" + ", ".join(cell.rjust(width) for cell in row) + "]" for row in cells]
        return "[\n" + "\n".join(lines) + "\n]"

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows()}, columns={self.columns()}, dtype={self._data.dtype})"

    # ──────────────────────────────────────────────────────────────────────
    # Additive operators
    # ──────────────────────────────────────────────────────────────────────

    def _require_same_shape(self, other: "Matrix", verb: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(
                f"Cannot {verb} a {self.rows()}x{self.columns()} matrix and a "
                f"{other.rows()}x{other.columns()} matrix"
            )

    def __iadd__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            self._require_same_shape(other, "add")
            np.add(self._data, other._data, out=self._data, casting="unsafe")
        elif _is_scalar(other):
            np.add(self._data, other, out=self._data, casting="unsafe")
        else:
            return NotImplemented
        return self

    def __add__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            self._require_same_shape(other, "add")
            return self._derive(self._data + other._data)
        if _is_scalar(other):
            return self._derive(self._data + other)
        return NotImplemented

    def __radd__(self, other: Scalar) -> "Matrix":
        if _is_scalar(other):
            return self._derive(other + self._data)
        return NotImplemented

    def __isub__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            self._require_same_shape(other, "subtract")
            np.subtract(self._data, other._data, out=self._data, casting="unsafe")
        elif _is_scalar(other):
            np.subtract(self._data, other, out=self._data, casting="unsafe")
        else:
            return NotImplemented
        return self

    def __sub__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            self._require_same_shape(other, "subtract")
            return self._derive(self._data - other._data)
        if _is_scalar(other):
            return self._derive(self._data - other)
        return NotImplemented

    def __rsub__(self, other: Scalar) -> "Matrix":
        if _is_scalar(other):
            return self._derive(other - self._data)
        return NotImplemented

    def __neg__(self) -> "Matrix":
        return self._derive(-self._data)

    def __pos__(self) -> "Matrix":
        return self.copy()

    # ──────────────────────────────────────────────────────────────────────
    # Multiplicative operators
    # ──────────────────────────────────────────────────────────────────────

    def _multiply(self, other: "Matrix") -> "Matrix":
        if self.columns() != other.rows():
            raise DimensionMismatchError(
                f"Cannot multiply a {self.rows()}x{self.columns()} matrix by a "
                f"{other.rows()}x{other.columns()} matrix (inner dimensions differ)"
            )
        dtype = np.result_type(self._data.dtype, other._data.dtype)
        out = np.zeros((self.rows(), other.columns()), dtype=dtype)
        _matmul_kernel(
            np.ascontiguousarray(self._data, dtype=dtype),
            np.ascontiguousarray(other._data, dtype=dtype),
            out,
        )
        return self._derive(out)

    def _divide(self, other: "Matrix") -> "Matrix":
        if other.rows() != other.columns():
            raise DimensionMismatchError(
                f"Cannot divide by a non-square {other.rows()}x{other.columns()} matrix"
            )
        inverse = other.copy()
        if not inverse.inverse():
            raise SingularMatrixError("Cannot divide by a singular matrix (determinant is 0)")
        return self._multiply(inverse)

    def __imul__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            self._data = self._multiply(other)._data
        elif _is_scalar(other):
            np.multiply(self._data, other, out=self._data, casting="unsafe")
        else:
            return NotImplemented
        return self

    def __mul__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            return self._multiply(other)
        if _is_scalar(other):
            return self._derive(self._data * other)
        return NotImplemented

    def __rmul__(self, other: Scalar) -> "Matrix":
        if _is_scalar(other):
            return self._derive(other * self._data)
        return NotImplemented

    def __itruediv__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            # _divide() raises before anything is written to self.
            self._data = self._divide(other)._data
        elif _is_scalar(other):
            np.divide(self._data, other, out=self._data, casting="unsafe")
        else:
            return NotImplemented
        return self

    def __truediv__(self, other: Union["Matrix", Scalar]) -> "Matrix":
        if isinstance(other, Matrix):
            return self._divide(other)
        if _is_scalar(other):
            return self._derive(self._data / other)
        return NotImplemented

    # ──────────────────────────────────────────────────────────────────────
    # Structural transforms
    # ──────────────────────────────────────────────────────────────────────

    def transpose(self) -> "Matrix":
        """New ``columns × rows`` matrix with ``result[j][i] = self[i][j]``."""
        return self._derive(self._data.T.copy())

    def minor_matrix(self, row: int, column: int) -> "Matrix":
        """
        Matrix formed by deleting ``row`` and ``column``.

        Meant for square matrices; indices are not checked.
        """
        return self._derive(_minor_kernel(self._data, row, column))

    # ──────────────────────────────────────────────────────────────────────
    # Determinant, adjugate, inverse
    # ──────────────────────────────────────────────────────────────────────

    def _inexact_data(self) -> np.ndarray:
        # float64 for real and integer elements, complex128 for complex ones
        dtype = np.result_type(self._data.dtype, np.float64)
        return np.ascontiguousarray(self._data, dtype=dtype)

    def determinant(self) -> Union[float, complex]:
        """
        Determinant by Laplace expansion along the first row.

        Square matrices only. The empty matrix has determinant 1. A complex
        matrix has a complex determinant.
        """
        if self._data.size == 0:
            return 1.0
        det = _determinant_kernel(self._inexact_data())
        if np.iscomplexobj(det):
            return complex(det)
        return float(det)

    def adjugate(self) -> "Matrix":
        """Transpose of the cofactor matrix (square matrices only)."""
        data = self._inexact_data()
        if data.size == 0:
            return self._derive(np.empty((0, 0), dtype=data.dtype))
        return self._derive(_adjugate_kernel(data))

    def inverse(self) -> bool:
        """
        Invert in place.

        Returns:
            True on success. False when the determinant is 0, in which case
            the matrix is left exactly as it was.
        """
        det = self.determinant()
        if det == 0.0:
            logger.debug("inverse(): %dx%d matrix is singular", self.rows(), self.columns())
            return False
        self._data = self.adjugate()._data * (1.0 / det)
        return True

    # ──────────────────────────────────────────────────────────────────────
    # Luma vector
    # ──────────────────────────────────────────────────────────────────────

    def set_luma_vector(self, red: float, green: float, blue: float) -> None:
        """Set the (red, green, blue) weights used by saturation() and hue()."""
        total = red + green + blue
        if abs(total - 1.0) > LUMA_SUM_TOLERANCE:
            warnings.warn(
                f"Luma weights ({red}, {green}, {blue}) sum to {total:.6f}, not 1.0",
                RuntimeWarning,
                stacklevel=2,
            )
        self._luma = np.array([red, green, blue], dtype=np.float64)

    def set_luma_preset(self, name: str) -> None:
        """
        Select one of the ``LUMA_PRESETS`` by name (case-insensitive).

        Raises:
            KeyError: If the name is not a known preset.
        """
        key = name.lower()
        if key not in LUMA_PRESETS:
            raise KeyError(
                f"Unknown luma preset '{name}'. Expected one of: {', '.join(LUMA_PRESETS)}"
            )
        self.set_luma_vector(*LUMA_PRESETS[key])

    def get_luma_vector(self) -> "Matrix":
        """Luma weights as a 4×1 column matrix ``[Lr, Lg, Lb, 0]ᵀ``."""
        return self._derive(np.array([[self._luma[0]], [self._luma[1]], [self._luma[2]], [0.0]]))

    @property
    def luma(self) -> Tuple[float, float, float]:
        return (float(self._luma[0]), float(self._luma[1]), float(self._luma[2]))

    def luma_preset(self) -> str:
        """Name of the preset matching the current luma vector, else ``"dynamic"``."""
        for name, weights in LUMA_PRESETS.items():
            if all(math.isclose(a, b, rel_tol=0.0, abs_tol=1e-12) for a, b in zip(self.luma, weights)):
                return name
        return DYNAMIC_LUMA

    # ──────────────────────────────────────────────────────────────────────
    # Color transforms
    # ──────────────────────────────────────────────────────────────────────

    def brightness(self, factor: float) -> "Matrix":
        """4×4 matrix scaling R, G and B by ``factor``; the 4th channel stays 1."""
        data = np.eye(4, dtype=np.float64)
        data[0, 0] = data[1, 1] = data[2, 2] = factor
        return self._derive(data)

    def saturation(self, saturation: float) -> "Matrix":
        """
        4×4 saturation matrix for the current luma vector.

        ``saturation=1`` is the identity, ``saturation=0`` projects every
        channel onto the luma-weighted gray. Values outside [0, 1]
        extrapolate linearly.
        """
        data = np.eye(4, dtype=np.float64)
        data[:3, :3] = np.tile(self._luma * (1.0 - saturation), (3, 1)) + saturation * np.eye(3)
        return self._derive(data)

    def hue(self, angle: float) -> "Matrix":
        """4×4 hue rotation by ``angle`` radians around the luma axis."""
        return self.hue_with_diagnostics(angle).matrix

    def hue_with_diagnostics(self, angle: float) -> HueResult:
        """
        Hue rotation matrix plus the name of the luma preset it was built with.

        The rotation is conjugated into a basis where the luma axis is the
        blue axis:  H = P · R_b(angle) · P⁻¹  with  P = R_r · R_g · S.
        """
        # R_r: rotate the red axis by 45°
        r_r = self._derive(np.eye(4))
        r_r[1, 1] = _INV_SQRT2
        r_r[1, 2] = _INV_SQRT2
        r_r[2, 1] = -_INV_SQRT2
        r_r[2, 2] = _INV_SQRT2

        # R_g: rotate the green axis so gray lands on blue
        r_g = self._derive(np.eye(4))
        r_g[0, 0] = _SQRT2_SQRT3
        r_g[0, 2] = _INV_SQRT3
        r_g[2, 0] = -_INV_SQRT3
        r_g[2, 2] = _SQRT2_SQRT3

        r_rg = r_r * r_g

        # luma vector in the rotated basis
        sm = r_rg * self.get_luma_vector()

        # S: shear the luma axis onto the blue axis
        skew = self._derive(np.eye(4))
        skew[0, 2] = sm[0, 0] / sm[2, 0]
        skew[1, 2] = sm[1, 0] / sm[2, 0]

        p = r_rg * skew

        # R_b: the user-facing rotation of the red/green plane
        rot_cos, rot_sin = math.cos(angle), math.sin(angle)
        r_b = self._derive(np.eye(4))
        r_b[0, 0] = rot_cos
        r_b[0, 1] = rot_sin
        r_b[1, 0] = -rot_sin
        r_b[1, 1] = rot_cos

        return HueResult(p * r_b / p, self.luma_preset())
