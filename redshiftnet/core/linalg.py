"""Matrix helpers built on :class:`~redshiftnet.core.ndarray.NDArray`.

Every operation works on rank-2 arrays; a column vector is an ``(n, 1)``
matrix. Results are always freshly allocated, and arithmetic results have a
floating-point element type. Binary operations validate their operand shapes
and raise :class:`~redshiftnet.core.errors.ShapeError` on a mismatch instead
of computing a partial result.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from .errors import ShapeError
from .ndarray import NDArray

UnaryFn = Callable[[float], float]


def _require_matrix(a: NDArray, op: str) -> None:
    if a.ndim != 2:
        raise ShapeError(f"{op} expects a rank-2 array, got shape {a.shape}")


def _float_dtype(*arrays: NDArray) -> np.dtype:
    return np.result_type(*(a.dtype for a in arrays), np.float64)


def _require_same_shape(a: NDArray, b: NDArray, op: str) -> None:
    _require_matrix(a, op)
    _require_matrix(b, op)
    if a.shape != b.shape:
        raise ShapeError(f"{op} requires equal shapes, got {a.shape} and {b.shape}")


def product(a: NDArray, b: NDArray) -> NDArray:
    """Return the matrix product ``a @ b`` of shape ``(a.rows, b.cols)``."""

    _require_matrix(a, "product")
    _require_matrix(b, "product")
    n_rows, n_inner = a.shape
    if n_inner != b.rows:
        raise ShapeError(
            f"product dimensions do not match: {a.shape} and {b.shape}"
        )
    n_cols = b.cols
    out = NDArray(n_rows, n_cols, dtype=_float_dtype(a, b))
    for i in range(n_rows):
        for j in range(n_cols):
            total = 0.0
            for k in range(n_inner):
                total += a[i, k] * b[k, j]
            out[i, j] = total
    return out


def transpose(a: NDArray) -> NDArray:
    _require_matrix(a, "transpose")
    n_rows, n_cols = a.shape
    out = NDArray(n_cols, n_rows, dtype=a.dtype)
    for i in range(n_rows):
        for j in range(n_cols):
            out[j, i] = a[i, j]
    return out


def _elementwise(a: NDArray, b: NDArray, op: str, fn: Callable) -> NDArray:
    _require_same_shape(a, b, op)
    n_rows, n_cols = a.shape
    out = NDArray(n_rows, n_cols, dtype=_float_dtype(a, b))
    for i in range(n_rows):
        for j in range(n_cols):
            out[i, j] = fn(a[i, j], b[i, j])
    return out


def multiply(a: NDArray, b: NDArray) -> NDArray:
    """Element-wise (Hadamard) product."""

    return _elementwise(a, b, "multiply", lambda x, y: x * y)


def add(a: NDArray, b: NDArray) -> NDArray:
    return _elementwise(a, b, "add", lambda x, y: x + y)


def subtract(a: NDArray, b: NDArray) -> NDArray:
    return _elementwise(a, b, "subtract", lambda x, y: x - y)


def scalar_multiply(s: float, a: NDArray) -> NDArray:
    return map_function(lambda x: s * x, a)


def map_function(fn: UnaryFn, a: NDArray) -> NDArray:
    """Apply the unary callable ``fn`` to every entry of ``a``."""

    _require_matrix(a, "map_function")
    n_rows, n_cols = a.shape
    out = NDArray(n_rows, n_cols, dtype=_float_dtype(a))
    for i in range(n_rows):
        for j in range(n_cols):
            out[i, j] = fn(a[i, j])
    return out


def append_bias_row(vector: NDArray, bias: float) -> NDArray:
    """Return ``vector`` extended by one trailing entry equal to ``bias``."""

    _require_matrix(vector, "append_bias_row")
    if vector.cols != 1:
        raise ShapeError(
            f"append_bias_row expects a column vector, got shape {vector.shape}"
        )
    n_rows = vector.rows
    out = NDArray(n_rows + 1, 1, dtype=_float_dtype(vector))
    for i in range(n_rows):
        out[i, 0] = vector[i, 0]
    out[n_rows, 0] = bias
    return out


def row_as_column(matrix: NDArray, row: int) -> NDArray:
    """Copy row ``row`` of ``matrix`` into a new ``(cols, 1)`` column vector."""

    _require_matrix(matrix, "row_as_column")
    n_cols = matrix.cols
    out = NDArray(n_cols, 1, dtype=matrix.dtype)
    for j in range(n_cols):
        out[j, 0] = matrix[row, j]
    return out


def max_entry(a: NDArray, floor: float = 0.0) -> float:
    """Largest entry of ``a``, or ``floor`` if every entry is smaller."""

    return max([floor, *a.flat_values()])


def has_nonfinite(a: NDArray) -> bool:
    return not all(math.isfinite(value) for value in a.flat_values())


__all__ = [
    "add",
    "append_bias_row",
    "has_nonfinite",
    "map_function",
    "max_entry",
    "multiply",
    "product",
    "row_as_column",
    "scalar_multiply",
    "subtract",
    "transpose",
]
