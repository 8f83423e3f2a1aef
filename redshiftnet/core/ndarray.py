"""Fixed-shape dense N-dimensional array with optional bounds checking.

``NDArray`` owns a flat, contiguous numpy buffer and maps multi-dimensional
indices onto it in row-major order (the last axis varies fastest)::

    rank 2:  offset = i2 + i1*n2
    rank 3:  offset = i3 + (i2 + i1*n2)*n3
    rank 4:  offset = i4 + (i3 + (i2 + i1*n2)*n3)*n4

The linear-algebra helpers in :mod:`redshiftnet.core.linalg` rely on this
ordering, and :meth:`NDArray.from_numpy` / :meth:`NDArray.to_numpy` use numpy's
C order which matches it.

Shape is fixed for the lifetime of the buffer. The only way to change it is
:meth:`NDArray.resize`, which throws the old contents away. Assignment between
arrays never reshapes; it requires equal rank and equal size.
"""

from __future__ import annotations

import math
from typing import Any, Tuple, Union

import numpy as np

from .errors import BoundsError, ShapeError

#: Default for ``NDArray(..., bounds_check=None)``. Read at construction time.
BOUNDS_CHECK = True

MAX_NDIM = 4

Index = Union[int, Tuple[int, ...]]


def _validate_extents(extents: tuple, action: str) -> Tuple[int, ...]:
    if not 1 <= len(extents) <= MAX_NDIM:
        raise ShapeError(
            f"NDArray {action} with {len(extents)} extents; "
            f"between 1 and {MAX_NDIM} are supported"
        )
    for n in extents:
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
            size = " x ".join(str(e) for e in extents)
            raise ShapeError(f"NDArray {action} with size = {size}, NOT ALLOWED")
    return tuple(int(n) for n in extents)


class NDArray:
    """Dense numeric array of rank 1 to 4.

    Parameters
    ----------
    *extents:
        Positive size of each axis. The number of extents fixes the rank.
    dtype:
        Element type of the backing buffer.
    bounds_check:
        Validate index arity and range on every element access. ``None``
        takes the module default :data:`BOUNDS_CHECK`. Without checking, a
        bad index either reads a neighbouring element or lets numpy raise.

    Contents start uninitialized.
    """

    __slots__ = ("_data", "_shape", "_size", "bounds_check")

    def __init__(
        self,
        *extents: int,
        dtype: Any = np.float64,
        bounds_check: bool | None = None,
    ) -> None:
        self.bounds_check = BOUNDS_CHECK if bounds_check is None else bool(bounds_check)
        self._allocate(_validate_extents(extents, "initialized"), np.dtype(dtype))

    def _allocate(self, shape: Tuple[int, ...], dtype: np.dtype) -> None:
        self._shape = shape
        self._size = math.prod(shape)
        self._data = np.empty(self._size, dtype=dtype)

    # ------------------------------------------------------------------
    # Construction helpers

    @classmethod
    def from_numpy(
        cls, values: Any, *, dtype: Any = np.float64, bounds_check: bool | None = None
    ) -> "NDArray":
        """Copy ``values`` (anything ``numpy.asarray`` accepts) into a new array.

        Values are converted to ``dtype``, ``float64`` unless asked otherwise, so
        integer literals such as ``[[1, 2], [3, 4]]`` yield a float array.
        """

        arr = np.asarray(values, dtype=dtype)
        out = cls(*arr.shape, dtype=arr.dtype, bounds_check=bounds_check)
        out._data[:] = arr.reshape(-1)
        return out

    @classmethod
    def zeros(cls, *extents: int, dtype: Any = np.float64) -> "NDArray":
        out = cls(*extents, dtype=dtype)
        out.fill(0)
        return out

    def copy(self) -> "NDArray":
        """Return a deep copy with fresh storage, the same shape and contents."""

        out = type(self).__new__(type(self))
        out.bounds_check = self.bounds_check
        out._shape = self._shape
        out._size = self._size
        out._data = self._data.copy()
        return out

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "NDArray":
        return self.copy()

    # ------------------------------------------------------------------
    # Shape queries

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return self._size

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def rows(self) -> int:
        return self._shape[0]

    @property
    def cols(self) -> int:
        """Extent of the second axis, ``0`` for rank-1 arrays."""

        return self._shape[1] if len(self._shape) > 1 else 0

    def extent(self, axis: int) -> int:
        return self._shape[axis]

    def __len__(self) -> int:
        return self._shape[0]

    # ------------------------------------------------------------------
    # Mutation of shape

    def resize(self, *extents: int) -> None:
        """Reallocate to a new shape and rank.

        The previous contents are discarded unconditionally, even when the new
        shape has the same size; the new buffer is uninitialized.
        """

        shape = _validate_extents(extents, "resize()")
        self._allocate(shape, self._data.dtype)

    def assign(self, other: "NDArray") -> "NDArray":
        """Copy ``other``'s contents into this array's existing storage.

        Rank and total size must match; the destination keeps its own shape.
        """

        if other.ndim != self.ndim or other.size != self.size:
            raise ShapeError(
                "NDArray assignment with unequal sizes: "
                f"{self._size} (ndim={self.ndim}) and {other.size} (ndim={other.ndim})"
            )
        self._data[:] = other._data
        return self

    # ------------------------------------------------------------------
    # Element access

    def _offset(self, key: Index) -> int:
        index = key if isinstance(key, tuple) else (key,)
        if self.bounds_check:
            if len(index) != len(self._shape) or not all(
                0 <= i < n for i, n in zip(index, self._shape)
            ):
                raise BoundsError(tuple(index), self._shape)
        offset = 0
        for i, n in zip(index, self._shape):
            offset = offset * n + i
        return offset

    def __getitem__(self, key: Index):
        return self._data[self._offset(key)]

    def __setitem__(self, key: Index, value) -> None:
        self._data[self._offset(key)] = value

    def fill(self, value) -> None:
        self._data.fill(value)

    def flat_values(self) -> list:
        """Return the contents as a Python list in storage order."""

        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.reshape(self._shape).copy()

    # ------------------------------------------------------------------
    # In-place element-wise operators (size must match, rank is not checked)

    def _require_same_size(self, other: "NDArray", op: str) -> None:
        if other.size != self._size:
            raise ShapeError(
                f"NDArray {op} operator invoked with unequal sizes: "
                f"{self._size} and {other.size}"
            )

    def __iadd__(self, other: "NDArray") -> "NDArray":
        self._require_same_size(other, "+=")
        self._data += other._data
        return self

    def __isub__(self, other: "NDArray") -> "NDArray":
        self._require_same_size(other, "-=")
        self._data -= other._data
        return self

    def __imul__(self, other) -> "NDArray":
        if isinstance(other, NDArray):
            self._require_same_size(other, "*=")
            self._data *= other._data
        else:
            self._data *= other
        return self

    # ------------------------------------------------------------------
    # Comparison and display

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NDArray):
            return NotImplemented
        return self._shape == other._shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"NDArray(shape={self._shape}, dtype={self._data.dtype})"

    def __str__(self) -> str:
        if self.ndim > 2:
            return repr(self)
        n_rows = self._shape[0]
        n_cols = self._shape[1] if self.ndim == 2 else 1
        lines = []
        for i in range(n_rows):
            row = self._data[i * n_cols : (i + 1) * n_cols]
            lines.append(" ".join(f"{value:>12.6g}" for value in row.tolist()))
        return "\n".join(lines)


__all__ = ["BOUNDS_CHECK", "MAX_NDIM", "NDArray"]
