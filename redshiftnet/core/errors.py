"""Exceptions raised by the array and linear-algebra layer."""

from __future__ import annotations


class ShapeError(ValueError):
    """Raised when array extents, ranks or sizes are incompatible."""


class BoundsError(IndexError):
    """Raised by checked element access with a bad index."""

    def __init__(self, index: tuple[int, ...], shape: tuple[int, ...]) -> None:
        self.index = index
        self.shape = shape
        super().__init__(
            f"out of bounds index {index} for array of shape {shape} (ndim={len(shape)})"
        )


__all__ = ["BoundsError", "ShapeError"]
