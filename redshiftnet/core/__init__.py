"""Array container and numerical primitives for redshiftnet."""

from . import activations, linalg, ndarray, rng, types
from .errors import BoundsError, ShapeError
from .ndarray import NDArray

__all__ = [
    "BoundsError",
    "NDArray",
    "ShapeError",
    "activations",
    "linalg",
    "ndarray",
    "rng",
    "types",
]
