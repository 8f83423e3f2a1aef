"""redshiftnet public API."""

from .core import activations, linalg  # noqa: F401
from .core.errors import BoundsError, ShapeError
from .core.ndarray import NDArray
from .training.network import Network
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer, evaluate_holdout, should_stop

__all__ = [
    "BoundsError",
    "NDArray",
    "Network",
    "ShapeError",
    "Trainer",
    "activations",
    "evaluate_holdout",
    "linalg",
    "load_preset",
    "presets",
    "run_pipeline",
    "should_stop",
]
