"""Network, training loop and run pipeline."""

from .losses import mean_mse, mse
from .network import Network
from .trainer import Trainer, evaluate_holdout, should_stop

__all__ = ["Network", "Trainer", "evaluate_holdout", "mean_mse", "mse", "should_stop"]
