"""Squared-error loss for the single-output regression network."""

from __future__ import annotations

from typing import Iterable


def mse(pred: float, target: float) -> float:
    """Half squared error; the 1/2 cancels in the derivative ``pred - target``."""

    diff = pred - target
    return 0.5 * diff * diff


def mean_mse(preds: Iterable[float], targets: Iterable[float]) -> float:
    losses = [mse(p, t) for p, t in zip(preds, targets)]
    if not losses:
        raise ValueError("mean_mse requires at least one prediction")
    return sum(losses) / len(losses)


__all__ = ["mean_mse", "mse"]
