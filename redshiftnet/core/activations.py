"""Activation functions for the hidden layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Activation(Protocol):
    """Unary transform applied entry-wise, together with its derivative."""

    def __call__(self, z: float) -> float:
        """Return the activation of ``z``."""

    def deriv(self, z: float) -> float:
        """Return the derivative of the activation at ``z``."""


@dataclass(frozen=True)
class LeakyReLU:
    """``z`` for positive inputs, ``leak * z`` otherwise."""

    leak: float = 0.5

    def __call__(self, z: float) -> float:
        return z if z > 0 else self.leak * z

    def deriv(self, z: float) -> float:
        return 1.0 if z > 0 else self.leak


__all__ = ["Activation", "LeakyReLU"]
