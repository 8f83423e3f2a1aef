"""Linear congruential generator used for weight initialisation."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

_MULTIPLIER = 1372383749
_INCREMENT = 1289706101
_MODULUS = 2**32


@dataclass
class LinearCongruential:
    """32-bit LCG returning floats in ``[0, 1)``.

    ``seed`` defaults to the current Unix time, so unseeded runs differ.
    """

    seed: int | None = None
    state: int = field(init=False)

    def __post_init__(self) -> None:
        seed = int(time.time()) if self.seed is None else int(self.seed)
        self.state = seed % _MODULUS

    def random(self) -> float:
        self.state = (_MULTIPLIER * self.state + _INCREMENT) % _MODULUS
        return self.state / _MODULUS

    def centered(self) -> float:
        """Return a value in ``[-0.5, 0.5)``."""

        return self.random() - 0.5


__all__ = ["LinearCongruential"]
