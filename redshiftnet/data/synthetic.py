"""Deterministic synthetic regression data for offline runs."""

from __future__ import annotations

import numpy as np

from ..core.ndarray import NDArray
from .registry import DatasetSpec, register_dataset


@register_dataset("synthetic")
def load_synthetic(
    *,
    n_examples: int = 256,
    n_input: int = 10,
    noise: float = 0.02,
    seed: int = 0,
) -> DatasetSpec:
    """Standardised features with a noisy linear target in a redshift-like range."""

    rng = np.random.default_rng(seed)
    X = rng.standard_normal((n_examples, n_input))
    coef = rng.uniform(-0.1, 0.1, size=n_input)
    y = 0.36 + X @ coef + noise * rng.standard_normal(n_examples)
    y = np.clip(y, 0.0, None)
    provenance = {
        "type": "synthetic",
        "n_examples": n_examples,
        "n_input": n_input,
        "noise": noise,
        "seed": seed,
    }
    return DatasetSpec(
        name="synthetic",
        features=NDArray.from_numpy(X),
        labels=NDArray.from_numpy(y),
        provenance=provenance,
    )


__all__ = ["load_synthetic"]
