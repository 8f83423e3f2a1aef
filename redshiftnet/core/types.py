"""Core typing contracts for redshiftnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .ndarray import NDArray

Gradients = Dict[str, NDArray]


@dataclass(frozen=True)
class ForwardState:
    """Intermediate values of one forward pass, consumed by the backward step.

    ``inputs_b`` and ``hidden_b`` carry the bias as their last entry.
    """

    inputs_b: NDArray
    pre_hidden: NDArray
    hidden_b: NDArray
    output: NDArray

    @property
    def prediction(self) -> float:
        return float(self.output[0, 0])


@dataclass
class TrainResult:
    """Outcome of :meth:`redshiftnet.training.trainer.Trainer.run`."""

    steps: int
    stopped_at: int
    converged: bool
    mse_trace: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class HoldoutReport:
    """Mean loss of the network and of a constant predictor on held-out rows."""

    validation_mse: float
    benchmark_mse: float
    n_examples: int
    benchmark_value: float


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`redshiftnet.training.pipelines.run_pipeline`."""

    steps: int
    metrics_path: str
    manifest_path: str
    weights_path: str
    summary_path: str = ""
    validation_mse: float = float("nan")
    benchmark_mse: float = float("nan")
