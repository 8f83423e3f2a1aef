"""Single-pass, one-example-at-a-time training loop."""

from __future__ import annotations

import warnings
from typing import Mapping, Sequence

from ..core.linalg import has_nonfinite, max_entry, row_as_column
from ..core.ndarray import NDArray
from ..core.types import Gradients, HoldoutReport, TrainResult
from .losses import mean_mse, mse
from .network import Network


def should_stop(grads: Gradients, threshold: float) -> bool:
    """Return ``True`` when no gradient entry reaches ``threshold``.

    The largest signed entry across all matrices is compared, starting from
    ``0.0``.
    """

    largest = 0.0
    for grad in grads.values():
        largest = max_entry(grad, floor=largest)
    return largest < threshold


def _check_gradients(grads: Gradients) -> None:
    for name, grad in grads.items():
        if has_nonfinite(grad):
            warnings.warn(f"non-finite value in {name} gradient", RuntimeWarning, stacklevel=3)


def _check_examples(features: NDArray, labels: NDArray) -> int:
    if features.ndim != 2:
        raise ValueError(f"features must be a matrix, got shape {features.shape}")
    if labels.ndim != 1:
        raise ValueError(f"labels must be a vector, got shape {labels.shape}")
    if labels.size < features.rows:
        raise ValueError(
            f"{features.rows} examples but only {labels.size} labels"
        )
    return features.rows


class Trainer:
    """Run stochastic gradient descent over a dataset, one example per step.

    Examples are visited in index order with no shuffling. After each update
    the loop stops if :func:`should_stop` holds for the step's gradients or the
    last example has been reached.
    """

    def __init__(
        self,
        network: Network,
        *,
        alpha: float = 0.001,
        threshold: float = 1e-8,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.alpha = alpha
        self.threshold = threshold
        self.callbacks = list(callbacks or [])

    def run(self, features: NDArray, labels: NDArray) -> TrainResult:
        n_examples = _check_examples(features, labels)
        trace: list[float] = []
        converged = False
        index = 0
        for index in range(n_examples):
            example = row_as_column(features, index)
            target = float(labels[index])

            prediction, state = self.network.forward(example)
            loss = mse(prediction, target)
            trace.append(loss)

            grads = self.network.backward(state, target, self.alpha)
            _check_gradients(grads)
            self._emit_step(
                index, {"loss": loss, "prediction": prediction, "target": target}
            )

            if should_stop(grads, self.threshold):
                converged = True
                break

        self.network.check_finite()
        return TrainResult(
            steps=len(trace),
            stopped_at=index,
            converged=converged,
            mse_trace=trace,
        )

    def _emit_step(self, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(step, metrics)


def evaluate_holdout(
    network: Network,
    features: NDArray,
    labels: NDArray,
    *,
    n_holdout: int = 100,
    benchmark: float | None = None,
) -> HoldoutReport:
    """Score the last ``n_holdout`` examples against a constant predictor.

    The benchmark predicts ``benchmark`` for every example, defaulting to the
    mean of all labels. Examples are visited from the last one backwards.
    """

    n_examples = _check_examples(features, labels)
    if n_holdout <= 0:
        raise ValueError(f"n_holdout must be positive, got {n_holdout}")
    count = min(n_holdout, n_examples)
    if benchmark is None:
        values = labels.flat_values()[:n_examples]
        benchmark = sum(values) / len(values)

    predictions: list[float] = []
    targets: list[float] = []
    for index in range(n_examples - 1, n_examples - 1 - count, -1):
        targets.append(float(labels[index]))
        predictions.append(network.predict(row_as_column(features, index)))

    return HoldoutReport(
        validation_mse=mean_mse(predictions, targets),
        benchmark_mse=mean_mse([benchmark] * count, targets),
        n_examples=count,
        benchmark_value=float(benchmark),
    )


__all__ = ["Trainer", "evaluate_holdout", "should_stop"]
