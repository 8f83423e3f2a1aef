"""Single-hidden-layer regression network with a hand-derived SGD step."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Mapping

from ..core.activations import Activation, LeakyReLU
from ..core.linalg import (
    append_bias_row,
    has_nonfinite,
    map_function,
    product,
    scalar_multiply,
    subtract,
    transpose,
)
from ..core.ndarray import NDArray
from ..core.rng import LinearCongruential
from ..core.types import ForwardState, Gradients


@dataclass
class Network:
    """Fully connected network ``n_input -> n_hidden -> 1``.

    For a column vector ``x`` of shape ``(n_input, 1)``::

        inputs_b   = [x; b0]                            (n_input+1, 1)
        pre_hidden = w0.T @ inputs_b                    (n_hidden, 1)
        hidden_b   = [activation(pre_hidden); b1]       (n_hidden+1, 1)
        output     = w1.T @ hidden_b                    (1, 1)

    The biases ``b0`` and ``b1`` are constants appended as the *last* entry of
    the augmented vectors; the last rows of ``w0`` and ``w1`` are the learned
    offsets they multiply.

    :meth:`backward` is specific to one hidden layer feeding one linear output
    unit. Other topologies need a generic layer-wise delta propagation.
    """

    n_input: int = 10
    n_hidden: int = 5
    n_output: int = 1
    leak: float = 0.5
    b0: float = 1.0
    b1: float = 1.0
    seed: int | None = None
    activation: Activation | None = None
    w0: NDArray = field(init=False, repr=False)
    w1: NDArray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.n_output != 1:
            raise ValueError(
                f"Network supports exactly one output unit, got n_output={self.n_output}"
            )
        if self.activation is None:
            self.activation = LeakyReLU(self.leak)
        self.w0 = NDArray(self.n_input + 1, self.n_hidden)
        self.w1 = NDArray(self.n_hidden + 1, self.n_output)
        self.reset(self.seed)

    def reset(self, seed: int | None) -> None:
        """Draw every weight from ``[-0.5, 0.5)``, ``w0`` first, row-major."""

        rng = LinearCongruential(seed)
        for weights in (self.w0, self.w1):
            for i in range(weights.rows):
                for j in range(weights.cols):
                    weights[i, j] = rng.centered()

    def forward(self, example: NDArray) -> tuple[float, ForwardState]:
        inputs_b = append_bias_row(example, self.b0)
        pre_hidden = product(transpose(self.w0), inputs_b)
        hidden = map_function(self.activation, pre_hidden)
        hidden_b = append_bias_row(hidden, self.b1)
        output = product(transpose(self.w1), hidden_b)
        state = ForwardState(
            inputs_b=inputs_b,
            pre_hidden=pre_hidden,
            hidden_b=hidden_b,
            output=output,
        )
        return state.prediction, state

    def predict(self, example: NDArray) -> float:
        prediction, _ = self.forward(example)
        return prediction

    def backward(self, state: ForwardState, target: float, alpha: float) -> Gradients:
        """Apply one gradient-descent step for a single example.

        With ``delta = prediction - target``::

            W1[k]    = alpha * delta * hidden_b[k]
            W0[i, j] = alpha * delta * activation'(pre_hidden[j]) * inputs_b[i]

        Both weight matrices are replaced by ``w - grad``. The returned
        gradients are already scaled by ``alpha``.
        """

        delta = state.prediction - target

        w1_grad = scalar_multiply(delta, state.hidden_b)
        w1_grad = scalar_multiply(alpha, w1_grad)
        self.w1.assign(subtract(self.w1, w1_grad))

        w0_grad = NDArray(*self.w0.shape)
        for i in range(w0_grad.rows):
            for j in range(w0_grad.cols):
                w0_grad[i, j] = (
                    delta
                    * self.activation.deriv(state.pre_hidden[j, 0])
                    * state.inputs_b[i, 0]
                )
        w0_grad = scalar_multiply(alpha, w0_grad)
        self.w0.assign(subtract(self.w0, w0_grad))

        return {"W0": w0_grad, "W1": w1_grad}

    def check_finite(self) -> bool:
        """Warn about and report infinite or NaN weights."""

        ok = True
        for name, weights in self.state_dict().items():
            if has_nonfinite(weights):
                warnings.warn(f"non-finite value in {name}", RuntimeWarning, stacklevel=2)
                ok = False
        return ok

    def state_dict(self) -> Mapping[str, NDArray]:
        return {"W0": self.w0.copy(), "W1": self.w1.copy()}

    def load_state_dict(self, state: Mapping[str, NDArray]) -> None:
        for key, weights in (("W0", self.w0), ("W1", self.w1)):
            if key not in state:
                raise KeyError(f"Missing weight {key} in state dict")
            weights.assign(state[key])

    def parameter_count(self) -> int:
        return self.w0.size + self.w1.size


__all__ = ["Network"]
