import numpy as np
import pytest

from redshiftnet.core.errors import ShapeError
from redshiftnet.core.ndarray import NDArray
from redshiftnet.training.network import Network


def _example(values):
    return NDArray.from_numpy(np.asarray(values, dtype=np.float64).reshape(-1, 1))


def test_weights_are_seeded_and_centered():
    a = Network(n_input=10, n_hidden=5, seed=123)
    b = Network(n_input=10, n_hidden=5, seed=123)
    assert a.w0.shape == (11, 5)
    assert a.w1.shape == (6, 1)
    assert a.w0 == b.w0 and a.w1 == b.w1
    values = a.w0.flat_values() + a.w1.flat_values()
    assert all(-0.5 <= v < 0.5 for v in values)
    assert Network(seed=124).w0 != a.w0
    assert a.parameter_count() == 11 * 5 + 6


def test_forward_matches_numpy_reference():
    net = Network(n_input=3, n_hidden=4, leak=0.5, b0=1.0, b1=1.0, seed=5)
    x = np.array([0.2, -1.5, 0.7])
    prediction, state = net.forward(_example(x))

    w0 = net.w0.to_numpy()
    w1 = net.w1.to_numpy()
    pre = w0.T @ np.append(x, 1.0)
    hidden = np.where(pre > 0, pre, 0.5 * pre)
    expected = (w1.T @ np.append(hidden, 1.0)).item()

    assert prediction == pytest.approx(expected, abs=1e-12)
    assert state.inputs_b.shape == (4, 1)
    assert state.inputs_b[3, 0] == 1.0
    assert state.hidden_b.shape == (5, 1)
    assert state.hidden_b[4, 0] == 1.0
    assert state.output.shape == (1, 1)
    assert np.allclose(state.pre_hidden.to_numpy().ravel(), pre, atol=1e-12)


def test_single_step_update_rule():
    net = Network(n_input=10, n_hidden=5, seed=2024)
    x = np.linspace(-1.0, 1.0, 10)
    target = 0.42
    alpha = 0.001
    w0_old = net.w0.to_numpy()
    w1_old = net.w1.to_numpy()

    prediction, state = net.forward(_example(x))
    grads = net.backward(state, target, alpha)

    delta = prediction - target
    hidden_b = state.hidden_b.to_numpy()
    assert np.allclose(net.w1.to_numpy(), w1_old - alpha * delta * hidden_b, rtol=0, atol=1e-12)

    inputs_b = np.append(x, 1.0)
    pre = state.pre_hidden.to_numpy().ravel()
    deriv = np.where(pre > 0, 1.0, 0.5)
    expected_w0_grad = alpha * delta * np.outer(inputs_b, deriv)
    assert np.allclose(grads["W0"].to_numpy(), expected_w0_grad, rtol=0, atol=1e-12)
    assert np.allclose(net.w0.to_numpy(), w0_old - expected_w0_grad, rtol=0, atol=1e-12)
    assert grads["W1"].shape == net.w1.shape


def test_state_dict_round_trip_is_strict():
    net = Network(n_input=2, n_hidden=3, seed=1)
    saved = net.state_dict()
    net.reset(99)
    assert net.w0 != saved["W0"]
    net.load_state_dict(saved)
    assert net.w0 == saved["W0"] and net.w1 == saved["W1"]

    with pytest.raises(KeyError):
        net.load_state_dict({"W0": saved["W0"]})
    with pytest.raises(ShapeError):
        net.load_state_dict({"W0": NDArray.zeros(2, 2), "W1": saved["W1"]})


def test_wrong_input_length_and_output_count_are_rejected():
    net = Network(n_input=3, n_hidden=2, seed=0)
    with pytest.raises(ShapeError):
        net.forward(_example([1.0, 2.0]))
    with pytest.raises(ValueError):
        Network(n_output=2)


def test_check_finite_warns():
    net = Network(n_input=2, n_hidden=2, seed=0)
    assert net.check_finite()
    net.w1[0, 0] = float("inf")
    with pytest.warns(RuntimeWarning, match="W1"):
        assert not net.check_finite()
