import numpy as np
import pytest

from nanonet.core.activations import RELU, SIGMOID
from nanonet.core.errors import DimensionMismatchError, InvalidArgumentError
from nanonet.core.linalg import Vector
from nanonet.core.network import NeuralNet
from nanonet.data.truth_tables import decode_bool, encode_bool, parity_table


def _np_sigmoid(z):
    return 1.0 / (1.0 + np.exp(-z))


def _np_sigmoid_prime(z):
    s = _np_sigmoid(z)
    return s * (1.0 - s)


def _reference_update(
    net,
    batch,
    encode,
    hidden=(_np_sigmoid, _np_sigmoid_prime),
    output=(_np_sigmoid, _np_sigmoid_prime),
):
    hidden_fn, hidden_prime = hidden
    output_fn, output_prime = output
    params = net.parameters().as_arrays()
    W1, b1 = params["input_weights"], params["hidden_biases"]
    W2, b2 = params["hidden_weights"], params["output_biases"]
    dW1, db1 = np.zeros_like(W1), np.zeros_like(b1)
    dW2, db2 = np.zeros_like(W2), np.zeros_like(b2)
    for inputs, label in batch:
        x = inputs.to_numpy()
        hidden_pre = W1 @ x + b1
        hidden_act = hidden_fn(hidden_pre)
        output_pre = W2 @ hidden_act + b2
        output_act = output_fn(output_pre)
        desired = encode(label).to_numpy()
        output_error = output_prime(output_pre) * (desired - output_act)
        db2 += output_error
        dW2 += np.outer(output_error, hidden_act)
        hidden_error = hidden_prime(hidden_pre) * (W2.T @ output_error)
        db1 += hidden_error
        dW1 += np.outer(hidden_error, x)
    n = len(batch)
    return W1 + dW1 / n, b1 + db1 / n, W2 + dW2 / n, b2 + db2 / n


def _make_net(seed=0, **kwargs):
    return NeuralNet(4, 3, 2, decode_bool, seed=seed, **kwargs)


def test_parameter_shapes_and_initial_range():
    net = _make_net()
    params = net.parameters()
    assert params.input_weights.shape == (3, 4)
    assert len(params.hidden_biases) == 3
    assert params.hidden_weights.shape == (2, 3)
    assert len(params.output_biases) == 2
    for array in params.as_arrays().values():
        assert np.all(array >= 0.0)
        assert np.all(array < 1.0)


def test_initial_values_are_independent_draws():
    net = _make_net(seed=3)
    weights = net.input_weights.to_numpy().ravel()
    assert len(set(weights.tolist())) == weights.size


@pytest.mark.parametrize("sizes", [(0, 3, 2), (4, -1, 2), (4, 3, 0), (4, 2.5, 2)])
def test_non_positive_layer_sizes_rejected(sizes):
    with pytest.raises(InvalidArgumentError):
        NeuralNet(*sizes, decode_bool)


def test_rng_and_seed_are_exclusive():
    with pytest.raises(InvalidArgumentError):
        NeuralNet(4, 3, 2, decode_bool, rng=np.random.default_rng(0), seed=0)


def test_defaults_to_sigmoid_on_both_layers():
    net = _make_net()
    assert net.hidden_activation is SIGMOID
    assert net.output_activation is SIGMOID


def test_forward_matches_manual_computation():
    net = _make_net(seed=5)
    x = Vector([1.0, 0.0, 1.0, 1.0])
    params = net.parameters().as_arrays()
    hidden = _np_sigmoid(params["input_weights"] @ x.to_numpy() + params["hidden_biases"])
    output = _np_sigmoid(params["hidden_weights"] @ hidden + params["output_biases"])
    assert np.allclose(net.forward(x).to_numpy(), output)
    assert net.infer(x) == bool(output[0] > output[1])


def test_trace_keeps_intermediate_vectors():
    net = _make_net(seed=2)
    state = net.trace([0.0, 1.0, 0.0, 1.0])
    assert len(state.hidden_pre) == 3
    assert len(state.hidden) == 3
    assert len(state.output_pre) == 2
    assert state.output == net.forward([0.0, 1.0, 0.0, 1.0])


def test_infer_is_pure_and_repeatable():
    net = _make_net(seed=1)
    before = net.parameters()
    x = Vector([1.0, 1.0, 0.0, 0.0])
    first = net.forward(x)
    second = net.forward(x)
    assert first == second
    assert net.infer(x) == net.infer(x)
    assert net.parameters() == before


def test_infer_rejects_wrong_input_length():
    net = _make_net()
    with pytest.raises(DimensionMismatchError):
        net.infer(Vector([1.0, 0.0, 1.0]))


def test_train_matches_reference_update():
    net = _make_net(seed=11)
    batch = parity_table()[:5]
    expected = _reference_update(net, batch, encode_bool)
    net.train(batch, encode_bool)
    actual = net.parameters().as_arrays()
    assert np.allclose(actual["input_weights"], expected[0])
    assert np.allclose(actual["hidden_biases"], expected[1])
    assert np.allclose(actual["hidden_weights"], expected[2])
    assert np.allclose(actual["output_biases"], expected[3])


def test_train_preserves_shapes():
    net = _make_net(seed=4)
    batch = parity_table()
    for _ in range(5):
        net.train(batch, encode_bool)
    assert net.input_weights.shape == (3, 4)
    assert net.hidden_weights.shape == (2, 3)
    assert len(net.hidden_biases) == 3
    assert len(net.output_biases) == 2


def test_train_accepts_generators():
    net = _make_net(seed=4)
    before = net.parameters()
    net.train((row for row in parity_table()), encode_bool)
    assert net.parameters() != before


def test_empty_batch_rejected():
    net = _make_net()
    with pytest.raises(InvalidArgumentError):
        net.train([], encode_bool)


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_single_example_update_reduces_error(seed):
    net = _make_net(seed=seed)
    x, label = Vector([1.0, 0.0, 1.0, 0.0]), True
    desired = encode_bool(label)

    def error():
        diff = net.forward(x) - desired
        return diff @ diff

    before = error()
    net.train([(x, label)], encode_bool)
    assert error() <= before


def test_activation_slots_are_swappable():
    net = _make_net(seed=6)
    net.hidden_activation = "relu"
    assert net.hidden_activation is RELU
    net.output_activation = (lambda x: x, lambda x: 1.0)
    assert net.describe().hidden_activation == "relu"

    x = Vector([1.0, 1.0, 1.0, 0.0])
    params = net.parameters().as_arrays()
    hidden = np.maximum(0.0, params["input_weights"] @ x.to_numpy() + params["hidden_biases"])
    output = params["hidden_weights"] @ hidden + params["output_biases"]
    assert np.allclose(net.forward(x).to_numpy(), output)


def test_train_uses_swapped_activation_derivatives():
    net = _make_net(seed=6)
    net.hidden_activation = "relu"
    net.output_activation = (lambda x: x, lambda x: 1.0)
    batch = parity_table()
    expected = _reference_update(
        net,
        batch,
        encode_bool,
        hidden=(lambda z: np.maximum(0.0, z), lambda z: (z > 0).astype(float)),
        output=(lambda z: z, np.ones_like),
    )
    sigmoid_expected = _reference_update(net, batch, encode_bool)
    net.train(batch, encode_bool)
    actual = net.parameters().as_arrays()
    assert np.allclose(actual["input_weights"], expected[0])
    assert np.allclose(actual["hidden_biases"], expected[1])
    assert np.allclose(actual["hidden_weights"], expected[2])
    assert np.allclose(actual["output_biases"], expected[3])
    assert not np.allclose(actual["output_biases"], sigmoid_expected[3])


def test_invalid_activation_rejected():
    net = _make_net()
    with pytest.raises(KeyError):
        net.hidden_activation = "swish"
    with pytest.raises(TypeError):
        net.output_activation = 3


def test_describe_reports_sizes():
    description = _make_net().describe()
    assert (description.input_size, description.hidden_size, description.output_size) == (4, 3, 2)
    assert description.parameter_count == 12 + 3 + 6 + 2


def test_format_parameters_has_four_blocks():
    text = _make_net(seed=8).format_parameters(precision=5)
    blocks = text.split("\n\n")
    assert len(blocks) == 4
    assert len(blocks[0].splitlines()) == 3
    assert len(blocks[2].splitlines()) == 2
    assert blocks[1].count(",") == 2
    first_value = blocks[0].splitlines()[0].strip("[]").split(", ")[0]
    assert len(first_value.split(".")[1]) == 5


def test_format_parameters_rejects_bad_precision():
    with pytest.raises(InvalidArgumentError):
        _make_net().format_parameters(precision=-1)
