"""One-hidden-layer feed-forward network trained by backpropagation."""

from __future__ import annotations

from typing import Generic, Iterable, Sequence, Tuple, Union

import numpy as np

from .activations import REGISTRY as ACTIVATIONS
from .activations import SIGMOID, Activation, ScalarFn
from .errors import DimensionMismatchError, InvalidArgumentError
from .linalg import Matrix, Vector
from .types import Decoder, Encoder, ForwardState, ModelDescription, NetworkParameters, T

ActivationLike = Union[Activation, str, Tuple[ScalarFn, ScalarFn]]


def _coerce_activation(value: ActivationLike) -> Activation:
    if isinstance(value, (Activation, str)):
        return ACTIVATIONS.resolve(value)
    if isinstance(value, tuple) and len(value) == 2 and all(callable(v) for v in value):
        fn, prime = value
        return Activation(getattr(fn, "__name__", "custom"), fn, prime)
    raise TypeError(
        "activation must be an Activation, a registered name or a (fn, prime) pair"
    )


def _as_vector(values: Union[Vector, Sequence[float]]) -> Vector:
    return values if isinstance(values, Vector) else Vector(values)


class NeuralNet(Generic[T]):
    """Feed-forward network with exactly one hidden layer.

    The network is generic over the label type ``T`` only through two
    functions: ``decode`` turns an output vector into a ``T`` and is fixed
    at construction (but may be reassigned), while the matching ``encode``
    is passed to every :meth:`train` call.

    Weights and biases start uniformly distributed in ``[0, 1)``.  Both
    layers default to the logistic sigmoid; either activation slot can be
    reassigned between training calls, by :class:`Activation`, by a
    registered name such as ``"relu"``, or by a ``(fn, prime)`` pair.
    """

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int,
        decode: Decoder,
        *,
        hidden_activation: ActivationLike = SIGMOID,
        output_activation: ActivationLike = SIGMOID,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        for name, size in (
            ("input_size", input_size),
            ("hidden_size", hidden_size),
            ("output_size", output_size),
        ):
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
                raise InvalidArgumentError(f"{name} must be a positive integer, got {size!r}")
        if rng is not None and seed is not None:
            raise InvalidArgumentError("pass either rng or seed, not both")
        if rng is None:
            rng = np.random.default_rng(seed)

        self.input_size = int(input_size)
        self.hidden_size = int(hidden_size)
        self.output_size = int(output_size)

        def draw(*_: int) -> float:
            return float(rng.random())

        self._input_weights = Matrix.generate(self.hidden_size, self.input_size, draw)
        self._hidden_biases = Vector.generate(self.hidden_size, draw)
        self._hidden_weights = Matrix.generate(self.output_size, self.hidden_size, draw)
        self._output_biases = Vector.generate(self.output_size, draw)

        self.decode = decode
        self.hidden_activation = hidden_activation
        self.output_activation = output_activation

    # ------------------------------------------------------------------
    # Configuration slots

    @property
    def hidden_activation(self) -> Activation:
        return self._hidden_activation

    @hidden_activation.setter
    def hidden_activation(self, value: ActivationLike) -> None:
        self._hidden_activation = _coerce_activation(value)

    @property
    def output_activation(self) -> Activation:
        return self._output_activation

    @output_activation.setter
    def output_activation(self, value: ActivationLike) -> None:
        self._output_activation = _coerce_activation(value)

    # ------------------------------------------------------------------
    # Read-only parameter access

    @property
    def input_weights(self) -> Matrix:
        return self._input_weights

    @property
    def hidden_biases(self) -> Vector:
        return self._hidden_biases

    @property
    def hidden_weights(self) -> Matrix:
        return self._hidden_weights

    @property
    def output_biases(self) -> Vector:
        return self._output_biases

    def parameters(self) -> NetworkParameters:
        """Return the current weights and biases."""

        return NetworkParameters(
            input_weights=self._input_weights,
            hidden_biases=self._hidden_biases,
            hidden_weights=self._hidden_weights,
            output_biases=self._output_biases,
        )

    def load_parameters(self, params: NetworkParameters) -> None:
        """Replace all four parameters at once after validating their shapes."""

        expected = {
            "input_weights": (self.hidden_size, self.input_size),
            "hidden_weights": (self.output_size, self.hidden_size),
        }
        for name, shape in expected.items():
            actual = getattr(params, name).shape
            if actual != shape:
                raise DimensionMismatchError(f"{name} must have shape {shape}, got {actual}")
        for name, length in (
            ("hidden_biases", self.hidden_size),
            ("output_biases", self.output_size),
        ):
            actual = len(getattr(params, name))
            if actual != length:
                raise DimensionMismatchError(f"{name} must have length {length}, got {actual}")
        self._input_weights = params.input_weights
        self._hidden_biases = params.hidden_biases
        self._hidden_weights = params.hidden_weights
        self._output_biases = params.output_biases

    def describe(self) -> ModelDescription:
        return ModelDescription(
            input_size=self.input_size,
            hidden_size=self.hidden_size,
            output_size=self.output_size,
            hidden_activation=self._hidden_activation.name,
            output_activation=self._output_activation.name,
        )

    def format_parameters(self, precision: int = 5) -> str:
        """Render the parameters as four fixed-point blocks separated by blank lines."""

        if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
            raise InvalidArgumentError(f"precision must be a non-negative integer, got {precision!r}")
        spec = f".{precision}f"
        blocks = (
            self._input_weights,
            self._hidden_biases,
            self._hidden_weights,
            self._output_biases,
        )
        return "\n\n".join(format(block, spec) for block in blocks)

    # ------------------------------------------------------------------
    # Forward propagation

    def _check_input(self, inputs: Union[Vector, Sequence[float]]) -> Vector:
        inputs = _as_vector(inputs)
        if len(inputs) != self.input_size:
            raise DimensionMismatchError(
                f"expected an input of length {self.input_size}, got {len(inputs)}"
            )
        return inputs

    def _propagate(self, inputs: Vector) -> ForwardState:
        hidden_pre = self._input_weights @ inputs + self._hidden_biases
        hidden = hidden_pre.apply(self._hidden_activation.fn)
        output_pre = self._hidden_weights @ hidden + self._output_biases
        output = output_pre.apply(self._output_activation.fn)
        return ForwardState(
            hidden_pre=hidden_pre,
            hidden=hidden,
            output_pre=output_pre,
            output=output,
        )

    def trace(self, inputs: Union[Vector, Sequence[float]]) -> ForwardState:
        """Run the forward pass and keep every intermediate vector."""

        return self._propagate(self._check_input(inputs))

    def forward(self, inputs: Union[Vector, Sequence[float]]) -> Vector:
        """Return the raw output layer for ``inputs``."""

        return self.trace(inputs).output

    def infer(self, inputs: Union[Vector, Sequence[float]]) -> T:
        """Run ``inputs`` through the network and decode the output layer."""

        return self.decode(self.forward(inputs))

    # ------------------------------------------------------------------
    # Backpropagation

    def train(self, batch: Iterable[Tuple[Vector, T]], encode: Encoder) -> None:
        """Apply one averaged gradient update computed over the whole ``batch``.

        Each example contributes a delta-rule error at the output layer,
        ``prime(output_pre) * (desired - output)``, which is propagated back
        through the current hidden weights.  Deltas are averaged over the
        batch and added to the parameters with an implicit step size of one.
        Nothing is modified unless every example in the batch is valid.
        """

        examples = list(batch)
        if not examples:
            raise InvalidArgumentError("cannot train on an empty batch")

        hidden_act = self._hidden_activation
        output_act = self._output_activation

        d_input_weights = Matrix.zeros(*self._input_weights.shape)
        d_hidden_biases = Vector.zeros(self.hidden_size)
        d_hidden_weights = Matrix.zeros(*self._hidden_weights.shape)
        d_output_biases = Vector.zeros(self.output_size)

        for inputs, label in examples:
            inputs = self._check_input(inputs)
            state = self._propagate(inputs)
            desired = _as_vector(encode(label))
            if len(desired) != self.output_size:
                raise DimensionMismatchError(
                    f"encoded label has length {len(desired)}, expected {self.output_size}"
                )

            output_error = state.output_pre.apply(output_act.prime) * (desired - state.output)
            d_output_biases += output_error
            d_hidden_weights += Matrix.outer(output_error, state.hidden)

            hidden_error = state.hidden_pre.apply(hidden_act.prime) * (
                output_error @ self._hidden_weights
            )
            d_hidden_biases += hidden_error
            d_input_weights += Matrix.outer(hidden_error, inputs)

        count = len(examples)
        self._output_biases = self._output_biases + d_output_biases / count
        self._hidden_biases = self._hidden_biases + d_hidden_biases / count
        self._hidden_weights = self._hidden_weights + d_hidden_weights / count
        self._input_weights = self._input_weights + d_input_weights / count

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(input_size={self.input_size}, "
            f"hidden_size={self.hidden_size}, output_size={self.output_size}, "
            f"hidden_activation={self._hidden_activation.name!r}, "
            f"output_activation={self._output_activation.name!r})"
        )


__all__ = ["ActivationLike", "NeuralNet"]
