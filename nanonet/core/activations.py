"""Scalar activation functions and the registry that names them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable

ScalarFn = Callable[[float], float]


def sigmoid(x: float) -> float:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``."""

    # Split on the sign so ``math.exp`` never sees a large positive argument.
    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def sigmoid_prime(x: float) -> float:
    s = sigmoid(x)
    return s * (1.0 - s)


def relu(x: float) -> float:
    """Return the ReLU activation."""

    return max(0.0, x)


def relu_prime(x: float) -> float:
    return 1.0 if x > 0.0 else 0.0


def tanh(x: float) -> float:
    return math.tanh(x)


def tanh_prime(x: float) -> float:
    return 1.0 - math.tanh(x) ** 2


@dataclass(frozen=True)
class Activation:
    """An activation function paired with its derivative."""

    name: str
    fn: ScalarFn
    prime: ScalarFn

    def __call__(self, x: float) -> float:
        return self.fn(x)


class ActivationRegistry:
    """Central registry for activation pairs."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activation] = {}

    def register(self, name: str, fn: ScalarFn, prime: ScalarFn) -> None:
        self._registry[name] = Activation(name, fn, prime)

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def get(self, name: str) -> Activation:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown activation {name!r}. Available activations: {available}")
        return self._registry[name]

    def resolve(self, value: "Activation | str") -> Activation:
        if isinstance(value, Activation):
            return value
        return self.get(value)


REGISTRY = ActivationRegistry()

REGISTRY.register("sigmoid", sigmoid, sigmoid_prime)
REGISTRY.register("relu", relu, relu_prime)
REGISTRY.register("tanh", tanh, tanh_prime)

SIGMOID = REGISTRY.get("sigmoid")
RELU = REGISTRY.get("relu")
TANH = REGISTRY.get("tanh")

__all__ = [
    "Activation",
    "ActivationRegistry",
    "REGISTRY",
    "RELU",
    "SIGMOID",
    "TANH",
    "relu",
    "relu_prime",
    "sigmoid",
    "sigmoid_prime",
    "tanh",
    "tanh_prime",
]
