"""Metric helpers for the epoch driver."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from ..core.errors import InvalidArgumentError
from ..core.linalg import Vector
from ..core.network import NeuralNet
from ..core.types import Encoder, T


def squared_error(output: Vector, desired: Vector) -> float:
    """Mean squared difference between ``output`` and ``desired``."""

    diff = output - desired
    return diff.dot(diff) / len(diff) if len(diff) else 0.0


def evaluate(
    network: NeuralNet,
    examples: Iterable[Tuple[Vector, T]],
    encode: Optional[Encoder] = None,
    *,
    equals: Callable[[T, T], bool] = lambda a, b: a == b,
) -> Mapping[str, float]:
    """Classify every example once and summarise the results.

    ``loss`` is only reported when ``encode`` is given; it averages the
    squared error of the raw output against the encoded label.
    """

    correct = 0
    total = 0
    loss = 0.0
    for inputs, label in examples:
        output = network.forward(inputs)
        if equals(network.decode(output), label):
            correct += 1
        if encode is not None:
            loss += squared_error(output, encode(label))
        total += 1
    if total == 0:
        raise InvalidArgumentError("cannot evaluate an empty example set")
    metrics: Dict[str, float] = {
        "correct": float(correct),
        "total": float(total),
        "accuracy": correct / total,
    }
    if encode is not None:
        metrics["loss"] = loss / total
    return metrics


__all__ = ["evaluate", "squared_error"]
