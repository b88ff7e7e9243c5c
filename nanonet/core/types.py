"""Core typing contracts for nanonet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple, TypeVar

import numpy as np

from .linalg import Matrix, Vector

Array = np.ndarray
T = TypeVar("T")

Example = Tuple[Vector, T]
Encoder = Callable[[T], Vector]
Decoder = Callable[[Vector], T]


@dataclass(frozen=True)
class NetworkParameters:
    """The trainable state of a one-hidden-layer network.

    ``input_weights`` is ``hidden_size x input_size`` and ``hidden_weights``
    is ``output_size x hidden_size``; the bias vectors match their layers.
    """

    input_weights: Matrix
    hidden_biases: Vector
    hidden_weights: Matrix
    output_biases: Vector

    def as_arrays(self) -> Dict[str, Array]:
        return {
            "input_weights": self.input_weights.to_numpy(),
            "hidden_biases": self.hidden_biases.to_numpy(),
            "hidden_weights": self.hidden_weights.to_numpy(),
            "output_biases": self.output_biases.to_numpy(),
        }


@dataclass(frozen=True)
class ForwardState:
    """Intermediate values captured during a forward pass."""

    hidden_pre: Vector
    hidden: Vector
    output_pre: Vector
    output: Vector


@dataclass(frozen=True)
class ModelDescription:
    """Description of the network architecture."""

    input_size: int
    hidden_size: int
    output_size: int
    hidden_activation: str
    output_activation: str

    @property
    def parameter_count(self) -> int:
        return (
            self.hidden_size * self.input_size
            + self.hidden_size
            + self.output_size * self.hidden_size
            + self.output_size
        )


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`nanonet.training.trainer.Trainer.run`."""

    epochs: int
    correct: int
    total: int
    converged: bool
    metrics_path: str = ""
    manifest_path: str = ""


__all__ = [
    "Array",
    "Decoder",
    "Encoder",
    "Example",
    "ForwardState",
    "ModelDescription",
    "NetworkParameters",
    "RunResult",
]
