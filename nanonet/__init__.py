"""nanonet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import DimensionMismatchError, InvalidArgumentError
from .core.linalg import Matrix, Vector
from .core.network import NeuralNet
from .core.types import NetworkParameters, RunResult
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "DimensionMismatchError",
    "InvalidArgumentError",
    "Matrix",
    "NetworkParameters",
    "NeuralNet",
    "RunResult",
    "Trainer",
    "Vector",
    "activations",
    "load_preset",
    "presets",
    "run_pipeline",
    "types",
]
