"""Training loop, metrics and pipeline assembly."""

from .metrics import evaluate, squared_error
from .trainer import Trainer

__all__ = ["Trainer", "evaluate", "squared_error"]
