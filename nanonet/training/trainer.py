"""Epoch driver that trains a network until it classifies every example."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence, Tuple

from ..core.errors import InvalidArgumentError
from ..core.linalg import Vector
from ..core.network import NeuralNet
from ..core.types import Encoder, RunResult, T
from .metrics import evaluate

DEFAULT_MAX_EPOCHS = 200_000
DEFAULT_REPORT_EVERY = 1000


@dataclass
class Trainer:
    """Repeatedly apply full-batch updates until the network is correct on every example.

    Each epoch is one :meth:`NeuralNet.train` call over the whole example
    set.  Callbacks exposing ``on_epoch(epoch, metrics)`` (or plain
    callables with that signature) are notified every ``report_every``
    epochs and once more when the run stops.
    """

    network: NeuralNet
    encode: Encoder
    callbacks: Sequence[object] = field(default_factory=list)
    equals: Callable[[object, object], bool] = operator.eq

    def run(
        self,
        examples: Iterable[Tuple[Vector, T]],
        *,
        max_epochs: int = DEFAULT_MAX_EPOCHS,
        report_every: int = DEFAULT_REPORT_EVERY,
        eval_examples: Optional[Iterable[Tuple[Vector, T]]] = None,
    ) -> RunResult:
        if max_epochs <= 0:
            raise InvalidArgumentError(f"max_epochs must be positive, got {max_epochs}")
        if report_every <= 0:
            raise InvalidArgumentError(f"report_every must be positive, got {report_every}")

        batch = list(examples)
        if not batch:
            raise InvalidArgumentError("cannot train on an empty example set")
        eval_set = list(eval_examples) if eval_examples is not None else batch

        metrics = self._evaluate(eval_set)
        epoch = 0
        while not self._all_correct(metrics) and epoch < max_epochs:
            if epoch % report_every == 0:
                self._emit_epoch(epoch, metrics)
            self.network.train(batch, self.encode)
            epoch += 1
            metrics = self._evaluate(eval_set)
        self._emit_epoch(epoch, metrics)

        return RunResult(
            epochs=epoch,
            correct=int(metrics["correct"]),
            total=int(metrics["total"]),
            converged=self._all_correct(metrics),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _evaluate(self, examples: Sequence[Tuple[Vector, T]]) -> Mapping[str, float]:
        return evaluate(self.network, examples, self.encode, equals=self.equals)

    @staticmethod
    def _all_correct(metrics: Mapping[str, float]) -> bool:
        return metrics["correct"] == metrics["total"]

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["DEFAULT_MAX_EPOCHS", "DEFAULT_REPORT_EVERY", "Trainer"]
