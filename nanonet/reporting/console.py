"""Plain-text progress board for training runs."""

from __future__ import annotations

import sys
from typing import Iterable, Mapping, TextIO, Tuple

from ..core.linalg import Vector
from ..core.network import NeuralNet


class ResultsTable:
    """Print expected and actual labels for every example at each reported epoch.

    With ``show_network`` the current weights and biases follow the table.
    """

    def __init__(
        self,
        network: NeuralNet,
        examples: Iterable[Tuple[Vector, object]],
        *,
        show_rows: bool = True,
        show_network: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.network = network
        self.examples = list(examples)
        self.show_rows = show_rows
        self.show_network = show_network
        self.stream = stream

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream or sys.stdout)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self._print(f"Epoch {epoch}\tCorrect: {int(metrics['correct'])}/{int(metrics['total'])}")
        if self.show_rows:
            for inputs, expected in self.examples:
                actual = self.network.infer(inputs)
                marker = "" if actual == expected else "\t<- wrong"
                self._print(f"Expected: {expected}\tActual: {actual}{marker}")
        if self.show_network:
            self._print()
            self._print(self.network.format_parameters())
        self._print()

    __call__ = on_epoch
