"""Headless-safe training curve plots."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple


class PlotAdapter:
    """Collect per-epoch accuracy and loss, and optionally draw them with matplotlib."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics) -> None:
        if not self.enable_plots:
            return
        accuracy = float(metrics.get("accuracy", 0.0))
        loss = float(metrics.get("loss", 0.0))
        self._history.append((epoch, accuracy, loss))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, accuracies, losses = zip(*self._history)
        fig, (ax_acc, ax_loss) = plt.subplots(2, 1, sharex=True)
        ax_acc.plot(epochs, accuracies)
        ax_acc.set_ylabel("Accuracy")
        ax_acc.set_ylim(0.0, 1.05)
        ax_loss.plot(epochs, losses)
        ax_loss.set_ylabel("Squared error")
        ax_loss.set_xlabel("Epoch")
        ax_acc.set_title("Training Curve")
        plot_path = self.run_dir / "training.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch
