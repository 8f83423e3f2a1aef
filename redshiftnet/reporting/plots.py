"""Loss-curve figure for a training pass, rendered headless."""

from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np


def running_mean(values: List[float]) -> np.ndarray:
    """Mean of ``values[:k + 1]`` for every ``k``."""

    arr = np.asarray(values, dtype=np.float64)
    return np.cumsum(arr) / np.arange(1, arr.size + 1)


class PlotAdapter:
    """Step callback that records the per-example MSE trace.

    :meth:`close` draws the raw trace, its running mean and, when given, the
    holdout validation and benchmark MSE as horizontal reference lines.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.losses: List[float] = []

    def on_step(self, step: int, metrics) -> None:
        if self.enable_plots:
            self.losses.append(float(metrics["loss"]))

    __call__ = on_step

    def close(
        self,
        *,
        validation_mse: float | None = None,
        benchmark_mse: float | None = None,
    ) -> Path | None:
        if not self.enable_plots or not self.losses:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        examples = np.arange(len(self.losses))
        fig, ax = plt.subplots(figsize=(8, 4))
        ax.plot(examples, self.losses, linewidth=0.5, alpha=0.4, label="example MSE")
        ax.plot(examples, running_mean(self.losses), linewidth=1.5, label="running mean")
        if validation_mse is not None:
            ax.axhline(validation_mse, color="tab:green", linestyle="--", label="holdout")
        if benchmark_mse is not None:
            ax.axhline(benchmark_mse, color="tab:red", linestyle=":", label="benchmark")
        ax.set_xlabel("example index")
        ax.set_ylabel("0.5 * (prediction - label)^2")
        ax.set_title(f"redshift regression, {len(self.losses)} steps")
        ax.legend(loc="upper right")
        self.run_dir.mkdir(parents=True, exist_ok=True)
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path, dpi=100, bbox_inches="tight")
        plt.close(fig)
        return plot_path


__all__ = ["PlotAdapter", "running_mean"]
