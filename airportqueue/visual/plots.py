"""Plots of queue-length samples collected during a run."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from airportqueue.passenger import FareClass
from airportqueue.stats import StatsCollector


def plot_queue_lengths(stats: StatsCollector, path: str | Path) -> Path:
    """Save a step plot of both class queues' sampled lengths to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 4))
    try:
        for fare_class in FareClass:
            samples = stats.queue_length_samples[fare_class]
            ax.step(samples.times(), samples.raw_values(), where="post", label=str(fare_class))
        ax.set_xlabel("Simulated time (s)")
        ax.set_ylabel("Queue length")
        ax.set_title("Queue length samples")
        ax.grid(True, alpha=0.3)
        ax.legend()
        fig.tight_layout()
        fig.savefig(path)
    finally:
        plt.close(fig)
    return path
