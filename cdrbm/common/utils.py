from collections.abc import Iterable

import numpy as np
from matplotlib import pyplot as plt


def plot_learning_curves(metrics: dict[str, np.ndarray],
                         keys: Iterable[str] | None = None,
                         log_scale: bool = False):
    """Basic plots for metrics of interest.

    Parameters:
        metrics: Dictionary as returned by a Trainer object's train_model function (or RBM.train).
        keys: Plots are made for each metric named in here. Defaults to all metrics.
        log_scale: If True, use a logarithmic y axis. Reconstruction error usually drops by orders of magnitude.
    """
    if keys is None:
        keys = metrics.keys()
    for key in keys:
        plt.figure(figsize=(12, 3))
        plt.plot(metrics[key])
        if log_scale:
            plt.yscale("log")
        plt.title(key)
        plt.xlabel("Epoch")
        plt.show()
