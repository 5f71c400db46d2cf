import numpy as np
import torch
from matplotlib import pyplot as plt
from torch.utils.tensorboard import SummaryWriter

from ..types import VisibleBatchFloat


def plot_sample_grid(samples: VisibleBatchFloat,
                     figure_size: tuple[int, int],
                     title: str,
                     unit_labels: list[str] | None = None,
                     colormap: str = "Greys",
                     writer: SummaryWriter | None = None,
                     epoch_ind: int | None = None,
                     tensorboard_figures: bool = False,
                     suppress_plots: bool = False):
    """Show a batch of unit states as one image, one row per sample and one column per unit.

    RBM samples are flat binary vectors, so unlike image models there is nothing to reshape; the batch itself is the
    picture. Dark cells are units that are on.

    Parameters:
        samples: Batch of visible (or hidden) states/probabilities, values in [0, 1].
        figure_size: The size of the figure.
        title: Will be used as figure title as well as for naming Tensorboard summaries.
        unit_labels: If given, used as x tick labels (one per unit).
        colormap: Which colormap to use.
        Other arguments: Please see cdrbm.common.TrainerBase. Everything below writer is only used if that is not None.
    """
    with torch.inference_mode():
        samples = np.clip(torch.as_tensor(samples).cpu().numpy(), 0, 1)

    figure = plt.figure(figsize=figure_size)
    plt.imshow(samples, vmin=0, vmax=1, cmap=colormap, aspect="auto", interpolation="nearest")
    plt.ylabel("Sample")
    if unit_labels is not None:
        plt.xticks(range(len(unit_labels)), unit_labels, rotation=45)
    else:
        plt.xlabel("Unit")
    plt.title(title)

    if writer is not None and tensorboard_figures and epoch_ind is not None:
        writer.add_figure(title, figure, epoch_ind, close=suppress_plots)
        if suppress_plots:
            return
    plt.show()
