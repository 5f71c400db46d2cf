from __future__ import annotations

import os
from collections import defaultdict
from collections.abc import Callable
from time import perf_counter
from typing import Generic, TypeVar

import numpy as np
import torch
from torch import nn
from torch.utils.tensorboard import SummaryWriter
from tqdm.auto import tqdm

from ..types import VisibleBatchFloat
from ..visualization import plot_sample_grid


Model = TypeVar("Model", bound=nn.Module)
EpochCallback = Callable[[int, dict[str, float]], None]


class TrainerBase(Generic[Model]):
    def __init__(self,
                 model: Model,
                 n_epochs: int,
                 plot_every_n_epochs: int | None = None,
                 plot_figsize: tuple[int, int] = (12, 4),
                 plot_n_samples: int = 20,
                 checkpointer: Checkpointer | None = None,
                 callback: EpochCallback | None = None,
                 verbose: bool = True,
                 report_every: int = 1,
                 use_tqdm: bool = False,
                 tensorboard_logdir: str | None = None,
                 tensorboard_figures: bool = False,
                 suppress_plots: bool = False):
        """Base class for training models with a fixed number of full-batch epochs.

        Any Trainer for a specific kind of model should inherit from this and implement the core_step function. There
        is no early stopping and no validation set: the loop always runs for exactly n_epochs.

        Parameters:
            model: The model to train.
            n_epochs: Number of training iterations. Each one sees the full training set once.
            plot_every_n_epochs: Every so often, it makes sense to e.g. plot some generated samples from the model.
                                 The Trainer class should implement the plot_examples method. Pass None to disable
                                 plotting.
            plot_figsize: Figure size for regular plots.
            plot_n_samples: How many samples to generate for each plot.
            checkpointer: If given, checkpoints will be stored at the desired frequency (determined by the checkpoint
                          object). In addition, we will save a checkpoint with _final suffix at the end of training.
            callback: Called after every epoch with the epoch index and a dictionary of that epoch's metrics.
            verbose: If True, report on training progress throughout.
            report_every: With verbose, print a metrics line only every this many epochs. The last epoch is always
                          reported.
            use_tqdm: If True, and verbose is also True, show a progress bar over epochs.
            tensorboard_logdir: If given, will log training metrics to the specified directory for visualization with
                                TensorBoard. Pass None to disable logging.
            tensorboard_figures: If True, save figures generated in plot_examples to tensorboard logs. Does nothing if
                                 tensorboard_logdir is not given.
            suppress_plots: If True, and tensorboard_figures is True, figures will *only* be stored in tensorboard, and
                            not plotted to output (e.g. in a notebook). No effect if tensorboard_figures is False.
        """
        self.model = model
        self.n_epochs = n_epochs

        self.plot_every_n_epochs = plot_every_n_epochs
        self.plot_figsize = plot_figsize
        self.plot_n_samples = plot_n_samples

        self.checkpointer = checkpointer
        self.callback = callback
        self.verbose = verbose
        if report_every < 1:
            raise ValueError(f"report_every must be at least 1, you passed {report_every}")
        self.report_every = report_every
        self.use_tqdm = use_tqdm

        if tensorboard_logdir is not None:
            self.writer = SummaryWriter(tensorboard_logdir)
        else:
            self.writer = None
        self.tensorboard_figures = tensorboard_figures
        self.suppress_plots = suppress_plots

    def train_model(self) -> dict[str, np.ndarray]:
        """The main training loop + housekeeping.

        Returns:
            Dictionary mapping each metric name to a numpy array of per-epoch results.
        """
        if self.verbose:
            print(f"Running {self.n_epochs} epochs.")
        start_time = perf_counter()

        full_metrics = defaultdict(list)
        for epoch_ind in tqdm(iterable=range(self.n_epochs), desc="Overall progress", leave=True,
                              disable=not self.use_tqdm or not self.verbose):
            if self.plot_every_n_epochs is not None and not epoch_ind % self.plot_every_n_epochs:
                self.plot_examples(epoch_ind)
            epoch_metrics = self.train_epoch(epoch_ind)
            self.finish_epoch(full_metrics, epoch_metrics, epoch_ind)

        if self.checkpointer is not None:
            self.checkpointer.save_final()
        if self.writer is not None:
            self.writer.close()
        if self.verbose:
            print(f"Training done. Time taken: {perf_counter() - start_time:.4g} seconds")
        return {key: np.array(values) for key, values in full_metrics.items()}

    def train_epoch(self,
                    epoch_ind: int) -> dict[str, float]:
        """One training iteration. Returns a dictionary mapping metric names to plain floats."""
        with torch.no_grad():
            epoch_metrics = self.core_step()
        return {key: float(value) for key, value in epoch_metrics.items()}

    def finish_epoch(self,
                     full_run_metrics: dict[str, list[float]],
                     epoch_metrics: dict[str, float],
                     epoch_ind: int):
        """Bunch of housekeeping after each epoch.

        This function:
            - Collects metrics in one place.
            - Reports on progress.
            - Optionally writes Tensorboard summaries.
            - Calls the user callback and checkpointer.

        Parameters:
            full_run_metrics: Should be the dictionary created at the start of train_model. This is modified in-place
                              inside this function.
            epoch_metrics: As returned from the last train_epoch call.
            epoch_ind: The index of the epoch (wow).
        """
        for key, value in epoch_metrics.items():
            full_run_metrics[key].append(value)
            if self.writer is not None:
                self.writer.add_scalar(key, value, epoch_ind)

        is_last = epoch_ind == self.n_epochs - 1
        if self.verbose and (not epoch_ind % self.report_every or is_last):
            self.report(epoch_metrics, epoch_ind)
        if self.writer is not None and (not epoch_ind % self.report_every or is_last):
            self.writer.flush()
        if self.callback is not None:
            self.callback(epoch_ind, epoch_metrics)
        if self.checkpointer is not None:
            self.checkpointer.maybe_checkpoint(epoch_ind)

    def report(self,
               epoch_metrics: dict[str, float],
               epoch_ind: int):
        """Print one line of progress. Subclasses may phrase this differently."""
        metrics_str = ", ".join(f"{key}: {value:.6g}" for key, value in epoch_metrics.items())
        print(f"Epoch {epoch_ind}: {metrics_str}")

    def core_step(self) -> dict[str, torch.Tensor | float]:
        """Main logic for one training iteration. Not implemented as it is model-dependent.

        Generally this function should apply the parameter update for one epoch and return a dictionary mapping names
        to scalar metrics (e.g. reconstruction error). It is run inside torch.no_grad().
        """
        raise NotImplementedError

    def plot_examples(self,
                      epoch_ind: int | None = None):
        """This function is called every couple epochs. You can really do whatever you want in here.

        But it is intended to visually show model progress, e.g. through plotting some generated samples.
        """
        pass

    def plot_generated_grid(self,
                            generated: VisibleBatchFloat,
                            epoch_ind: int | None = None,
                            title: str = "Generations"):
        """Standard function to display generated samples, shared by subclasses."""
        plot_sample_grid(generated, figure_size=self.plot_figsize, title=title, writer=self.writer,
                         epoch_ind=epoch_ind, tensorboard_figures=self.tensorboard_figures,
                         suppress_plots=self.suppress_plots)


class Checkpointer:
    def __init__(self,
                 model: nn.Module,
                 directory: str,
                 checkpoint_name: str,
                 frequency: int):
        """Regularly saves model weights (via state_dict) during training.

        Parameters:
            model: Model to store checkpoints for.
            directory: Path to store checkpoints to. Will be created if non-existent.
            checkpoint_name: Base name for each checkpoint file. Epoch indices will be appended.
            frequency: Will create a checkpoint every this many epochs.
        """
        if frequency < 1:
            raise ValueError(f"frequency must be at least 1, you passed {frequency}")
        self.model = model
        self.directory = directory
        self.checkpoint_name = checkpoint_name
        self.frequency = frequency
        if not os.path.exists(directory):
            os.makedirs(directory)

    def maybe_checkpoint(self,
                         epoch_ind: int) -> str | None:
        """Create a new checkpoint if the trigger has been met. Returns the path if a file was written.

        Parameters:
            epoch_ind: Self-explanatory.
        """
        if not epoch_ind % self.frequency:
            path = os.path.join(self.directory, self.checkpoint_name + f"_{epoch_ind:04}.pt")
            torch.save(self.model.state_dict(), path)
            return path
        return None

    def save_final(self) -> str:
        """Store the weights after training under the _final suffix."""
        path = os.path.join(self.directory, self.checkpoint_name + "_final.pt")
        torch.save(self.model.state_dict(), path)
        return path
