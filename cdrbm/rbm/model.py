from numbers import Integral, Real
from threading import RLock

import numpy as np
import torch
from torch import nn

from ..common import NormalSampler, Sampler, UniformSampler
from ..common import add_bias, as_sample_matrix, binarize, logistic, pin_bias, strip_bias
from ..errors import InvalidDimension, ShapeMismatch
from ..types import AugmentedBatchFloat, HiddenBatchFloat, MatrixLike, VisibleBatchFloat, WeightMatrixFloat


def check_positive_int(name: str,
                       value: int):
    """Raise InvalidDimension unless value is an integer >= 1 (bools don't count)."""
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
        raise InvalidDimension(f"{name} must be a positive integer, you passed {value!r}")


class RBM(nn.Module):
    def __init__(self,
                 num_visible: int,
                 num_hidden: int,
                 learning_rate: float = 0.1,
                 weight_sampler: Sampler | None = None,
                 uniform_sampler: Sampler | None = None,
                 dtype: torch.dtype = torch.float64):
        """Binary RBM with bias units folded into the weight matrix.

        The weight matrix has shape (num_visible + 1) x (num_hidden + 1). Row 0 holds the hidden biases, column 0 the
        visible biases, and entry [0, 0] connects the two bias units; it stays 0 forever. Every input gets a leading
        column of ones before being multiplied with the weights, so biases need no special treatment anywhere.

        Parameters:
            num_visible: Number of visible units.
            num_hidden: Number of hidden units to use.
            learning_rate: Step size for the contrastive divergence updates.
            weight_sampler: Source of the initial (non-bias) weights. Defaults to N(0, 0.1).
            uniform_sampler: Source of uniform [0, 1) numbers, one per binarization decision. Defaults to torch's
                             global random generator. Swap in a SequenceSampler for fully reproducible runs.
            dtype: Floating point type for weights and computations. float64 keeps probabilities strictly inside
                   (0, 1) even for saturated units.
        """
        super().__init__()
        check_positive_int("num_visible", num_visible)
        check_positive_int("num_hidden", num_hidden)
        if isinstance(learning_rate, bool) or not isinstance(learning_rate, Real) or not learning_rate > 0:
            raise InvalidDimension(f"learning_rate must be a positive number, you passed {learning_rate!r}")

        self.num_visible = num_visible
        self.num_hidden = num_hidden
        self.learning_rate = float(learning_rate)
        self.dtype = dtype
        if weight_sampler is None:
            weight_sampler = NormalSampler(0., 0.1)
        if uniform_sampler is None:
            uniform_sampler = UniformSampler()
        self.uniform_sampler = uniform_sampler

        weights = torch.zeros(num_visible + 1, num_hidden + 1, dtype=dtype)
        weights[1:, 1:] = weight_sampler.sample((num_visible, num_hidden)).to(dtype)
        self.register_buffer("weight_matrix", weights)
        # train() writes the weights, everything else reads them
        self._lock = RLock()

    @property
    def weights(self) -> WeightMatrixFloat:
        """A copy of the current weight matrix, bias row and column included."""
        with self._lock:
            return self.weight_matrix.detach().clone()

    def load_weights(self,
                     weights: MatrixLike):
        """Overwrite the weight matrix, e.g. with one saved from an earlier training run.

        Parameters:
            weights: Matrix of shape (num_visible + 1) x (num_hidden + 1) whose [0, 0] entry is 0.
        """
        new_weights = as_sample_matrix(weights, self.num_hidden + 1, dtype=self.dtype, name="weights")
        if new_weights.shape[0] != self.num_visible + 1:
            raise ShapeMismatch(f"weights have {new_weights.shape[0]} rows, expected {self.num_visible + 1}")
        if new_weights[0, 0] != 0:
            raise ValueError(f"weights[0][0] connects the two bias units and must be 0, got {new_weights[0, 0]}")
        with self._lock:
            self.weight_matrix.copy_(new_weights)

    def to_hidden_p(self,
                    visible: AugmentedBatchFloat) -> AugmentedBatchFloat:
        """Get conditional probabilities p(h|v) for bias-augmented visible states.

        Column 0 of the result belongs to the hidden bias unit and is meaningless; callers pin or strip it.
        """
        return logistic(visible @ self.weight_matrix)

    def to_visible_p(self,
                     hidden: AugmentedBatchFloat) -> AugmentedBatchFloat:
        """Get conditional probabilities p(v|h) for bias-augmented hidden states."""
        return logistic(hidden @ self.weight_matrix.T)

    def propagate(self,
                  data: MatrixLike,
                  direction: str = "up") -> torch.Tensor:
        """Sample one layer given the states of the other.

        Parameters:
            data: One row per example. Rows hold visible states for direction 'up', hidden states for 'down'.
            direction: 'up' samples hidden units from visible ones, 'down' samples visible units from hidden ones.

        Returns:
            Binary states of the sampled layer, without the bias column.
        """
        if direction == "up":
            n_in, to_probs, name = self.num_visible, self.to_hidden_p, "visible data"
        elif direction == "down":
            n_in, to_probs, name = self.num_hidden, self.to_visible_p, "hidden data"
        else:
            raise ValueError(f"Invalid direction {direction}. Valid are 'up', 'down'.")

        augmented = add_bias(self._as_input(data, n_in, name))
        with self._lock:
            probs = to_probs(augmented)
        states = binarize(probs, self.uniform_sampler)
        return strip_bias(states)

    def run_visible(self,
                    data: MatrixLike) -> HiddenBatchFloat:
        """Assuming the RBM has been trained, get a sample of the hidden units for each row of visible states."""
        return self.propagate(data, "up")

    def run_hidden(self,
                   data: MatrixLike) -> VisibleBatchFloat:
        """Assuming the RBM has been trained, get a sample of the visible units for each row of hidden states."""
        return self.propagate(data, "down")

    def gibbs_update(self,
                     visible: AugmentedBatchFloat) -> tuple[AugmentedBatchFloat, AugmentedBatchFloat]:
        """A single Gibbs update step, returning both new v and h values (bias-augmented, bias pinned to 1)."""
        p_h = self.to_hidden_p(visible)
        new_h = pin_bias(binarize(p_h, self.uniform_sampler))
        p_v = self.to_visible_p(new_h)
        new_v = pin_bias(binarize(p_v, self.uniform_sampler))
        return new_v, new_h

    def daydream(self,
                 num_samples: int,
                 return_probs: bool = False) -> VisibleBatchFloat:
        """Run one Markov chain of alternating Gibbs sampling and return the visible units at every step.

        The chain is initialized *once*, from uniform random numbers, so the samples are correlated. Note that the
        whole starting row comes from the uniform sampler, the bias slot included; every later state has its bias
        pinned to 1.

        Parameters:
            num_samples: Number of rows to return. The first is the random starting point, followed by
                         num_samples - 1 Gibbs steps.
            return_probs: If True, the last row holds the visible *probabilities* p(v|h) instead of binary states. This
                          gives a smoother, less noisy final sample. Earlier rows are always binary.
        """
        check_positive_int("num_samples", num_samples)
        width = self.num_visible + 1
        samples = torch.ones(num_samples, width, dtype=self.dtype, device=self.weight_matrix.device)
        samples[0] = self.uniform_sampler.sample((width,)).to(samples)

        with self._lock:
            new_h = None
            for ind in range(num_samples - 1):
                new_v, new_h = self.gibbs_update(samples[ind:ind + 1])
                samples[ind + 1] = new_v[0]
            if return_probs and new_h is not None:
                samples[-1] = self.to_visible_p(new_h)[0]
        return strip_bias(samples)

    def train(self,
              training_samples: MatrixLike,
              max_epochs: int = 1000,
              **trainer_kwargs) -> dict[str, np.ndarray]:
        """Train the RBM with CD-1 for exactly max_epochs full-batch iterations.

        Everything is validated before the first update, so a rejected call leaves the weights untouched. The caller's
        data is copied, never modified.

        NOTE this shadows nn.Module.train(mode); the engine has no train/eval distinction to toggle.

        Parameters:
            training_samples: Matrix of 0/1 values, one row per example, one column per visible unit.
            max_epochs: Number of training epochs.
            trainer_kwargs: Passed on to CDTrainer, e.g. verbose, report_every, use_tqdm, callback, checkpointer,
                            tensorboard_logdir.

        Returns:
            Dictionary with per-epoch metrics, see CDTrainer.
        """
        from .trainer import CDTrainer

        training_data = self._as_input(training_samples, self.num_visible, "training_samples")
        check_positive_int("max_epochs", max_epochs)
        trainer = CDTrainer(model=self, training_data=training_data, n_epochs=max_epochs, **trainer_kwargs)
        with self._lock:
            return trainer.train_model()

    def eval(self) -> "RBM":
        """No-op. nn.Module.eval would route through train(False), which means something else here."""
        return self

    def _as_input(self,
                  data: MatrixLike,
                  n_units: int,
                  name: str) -> torch.Tensor:
        return as_sample_matrix(data, n_units, dtype=self.dtype, name=name).to(self.weight_matrix.device)

    def extra_repr(self) -> str:
        return f"num_visible={self.num_visible}, num_hidden={self.num_hidden}, learning_rate={self.learning_rate}"
