from collections.abc import Iterable

import numpy as np
import torch

from .sampling import Sampler
from ..errors import ShapeMismatch
from ..types import AugmentedBatchFloat, MatrixLike


# sigmoid(30) is 1 - 9e-14 in float64, so clamping here keeps probabilities strictly inside (0, 1)
LOGIT_CLAMP = 30.


def logistic(activations: torch.Tensor) -> torch.Tensor:
    """Elementwise 1 / (1 + exp(-x)), saturating instead of overflowing for extreme inputs."""
    return torch.sigmoid(activations.clamp(-LOGIT_CLAMP, LOGIT_CLAMP))


def binarize(probs: torch.Tensor,
             uniform_sampler: Sampler) -> torch.Tensor:
    """Turn each unit on with its given probability.

    One uniform draw is used per entry; a unit is on (1.0) iff its probability is strictly larger than the draw.
    """
    draws = uniform_sampler.sample(probs.shape).to(device=probs.device, dtype=probs.dtype)
    return (probs > draws).to(probs.dtype)


def add_bias(data: torch.Tensor) -> AugmentedBatchFloat:
    """Prepend a column of ones (the bias unit) to a batch. Returns a new tensor."""
    ones = torch.ones(data.shape[0], 1, dtype=data.dtype, device=data.device)
    return torch.cat((ones, data), dim=1)


def strip_bias(data: AugmentedBatchFloat) -> torch.Tensor:
    """Drop the bias column again."""
    return data[:, 1:].clone()


def pin_bias(data: AugmentedBatchFloat) -> AugmentedBatchFloat:
    """Set the bias column of an augmented batch back to 1, in-place. Returns the same tensor for convenience."""
    data[:, 0] = 1.
    return data


def as_sample_matrix(data: MatrixLike,
                     n_units: int,
                     dtype: torch.dtype = torch.float64,
                     name: str = "data") -> torch.Tensor:
    """Validate a batch of unit states and convert it to a private 2D tensor.

    The result never shares memory with the input, so callers' data can't be modified by anything we do afterwards.

    Parameters:
        data: Nested sequences, numpy array or tensor. Rows are examples, columns are units.
        n_units: Required number of columns.
        dtype: Dtype of the returned tensor.
        name: Used in error messages only.
    """
    if isinstance(data, torch.Tensor):
        matrix = data.detach().to(dtype=dtype, copy=True)
    elif isinstance(data, np.ndarray):
        if data.dtype == object:
            raise ShapeMismatch(f"{name} has ragged rows")
        matrix = torch.tensor(data, dtype=dtype)
    else:
        if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
            raise ShapeMismatch(f"{name} must be a matrix (sequence of rows), got {type(data).__name__}")
        rows = list(data)
        widths = set()
        for row in rows:
            if isinstance(row, (str, bytes)) or not hasattr(row, "__len__"):
                raise ShapeMismatch(f"{name} must be a matrix (sequence of rows), got a row of type "
                                    f"{type(row).__name__}")
            widths.add(len(row))
        if len(widths) > 1:
            raise ShapeMismatch(f"{name} has ragged rows with lengths {sorted(widths)}")
        matrix = torch.tensor([list(row) for row in rows], dtype=dtype)

    if matrix.ndim != 2:
        raise ShapeMismatch(f"{name} must be 2-dimensional, got shape {tuple(matrix.shape)}")
    if matrix.shape[0] == 0:
        raise ShapeMismatch(f"{name} must contain at least one row")
    if matrix.shape[1] != n_units:
        raise ShapeMismatch(f"{name} rows have length {matrix.shape[1]}, expected {n_units}")
    return matrix
