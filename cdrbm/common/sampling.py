from collections.abc import Iterable
from typing import Protocol

import torch


class Sampler(Protocol):
    """Anything that produces a tensor of independent random draws of a requested shape.

    This matches the sample() interface of torch.distributions.Distribution, so e.g. td.Normal(0., 0.1) can be passed
    wherever a Sampler is expected.
    """
    def sample(self,
               sample_shape: torch.Size | tuple[int, ...] = torch.Size()) -> torch.Tensor:
        ...


class _GeneratorSampler:
    def __init__(self,
                 seed: int | None = None):
        """Base for samplers that optionally own a private random generator.

        Parameters:
            seed: If given, draws come from a torch.Generator seeded with this value, independent of the global torch
                  random state. Pass None to use the global generator (so torch.manual_seed applies).
        """
        self.seed = seed
        if seed is not None:
            self.generator = torch.Generator()
            self.generator.manual_seed(seed)
        else:
            self.generator = None


class UniformSampler(_GeneratorSampler):
    """Uniform draws from [0, 1). Used for every stochastic binarization decision."""
    def sample(self,
               sample_shape: torch.Size | tuple[int, ...] = torch.Size()) -> torch.Tensor:
        return torch.rand(sample_shape, generator=self.generator, dtype=torch.float64)


class NormalSampler(_GeneratorSampler):
    def __init__(self,
                 mean: float = 0.,
                 std: float = 0.1,
                 seed: int | None = None):
        """Gaussian draws N(mean, std). Used to initialize the weights.

        Parameters:
            mean: Mean of the distribution.
            std: Standard deviation (not variance!).
            seed: See _GeneratorSampler.
        """
        super().__init__(seed)
        if std < 0:
            raise ValueError(f"std must be non-negative, you passed {std}")
        self.mean = mean
        self.std = std

    def sample(self,
               sample_shape: torch.Size | tuple[int, ...] = torch.Size()) -> torch.Tensor:
        draws = torch.randn(sample_shape, generator=self.generator, dtype=torch.float64)
        return self.mean + self.std * draws


class SequenceSampler:
    def __init__(self,
                 values: Iterable[float]):
        """Deterministic "random" source that cycles through a fixed list of values.

        Draws are handed out in row-major order, continuing where the previous call stopped. Mostly useful to make
        training and sampling fully reproducible in tests.

        Parameters:
            values: The numbers to hand out. Must not be empty.
        """
        self.values = torch.as_tensor(list(values), dtype=torch.float64)
        if self.values.ndim != 1 or not len(self.values):
            raise ValueError("SequenceSampler needs a non-empty, flat sequence of values")
        self.position = 0

    def sample(self,
               sample_shape: torch.Size | tuple[int, ...] = torch.Size()) -> torch.Tensor:
        n_draws = int(torch.Size(sample_shape).numel())
        indices = (torch.arange(n_draws) + self.position) % len(self.values)
        self.position = (self.position + n_draws) % len(self.values)
        return self.values[indices].view(sample_shape)

    def reset(self):
        """Start handing out values from the beginning again."""
        self.position = 0
