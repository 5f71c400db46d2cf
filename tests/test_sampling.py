"""Tests for the random sources."""
import pytest
import torch

from cdrbm.common import NormalSampler, SequenceSampler, UniformSampler


class TestSequenceSampler:
    """Tests for the deterministic sampler."""

    def test_cycles_and_continues(self):
        """Draws continue where the previous call stopped and wrap around."""
        sampler = SequenceSampler([0.1, 0.2, 0.3])
        assert sampler.sample((2,)).tolist() == [0.1, 0.2]
        assert sampler.sample((2, 2)).tolist() == [[0.3, 0.1], [0.2, 0.3]]

    def test_scalar_draw(self):
        sampler = SequenceSampler([0.4])
        draw = sampler.sample()
        assert draw.shape == torch.Size()
        assert draw.item() == 0.4

    def test_reset(self):
        sampler = SequenceSampler([0.1, 0.2])
        sampler.sample((1,))
        sampler.reset()
        assert sampler.sample((1,)).item() == 0.1

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            SequenceSampler([])


class TestUniformSampler:
    """Tests for uniform draws."""

    def test_range(self):
        draws = UniformSampler(seed=0).sample((1000,))
        assert (draws >= 0).all()
        assert (draws < 1).all()

    def test_seed_reproducible(self):
        a = UniformSampler(seed=42).sample((3, 3))
        b = UniformSampler(seed=42).sample((3, 3))
        assert torch.equal(a, b)

    def test_different_seeds_different_results(self):
        a = UniformSampler(seed=42).sample((3, 3))
        b = UniformSampler(seed=123).sample((3, 3))
        assert not torch.equal(a, b)


class TestNormalSampler:
    """Tests for Gaussian draws."""

    def test_moments(self):
        """Large samples have roughly the requested mean and standard deviation."""
        draws = NormalSampler(mean=1., std=0.1, seed=7).sample((20000,))
        assert abs(draws.mean().item() - 1.) < 0.01
        assert abs(draws.std().item() - 0.1) < 0.01

    def test_seed_reproducible(self):
        a = NormalSampler(seed=3).sample((4,))
        b = NormalSampler(seed=3).sample((4,))
        assert torch.equal(a, b)

    def test_negative_std_rejected(self):
        with pytest.raises(ValueError):
            NormalSampler(std=-1.)

    def test_distribution_objects_work_as_samplers(self):
        """torch.distributions objects follow the same sample() interface."""
        draws = torch.distributions.Normal(0., 0.1).sample((2, 3))
        assert draws.shape == (2, 3)
