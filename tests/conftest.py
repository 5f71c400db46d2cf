"""Shared fixtures for the test suite."""
import matplotlib
matplotlib.use("Agg")

import pytest

from cdrbm import RBM
from cdrbm.common import SequenceSampler


MOVIE_DATA = [[1, 1, 1, 0, 0, 0],
              [1, 0, 1, 0, 0, 0],
              [1, 1, 1, 0, 0, 0],
              [0, 0, 1, 1, 1, 0],
              [0, 0, 1, 1, 1, 0],
              [0, 0, 1, 1, 1, 0]]


@pytest.fixture
def movie_data():
    """Six users, two clusters of liked movies."""
    return [list(row) for row in MOVIE_DATA]


@pytest.fixture
def small_rbm():
    """A 6 x 2 RBM with the default random sources."""
    return RBM(num_visible=6, num_hidden=2)


def make_deterministic_rbm(num_visible=6, num_hidden=2, learning_rate=0.1):
    """RBM whose weight init and binarization draws come from fixed sequences."""
    return RBM(num_visible, num_hidden, learning_rate=learning_rate,
               weight_sampler=SequenceSampler([0.05, -0.12, 0.08, -0.03, 0.11, -0.07, 0.02]),
               uniform_sampler=SequenceSampler([0.31, 0.77, 0.05, 0.52, 0.94, 0.18, 0.66, 0.43]))


@pytest.fixture
def deterministic_rbm():
    return make_deterministic_rbm()


@pytest.fixture
def rbm_factory():
    """Build fresh deterministic RBMs; two of them built with the same arguments start out identical."""
    return make_deterministic_rbm
