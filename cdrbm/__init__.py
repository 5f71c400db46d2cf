"""This module contains a small, self-contained binary Restricted Boltzmann Machine.

It can be trained with single-step Contrastive Divergence on 0/1 data, run in both directions (visible -> hidden and
hidden -> visible), and "daydream" new visible samples via Gibbs sampling. Randomness is injected through sampler
objects, so runs can be made fully reproducible.
"""
from .errors import InvalidDimension, RBMError, ShapeMismatch
from .rbm import CDTrainer, RBM
