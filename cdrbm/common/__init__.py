"""This module contains functionalities that are shared by the RBM engine and its trainer.

This concerns the Trainer base class (fixed-epoch loop, reporting, checkpointing) on one hand, and the small numerical
building blocks (logistic activation, binarization, bias handling, random sources) on the other.
"""
from .fun import add_bias, as_sample_matrix, binarize, logistic, pin_bias, strip_bias, LOGIT_CLAMP
from .sampling import NormalSampler, Sampler, SequenceSampler, UniformSampler
from .training import Checkpointer, EpochCallback, TrainerBase
from .utils import plot_learning_curves
