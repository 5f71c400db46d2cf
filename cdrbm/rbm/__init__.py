"""This module contains the binary Restricted Boltzmann Machine and its Contrastive Divergence trainer.

The RBM keeps its biases inside the weight matrix (an extra row and column for a constant bias unit). Training uses
CD-1 on the full training set per epoch; sampling uses alternating Gibbs steps.
"""
from .model import RBM
from .trainer import CDTrainer
