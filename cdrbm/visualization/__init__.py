"""In this module you can find helpers for visualizing RBM samples."""
from .samples import plot_sample_grid
