import torch

from .model import RBM
from ..common import TrainerBase, add_bias, binarize, pin_bias
from ..types import AugmentedBatchFloat, ScalarFloat, VisibleBatchFloat


class CDTrainer(TrainerBase[RBM]):
    def __init__(self,
                 training_data: VisibleBatchFloat,
                 **kwargs):
        """Trainer for binary RBMs using single-step Contrastive Divergence (CD-1).

        Each epoch is one full-batch update: there is no mini-batching, momentum or weight decay. The data is clamped
        to the visible units (positive phase), hidden states are sampled and used to reconstruct the visible units,
        and the hidden probabilities are recomputed from the reconstruction (negative phase). The difference of the
        two association matrices approximates the log-likelihood gradient.

        Parameters:
            training_data: Validated num_examples x num_visible matrix. A bias-augmented copy is kept; this tensor itself
                           is not modified.
        """
        super().__init__(**kwargs)
        self.training_data = add_bias(training_data)
        self.num_examples = training_data.shape[0]

    def core_step(self) -> dict[str, ScalarFloat]:
        """One CD-1 update of the weight matrix.

        We use the activation *probabilities* of the hidden units, not their binary states, when computing the
        associations. This reduces sampling noise in the gradient estimate. See section 3 of Hinton's "A Practical
        Guide to Training Restricted Boltzmann Machines".
        """
        data = self.training_data

        # positive phase: clamp to the data and sample the hidden units
        pos_hidden_probs = self.model.to_hidden_p(data)
        pos_hidden_states = pin_bias(binarize(pos_hidden_probs, self.model.uniform_sampler))
        pos_associations = data.T @ pos_hidden_probs

        # negative phase: reconstruct the visible units and go up once more
        neg_visible_probs = self.reconstruct(pos_hidden_states)
        neg_hidden_probs = self.model.to_hidden_p(neg_visible_probs)
        neg_associations = neg_visible_probs.T @ neg_hidden_probs

        update = self.model.learning_rate * (pos_associations - neg_associations) / self.num_examples
        self.model.weight_matrix.add_(update)
        self.model.weight_matrix[0, 0] = 0.

        error = ((data - neg_visible_probs) ** 2).sum()
        return {"reconstruction_error": error}

    def reconstruct(self,
                    hidden_states: AugmentedBatchFloat) -> AugmentedBatchFloat:
        """Visible probabilities given hidden states, with the visible bias pinned to 1 so it can't drift."""
        return pin_bias(self.model.to_visible_p(hidden_states))

    def report(self,
               epoch_metrics: dict[str, float],
               epoch_ind: int):
        print(f"Epoch {epoch_ind}: reconstruction error is {epoch_metrics['reconstruction_error']:.6g}")

    def plot_examples(self,
                      epoch_ind: int | None = None):
        with torch.inference_mode():
            generated = self.model.daydream(self.plot_n_samples)
        self.plot_generated_grid(generated, epoch_ind, title=f"Daydream samples, epoch {epoch_ind}")
