"""Console demo: learn two "genres" from six users' movie likes, then query and daydream."""
import argparse
import os

import torch
import yaml

from . import RBM
from .common import NormalSampler, UniformSampler, plot_learning_curves
from .visualization import plot_sample_grid

CONFIG_FILE = os.path.join(os.path.dirname(__file__), "config.yaml")

MOVIES = ["Harry Potter", "Avatar", "LOTR 3", "Gladiator", "Titanic", "Glitter"]
# first three users are fantasy fans, last three like oscar winners
TRAINING_DATA = [[1, 1, 1, 0, 0, 0],
                 [1, 0, 1, 0, 0, 0],
                 [1, 1, 1, 0, 0, 0],
                 [0, 0, 1, 1, 1, 0],
                 [0, 0, 1, 1, 1, 0],
                 [0, 0, 1, 1, 1, 0]]
NEW_USER = [[0, 0, 0, 1, 1, 0]]


def load_config(path: str = CONFIG_FILE) -> dict:
    """Load YAML configuration file."""
    with open(path, "r") as f:
        return yaml.safe_load(f)


def build_parser(config: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Restricted Boltzmann Machine demo")
    parser.add_argument("--config", type=str, default=CONFIG_FILE,
                        help="YAML file with defaults; other flags override its values")
    parser.add_argument("--num-hidden", type=int, default=config["model"]["num_hidden"])
    parser.add_argument("--learning-rate", type=float, default=config["model"]["learning_rate"])
    parser.add_argument("--max-epochs", type=int, default=config["training"]["max_epochs"])
    parser.add_argument("--report-every", type=int, default=config["training"]["report_every"])
    parser.add_argument("--num-daydreams", type=int, default=config["sampling"]["num_daydreams"])
    parser.add_argument("--seed", type=int, default=config["seed"])
    parser.add_argument("--quiet", action="store_true", help="don't print per-epoch errors")
    parser.add_argument("--plot", action="store_true", help="plot the error curve and the daydream samples")
    return parser


def main(argv: list[str] | None = None) -> RBM:
    # --config has to be known before the other defaults can be filled in
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", type=str, default=CONFIG_FILE)
    config_path = pre_parser.parse_known_args(argv)[0].config
    config = load_config(config_path)
    args = build_parser(config).parse_args(argv)

    rbm = RBM(num_visible=len(MOVIES), num_hidden=args.num_hidden, learning_rate=args.learning_rate,
              weight_sampler=NormalSampler(0., 0.1, seed=args.seed),
              uniform_sampler=UniformSampler(seed=args.seed + 1))
    verbose = config["training"]["verbose"] and not args.quiet
    metrics = rbm.train(TRAINING_DATA, max_epochs=args.max_epochs, verbose=verbose,
                        report_every=args.report_every)

    torch.set_printoptions(precision=4, sci_mode=False)
    print("\nWeights (row 0: hidden biases, column 0: visible biases):")
    print(rbm.weights)
    print(f"\nHidden units for a user who likes {', '.join(m for m, liked in zip(MOVIES, NEW_USER[0]) if liked)}:")
    print(rbm.run_visible(NEW_USER))
    print(f"\nDaydreaming {args.num_daydreams} samples ({', '.join(MOVIES)}):")
    dreams = rbm.daydream(args.num_daydreams)
    print(dreams)

    if args.plot:
        plot_learning_curves(metrics, log_scale=True)
        plot_sample_grid(dreams, figure_size=(8, 4), title="Daydream samples", unit_labels=MOVIES)
    return rbm


if __name__ == "__main__":
    main()
