"""Tests for the console demo."""
import yaml

from cdrbm import RBM
from cdrbm.demo import MOVIES, load_config, main


class TestConfig:
    """Tests for the bundled YAML defaults."""

    def test_default_config_sections(self):
        config = load_config()
        assert config["model"]["num_hidden"] == 2
        assert config["training"]["max_epochs"] > 0
        assert config["sampling"]["num_daydreams"] > 0
        assert isinstance(config["seed"], int)


class TestMain:
    """Tests for running the demo end to end."""

    def test_runs_and_prints(self, capsys):
        rbm = main(["--max-epochs", "20", "--num-daydreams", "4", "--quiet"])
        assert isinstance(rbm, RBM)
        assert rbm.num_visible == len(MOVIES)
        out = capsys.readouterr().out
        assert "Weights" in out
        assert "Daydreaming 4 samples" in out
        assert "Epoch" not in out

    def test_flags_override_config(self):
        rbm = main(["--max-epochs", "5", "--num-hidden", "3", "--learning-rate", "0.5", "--quiet"])
        assert rbm.num_hidden == 3
        assert rbm.learning_rate == 0.5

    def test_custom_config_file(self, tmp_path, capsys):
        config = load_config()
        config["training"]["max_epochs"] = 3
        config["training"]["report_every"] = 1
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(config))
        main(["--config", str(path)])
        out = capsys.readouterr().out
        assert "Epoch 2: reconstruction error is" in out
        assert "Epoch 3:" not in out

    def test_same_seed_same_weights(self):
        first = main(["--max-epochs", "10", "--quiet", "--seed", "5"])
        second = main(["--max-epochs", "10", "--quiet", "--seed", "5"])
        assert (first.weights == second.weights).all()

    def test_plot_flag(self):
        from matplotlib import pyplot as plt
        plt.close("all")
        main(["--max-epochs", "5", "--quiet", "--plot"])
        # one learning curve plus one sample grid
        assert len(plt.get_fignums()) == 2
        plt.close("all")
