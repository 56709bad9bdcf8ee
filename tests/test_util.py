import numpy as np
import pytest
import tensorflow as tf
from unittest.mock import patch

from boostnets.csv_logger import CSVLogger, format_seconds
from boostnets.models import mlp
from boostnets.util import count_params, get_experiment


def test_csv_logger_writes_header_once(tmp_path):
    path = str(tmp_path / "log.csv")
    CSVLogger(path, ["epoch", "loss"]).log({"epoch": 1, "loss": 0.5})
    # reopening appends to the existing file
    CSVLogger(path, ["epoch", "loss"]).log({"epoch": 2})

    with open(path) as f:
        assert f.read().splitlines() == ["epoch,loss", "1,0.5", "2,"]


@pytest.mark.parametrize(
    "seconds, expected",
    [(5, "5s"), (65, "1m05s"), (3725, "1h02m05s"), (59.9, "59s")],
)
def test_format_seconds(seconds, expected):
    assert format_seconds(seconds) == expected


def test_count_params():
    model = mlp(input_shape=(4,), hidden_units=(3,), num_classes=2, dropout=0.0)
    # (4*3 + 3) + (3*2 + 2)
    assert count_params(model) == 23


def test_get_experiment_mnist_mlp():
    rng = np.random.default_rng(0)
    fake = (
        (rng.integers(0, 256, (20, 28, 28), dtype=np.uint8), rng.integers(0, 10, 20)),
        (rng.integers(0, 256, (5, 28, 28), dtype=np.uint8), rng.integers(0, 10, 5)),
    )
    with patch.object(tf.keras.datasets.mnist, "load_data", return_value=fake):
        ((x_train, y_train), _), model = get_experiment("mnist_mlp")

    assert x_train.shape == (20, 784)
    assert model.input_shape == (None, 784)
    assert model.output_shape == (None, y_train.shape[1])


def test_get_experiment_unknown():
    with pytest.raises(ValueError, match="Unknown experiment: resnet"):
        get_experiment("resnet")
