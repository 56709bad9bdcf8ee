import os

import numpy as np
import pandas as pd
import pytest
import tensorflow as tf

from boostnets.csv_logger import CSVLogger
from boostnets.models import cifar10_cnn, mlp, mnist_cnn
from boostnets.networks import evaluate, train_network
from boostnets.visualizing import TrainingGifVisualizer, flatten_weights


def _toy_data(n=64, features=784, num_classes=10, seed=0):
    rng = np.random.default_rng(seed)
    x = rng.random((n, features)).astype("float32")
    y = tf.keras.utils.to_categorical(rng.integers(0, num_classes, size=n), num_classes)
    return x, y


def test_model_output_shapes():
    assert mlp(num_classes=10).output_shape == (None, 10)
    assert mnist_cnn(num_classes=10).output_shape == (None, 10)
    assert cifar10_cnn(num_classes=10).output_shape == (None, 10)
    assert mnist_cnn().input_shape == (None, 28, 28, 1)
    assert cifar10_cnn().input_shape == (None, 32, 32, 3)


def test_mlp_hidden_layers():
    model = mlp(hidden_units=(32, 16), dropout=0.0)
    dense = [layer for layer in model.layers if isinstance(layer, tf.keras.layers.Dense)]
    assert [layer.units for layer in dense] == [32, 16, 10]
    assert not any(isinstance(layer, tf.keras.layers.Dropout) for layer in model.layers)


def test_train_network_returns_history(tmp_path):
    train = _toy_data()
    model = mlp(hidden_units=(16,))

    model, history = train_network(
        model,
        train,
        epochs=2,
        learning_rate=1e-3,
        batch_size=16,
        validation_split=0.25,
        save_dir=str(tmp_path),
        verbose=0,
    )

    assert set(history) >= {"loss", "accuracy", "val_loss", "val_accuracy"}
    assert len(history["loss"]) == 2
    assert os.path.exists(tmp_path / "trained.keras")

    loss, acc = evaluate(model, _toy_data(n=16, seed=1))
    assert loss > 0
    assert 0.0 <= acc <= 1.0


def test_train_network_early_stopping_needs_validation():
    with pytest.raises(ValueError, match="Early stopping needs"):
        train_network(
            mlp(hidden_units=(8,)),
            _toy_data(n=16),
            epochs=1,
            learning_rate=1e-3,
            early_stopping_patience=2,
            verbose=0,
        )


def test_train_network_early_stopping_bounds_epochs():
    train = _toy_data()
    valid = _toy_data(n=32, seed=1)

    # random labels: validation loss stops improving almost immediately
    _, history = train_network(
        mlp(hidden_units=(64,), dropout=0.0),
        train,
        epochs=40,
        learning_rate=1e-2,
        batch_size=16,
        validation_data=valid,
        early_stopping_patience=1,
        verbose=0,
    )

    assert len(history["loss"]) < 40


def test_train_network_logs_epochs(tmp_path):
    path = tmp_path / "log.csv"
    logger = CSVLogger(str(path), ["phase", "epoch", "loss", "accuracy", "elapsed"])

    train_network(
        mlp(hidden_units=(8,)),
        _toy_data(),
        epochs=3,
        learning_rate=1e-3,
        batch_size=32,
        logger=logger,
        verbose=0,
    )

    logged = pd.read_csv(path)
    assert list(logged["epoch"]) == [1, 2, 3]
    assert (logged["phase"] == "train").all()
    assert logged["loss"].notna().all()


def test_training_gif_visualizer(tmp_path):
    model = mlp(hidden_units=(8,))
    viz = TrainingGifVisualizer(out_dir=str(tmp_path), tag="toy", sample_size=500)

    w0 = flatten_weights(model)
    train_network(
        model,
        _toy_data(),
        epochs=2,
        learning_rate=1e-2,
        batch_size=32,
        validation_split=0.25,
        viz=viz,
        verbose=0,
    )

    assert os.path.exists(viz.gif_path)
    # frames are removed once the GIF is written
    assert not os.path.exists(viz.frames_dir)
    assert w0.shape == flatten_weights(model).shape
    assert not np.allclose(w0, flatten_weights(model))
