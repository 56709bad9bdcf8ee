from .data import get_mnist_data, get_cifar10_data
from .models import mlp, mnist_cnn, cifar10_cnn

import logging
import sys
import os
import absl.logging


def setup_log(save_dir=None):
    if save_dir:
        os.makedirs(save_dir, exist_ok=True)
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            filename=os.path.join(save_dir, "train.log"),
        )
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stdout,
        )

    return absl.logging.use_python_logging()


EXPERIMENTS = {
    "mnist_mlp": (lambda: get_mnist_data(flatten=True), mlp),
    "mnist_cnn": (get_mnist_data, mnist_cnn),
    "cifar10_cnn": (get_cifar10_data, cifar10_cnn),
}


def get_experiment(name):
    """Return ((x_train, y_train), (x_test, y_test)), model for an experiment name."""
    if name not in EXPERIMENTS:
        raise ValueError(f"Unknown experiment: {name}")
    dataset_fn, model_fn = EXPERIMENTS[name]
    train, test = dataset_fn()
    return (train, test), model_fn(num_classes=train[1].shape[1])


def count_params(model):
    """Number of trainable scalars in a Keras model."""
    return int(sum(int(v.numpy().size) for v in model.trainable_variables))
