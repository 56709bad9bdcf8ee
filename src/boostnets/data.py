"""
Data loading utilities for the boosting and neural network walkthroughs.

The fraud table is read from a local CSV; MNIST and CIFAR-10 are downloaded
through ``tf.keras.datasets`` on first use.
"""

import numpy as np
import pandas as pd
import tensorflow as tf
from sklearn.model_selection import train_test_split
from typing import Tuple

from .config import RANDOM_SEED, TEST_SIZE, VALID_SIZE

TARGET_COLUMN = "Class"


def load_creditcard_data(path: str) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Read the credit-card fraud table.

    Args:
        path: Path to ``creditcard.csv`` (columns Time, V1..V28, Amount, Class)

    Returns:
        Tuple of (features, labels). ``Time`` is dropped and ``Amount`` is
        standardised; the remaining PCA components are left untouched.
    """
    frame = pd.read_csv(path)
    if TARGET_COLUMN not in frame.columns:
        raise ValueError(f"Missing target column '{TARGET_COLUMN}' in {path}")

    y = frame[TARGET_COLUMN].astype("int32")
    X = frame.drop(columns=[TARGET_COLUMN])
    if "Time" in X.columns:
        X = X.drop(columns=["Time"])
    if "Amount" in X.columns:
        amount = X["Amount"].astype("float64")
        std = amount.std()
        X["Amount"] = (amount - amount.mean()) / (std if std > 0 else 1.0)

    return X, y


def split_creditcard_data(
    X, y, test_size: float = TEST_SIZE, valid_size: float = VALID_SIZE, seed: int = RANDOM_SEED
):
    """
    Stratified train / validation / test split.

    ``valid_size`` is taken from what is left after the test split, so the
    defaults give a 64/16/20 partition.
    """
    X_rest, X_test, y_rest, y_test = train_test_split(
        X, y, test_size=test_size, stratify=y, random_state=seed
    )
    X_train, X_valid, y_train, y_valid = train_test_split(
        X_rest, y_rest, test_size=valid_size, stratify=y_rest, random_state=seed
    )
    return (X_train, y_train), (X_valid, y_valid), (X_test, y_test)


def _normalize_mnist_data(train_images, test_images, flatten=False):
    shape = (784,) if flatten else (28, 28, 1)
    normalized_train_images = (
        train_images.reshape((train_images.shape[0],) + shape).astype("float32") / 255.0
    )
    normalized_test_images = (
        test_images.reshape((test_images.shape[0],) + shape).astype("float32") / 255.0
    )
    return normalized_train_images, normalized_test_images


def _normalize_cifar10_data(train_images, test_images):
    mean = np.array([0.4914, 0.4822, 0.4465])
    std = np.array([0.247, 0.243, 0.261])

    train_images = train_images.astype("float32") / 255.0
    test_images = test_images.astype("float32") / 255.0

    normalized_train_images = (train_images - mean.reshape(1, 1, 1, -1)) / std.reshape(
        1, 1, 1, -1
    )
    normalized_test_images = (test_images - mean.reshape(1, 1, 1, -1)) / std.reshape(
        1, 1, 1, -1
    )

    return normalized_train_images.astype("float32"), normalized_test_images.astype(
        "float32"
    )


def _convert_labels_to_categorical(train_labels, test_labels, num_classes: int):
    categorical_train_labels = tf.keras.utils.to_categorical(train_labels, num_classes)
    categorical_test_labels = tf.keras.utils.to_categorical(test_labels, num_classes)
    return categorical_train_labels, categorical_test_labels


def _create_tf_dataset_with_batching(
    images, labels, batch_size: int, is_training: bool = True, seed: int = RANDOM_SEED
):
    dataset = tf.data.Dataset.from_tensor_slices((images, labels))

    if is_training:
        dataset = dataset.shuffle(buffer_size=10000, seed=seed)
        dataset = dataset.batch(batch_size)
    else:
        # no shuffling for evaluation
        dataset = dataset.batch(2 * batch_size)

    dataset = dataset.prefetch(tf.data.AUTOTUNE)
    return dataset


def make_loaders(
    dataset: str, batch_size: int, seed: int = RANDOM_SEED
) -> Tuple[tf.data.Dataset, tf.data.Dataset, int]:
    """
    Create data loaders for the specified image dataset using tf.data API.

    Args:
        dataset: Name of the dataset ('mnist', 'mnist_flat', 'cifar10')
        batch_size: Batch size for the data loaders
        seed: Random seed for reproducibility

    Returns:
        Tuple of (train_loader, test_loader, num_classes)
    """
    tf.random.set_seed(seed)
    np.random.seed(seed)

    if dataset == "mnist":
        (x_train, y_train), (x_test, y_test) = get_mnist_data()
    elif dataset == "mnist_flat":
        (x_train, y_train), (x_test, y_test) = get_mnist_data(flatten=True)
    elif dataset == "cifar10":
        (x_train, y_train), (x_test, y_test) = get_cifar10_data()
    else:
        raise ValueError(f"Unknown dataset: {dataset}")

    train_dataset = _create_tf_dataset_with_batching(
        x_train, y_train, batch_size, is_training=True, seed=seed
    )
    test_dataset = _create_tf_dataset_with_batching(
        x_test, y_test, batch_size, is_training=False, seed=seed
    )

    return train_dataset, test_dataset, y_train.shape[1]


def get_mnist_data(flatten=False):
    (raw_train_images, raw_train_labels), (raw_test_images, raw_test_labels) = (
        tf.keras.datasets.mnist.load_data()
    )

    normalized_train_images, normalized_test_images = _normalize_mnist_data(
        raw_train_images, raw_test_images, flatten=flatten
    )

    categorical_train_labels, categorical_test_labels = _convert_labels_to_categorical(
        raw_train_labels, raw_test_labels, 10
    )

    return (normalized_train_images, categorical_train_labels), (
        normalized_test_images,
        categorical_test_labels,
    )


def get_cifar10_data():
    (raw_train_images, raw_train_labels), (raw_test_images, raw_test_labels) = (
        tf.keras.datasets.cifar10.load_data()
    )

    normalized_train_images, normalized_test_images = _normalize_cifar10_data(
        raw_train_images, raw_test_images
    )

    categorical_train_labels, categorical_test_labels = _convert_labels_to_categorical(
        raw_train_labels, raw_test_labels, 10
    )

    return (normalized_train_images, categorical_train_labels), (
        normalized_test_images,
        categorical_test_labels,
    )
