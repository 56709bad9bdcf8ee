import logging
import os
import time

import tensorflow as tf

from .csv_logger import KerasCSVLogger, format_seconds

log = logging.getLogger(__name__)


def train_network(
    model,
    train_data,
    epochs,
    learning_rate,
    batch_size=128,
    validation_data=None,
    validation_split=0.0,
    early_stopping_patience=None,
    save_dir=None,
    logger=None,  # optional CSVLogger
    viz=None,  # optional TrainingGifVisualizer
    verbose=1,
):
    """
    Train a Keras classifier with Adam and categorical cross-entropy.

    Args:
        model: The Keras model to train
        train_data: Tuple of (x_train, y_train) with one-hot labels
        epochs: Number of training epochs
        learning_rate: Learning rate for Adam
        batch_size: Batch size for training
        validation_data: Optional (x_valid, y_valid) monitored every epoch
        validation_split: Fraction of train_data held out when no
            validation_data is given
        early_stopping_patience: Stop after this many epochs without
            val_loss improvement and restore the best weights
        save_dir: Directory to save the trained model
        logger: Optional CSVLogger to log per-epoch metrics
        viz: Optional TrainingGifVisualizer
        verbose: Keras verbosity

    Returns:
        Tuple of (model, history) where history maps metric names to
        per-epoch values.
    """
    x_train, y_train = train_data

    model.compile(
        optimizer=tf.keras.optimizers.Adam(learning_rate=learning_rate),
        loss="categorical_crossentropy",
        metrics=["accuracy"],
    )

    if verbose > 0:
        model.summary()

    has_validation = validation_data is not None or validation_split > 0
    callbacks = []
    if early_stopping_patience is not None:
        if not has_validation:
            raise ValueError("Early stopping needs validation_data or validation_split")
        callbacks.append(
            tf.keras.callbacks.EarlyStopping(
                monitor="val_loss",
                patience=early_stopping_patience,
                restore_best_weights=True,
            )
        )
    if logger is not None:
        callbacks.append(KerasCSVLogger(logger))
    if viz is not None:
        callbacks.append(viz)

    t0 = time.time()
    history = model.fit(
        x_train,
        y_train,
        batch_size=batch_size,
        epochs=epochs,
        validation_data=validation_data,
        validation_split=0.0 if validation_data is not None else validation_split,
        callbacks=callbacks,
        verbose=verbose,
    )
    log.info(
        "Trained %s for %d epochs in %s",
        model.name,
        len(history.history.get("loss", [])),
        format_seconds(time.time() - t0),
    )

    if save_dir:
        os.makedirs(save_dir, exist_ok=True)
        model.save(filepath=os.path.join(save_dir, "trained.keras"))

    return model, history.history


def evaluate(model, test_data):
    """
    Evaluate the model on test data.
    Args:
        model: The compiled Keras model to evaluate
        test_data: Tuple of (x_test, y_test)
    Returns:
        Tuple of (test_loss, test_accuracy)
    """
    x_test, y_test = test_data
    test_loss, test_accuracy = model.evaluate(x_test, y_test, verbose=0)
    return test_loss, test_accuracy
