from argparse import ArgumentParser
import os

import matplotlib

matplotlib.use("Agg")  # headless runs, figures only go to files

import numpy as np

from boostnets import (
    CSVLogger,
    Metrics,
    TrainingGifVisualizer,
    evaluate,
    get_experiment,
    print_confusion_matrix,
    setup_log,
    train_network,
)
from boostnets.config import BATCH_SIZE, EPOCHS, LEARNING_RATE


def parse_args():
    ap = ArgumentParser()
    ap.add_argument(
        "--experiment", choices=["mnist_mlp", "mnist_cnn", "cifar10_cnn"], required=True
    )
    ap.add_argument("--lr", type=float, default=LEARNING_RATE)
    ap.add_argument("--epochs", type=int, default=EPOCHS)
    ap.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    ap.add_argument(
        "--validation-split",
        type=float,
        default=0.1,
        help="Fraction of the training set monitored every epoch",
    )
    ap.add_argument(
        "--patience",
        type=int,
        default=None,
        help="Early stopping patience on val_loss (disabled by default)",
    )
    ap.add_argument("--save-dir", type=str, required=False, default=None)
    ap.add_argument("--visualize", action="store_true", help="Enable GIF visualization")
    ap.add_argument(
        "--framerate", type=float, default=2, help="Framerate for the visualization GIF"
    )
    ap.add_argument("--log", action="store_true", help="Enable CSV logging")
    return ap.parse_args()


def main():
    args = parse_args()
    setup_log(args.save_dir)

    (train, test), model = get_experiment(args.experiment)

    viz = None
    logger = None
    if args.save_dir:
        os.makedirs(args.save_dir, exist_ok=True)
        if args.visualize:
            viz = TrainingGifVisualizer(
                out_dir=args.save_dir, tag=args.experiment, framerate=args.framerate
            )
        if args.log:
            logger = CSVLogger(
                os.path.join(args.save_dir, f"{args.experiment}_log.csv"),
                ["phase", "epoch", "loss", "accuracy", "val_loss", "val_accuracy", "elapsed"],
            )

    model, history = train_network(
        model,
        train,
        args.epochs,
        args.lr,
        batch_size=args.batch_size,
        validation_split=args.validation_split,
        early_stopping_patience=args.patience,
        save_dir=args.save_dir,
        logger=logger,
        viz=viz,
    )

    test_loss, test_acc = evaluate(model, test)
    print(f"Test loss: {test_loss:.4f}")
    print(f"Test accuracy: {test_acc:.4f}")

    y_true = np.argmax(test[1], axis=1)
    y_pred = np.argmax(model.predict(test[0], verbose=0), axis=1)
    report = print_confusion_matrix(y_true, y_pred, labels=list(range(test[1].shape[1])))

    if args.save_dir:
        metrics = Metrics(vars(args))
        metrics.store_summary_metrics(test_loss=test_loss, test_accuracy=test_acc)
        metrics.add_history(history)
        metrics.add_confusion_matrix(report)
        metrics.store(args.save_dir)
        if viz is not None:
            print(f"[viz] wrote GIF to: {viz.gif_path}")


if __name__ == "__main__":
    main()
