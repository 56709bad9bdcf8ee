"""
Evaluation reports and plots for the boosting and network experiments.
"""

import os
import json
import logging
import sys
import platform
import time
from typing import Dict, Any, Optional, List

import numpy as np
import pandas as pd
import lightgbm as lgb
import tensorflow as tf
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    precision_score,
    recall_score,
    roc_auc_score,
    roc_curve,
)

import matplotlib.pyplot as plt
import seaborn as sns

log = logging.getLogger(__name__)


def confusion_matrix_report(y_true, y_pred, labels: Optional[List] = None) -> pd.DataFrame:
    """Confusion matrix with true labels as rows and predictions as columns."""
    if labels is None:
        labels = sorted(set(np.asarray(y_true).tolist()) | set(np.asarray(y_pred).tolist()))
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    return pd.DataFrame(
        cm,
        index=[f"true {label}" for label in labels],
        columns=[f"pred {label}" for label in labels],
    )


def print_confusion_matrix(y_true, y_pred, labels: Optional[List] = None) -> pd.DataFrame:
    report = confusion_matrix_report(y_true, y_pred, labels=labels)
    print("Confusion matrix:")
    print(report.to_string())
    return report


def binary_report(y_true, y_score, threshold: float = 0.5) -> Dict[str, Any]:
    """
    Threshold-free and thresholded metrics for a binary classifier.

    Args:
        y_true: Binary ground truth
        y_score: Predicted probability of the positive class
        threshold: Decision threshold applied to ``y_score``

    Returns:
        Dict with auc, accuracy, precision, recall and the confusion counts
    """
    y_true = np.asarray(y_true)
    y_pred = (np.asarray(y_score) >= threshold).astype(int)
    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
    return {
        "auc": float(roc_auc_score(y_true, y_score)),
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "precision": float(precision_score(y_true, y_pred, zero_division=0)),
        "recall": float(recall_score(y_true, y_pred, zero_division=0)),
        "threshold": float(threshold),
        "tn": int(tn),
        "fp": int(fp),
        "fn": int(fn),
        "tp": int(tp),
    }


def _create_figure(ncols=1, figsize=(8, 6), xlabel=None, ylabel=None, title=None):
    """Create a matplotlib figure and axis with consistent formatting."""
    fig, axes = plt.subplots(1, ncols, figsize=figsize)
    for ax in np.atleast_1d(axes):
        if xlabel:
            ax.set_xlabel(xlabel)
        if ylabel:
            ax.set_ylabel(ylabel)
        if title:
            ax.set_title(title)
    return fig, axes


def _finish(fig, out_path):
    """
    Save and close ``fig`` when ``out_path`` is given. Without a path the
    figure stays open for display and the caller closes it.
    """
    fig.tight_layout()
    if out_path:
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
    return fig


def plot_history(history: Dict[str, List[float]], out_path: Optional[str] = None):
    """Accuracy and loss curves from a Keras history dict, side by side."""
    fig, (ax_acc, ax_loss) = _create_figure(ncols=2, figsize=(12, 5), xlabel="Epoch")
    epochs = range(1, len(history.get("loss", [])) + 1)

    for ax, metric in ((ax_acc, "accuracy"), (ax_loss, "loss")):
        if metric in history:
            ax.plot(epochs, history[metric], label=f"train {metric}")
        if f"val_{metric}" in history:
            ax.plot(epochs, history[f"val_{metric}"], label=f"validation {metric}")
        ax.set_ylabel(metric.capitalize())
        ax.set_title(f"Model {metric}")
        ax.legend()

    return _finish(fig, out_path)


def plot_roc(y_true, y_score, out_path: Optional[str] = None):
    fpr, tpr, _ = roc_curve(y_true, y_score)
    auc = roc_auc_score(y_true, y_score)
    fig, ax = _create_figure(
        figsize=(6, 6),
        xlabel="False positive rate",
        ylabel="True positive rate",
        title="ROC curve",
    )
    ax.plot(fpr, tpr, label=f"AUC = {auc:.4f}")
    ax.plot([0, 1], [0, 1], linestyle="--", color="gray", linewidth=0.8)
    ax.legend(loc="lower right")
    return _finish(fig, out_path)


def plot_confusion_matrix(report: pd.DataFrame, out_path: Optional[str] = None):
    fig, ax = _create_figure(figsize=(5, 4), title="Confusion matrix")
    sns.heatmap(report, annot=True, fmt="d", cmap="Blues", cbar=False, ax=ax)
    return _finish(fig, out_path)


def plot_search_results(results: pd.DataFrame, out_path: Optional[str] = None):
    """Score of every search trial against its learning rate."""
    fig, ax = _create_figure(
        figsize=(8, 5),
        xlabel="learning rate",
        ylabel="cv score",
        title="Random search trials",
    )
    sns.scatterplot(
        data=results,
        x="learning_rate",
        y="score",
        hue="is_unbalance",
        size="num_leaves",
        ax=ax,
    )
    ax.set_xscale("log")
    ax.grid(True, alpha=0.3)
    return _finish(fig, out_path)


class Metrics:
    """
    Stores run arguments, environment information, summary metrics and plot
    data for one experiment, and writes them out with ``store``.
    """

    def __init__(self, args: Optional[Dict[str, Any]] = None):
        self.run_args = dict(args or {})
        self.environment_info = self.store_environment()
        self.summary_metrics_data = {}
        self.plot_data = {}

    def store_environment(self) -> Dict[str, Any]:
        """
        Store the current environment information.

        Returns:
            Dict containing environment information
        """
        self.environment_info = {
            "python": sys.version.replace("\n", " "),
            "platform": f"{platform.system()} {platform.release()}",
            "tensorflow_version": tf.__version__,
            "lightgbm_version": lgb.__version__,
            "device": ("gpu" if tf.config.list_physical_devices("GPU") else "cpu"),
        }
        return self.environment_info

    def store_summary_metrics(self, **kwargs) -> Dict[str, Any]:
        # numpy scalars are not JSON serialisable
        self.summary_metrics_data.update(
            {k: (v.item() if isinstance(v, np.generic) else v) for k, v in kwargs.items()}
        )
        self.summary_metrics_data["timestamp"] = time.time()
        return self.summary_metrics_data

    def add_history(self, history: Dict[str, List[float]]):
        self.plot_data["history"] = {k: [float(x) for x in v] for k, v in history.items()}

    def add_roc(self, y_true, y_score):
        self.plot_data["roc"] = {
            "y_true": np.asarray(y_true).astype(int).tolist(),
            "y_score": np.asarray(y_score).astype(float).tolist(),
        }

    def add_confusion_matrix(self, report: pd.DataFrame):
        self.plot_data["confusion_matrix"] = {
            "index": list(report.index),
            "columns": list(report.columns),
            "values": report.values.tolist(),
        }

    def add_search_results(self, results: pd.DataFrame):
        self.plot_data["search_results"] = results.to_dict(orient="records")

    def store(self, dir_name: str) -> str:
        """
        Store all collected metrics and figures in ``dir_name``.

        Returns:
            Path to the directory where metrics were saved
        """
        os.makedirs(dir_name, exist_ok=True)

        if self.run_args:
            with open(os.path.join(dir_name, "run_args.json"), "w") as f:
                json.dump(self.run_args, f, indent=2, default=str)

        with open(os.path.join(dir_name, "environment.json"), "w") as f:
            json.dump(self.environment_info, f, indent=2)

        if self.summary_metrics_data:
            with open(os.path.join(dir_name, "summary_metrics.json"), "w") as f:
                json.dump(self.summary_metrics_data, f, indent=2, default=str)

        if self.plot_data:
            with open(os.path.join(dir_name, "plot_data.json"), "w") as f:
                json.dump(self.plot_data, f, indent=2, default=str)

        plot_dir = os.path.join(dir_name, "figures")
        os.makedirs(plot_dir, exist_ok=True)

        if "history" in self.plot_data:
            plot_history(self.plot_data["history"], os.path.join(plot_dir, "plot_history.png"))
        if "roc" in self.plot_data:
            roc = self.plot_data["roc"]
            plot_roc(roc["y_true"], roc["y_score"], os.path.join(plot_dir, "plot_roc.png"))
        if "confusion_matrix" in self.plot_data:
            cm = self.plot_data["confusion_matrix"]
            plot_confusion_matrix(
                pd.DataFrame(cm["values"], index=cm["index"], columns=cm["columns"]),
                os.path.join(plot_dir, "plot_confusion_matrix.png"),
            )
        if "search_results" in self.plot_data:
            plot_search_results(
                pd.DataFrame(self.plot_data["search_results"]),
                os.path.join(plot_dir, "plot_search_results.png"),
            )

        log.info("Stored metrics in %s", dir_name)
        return dir_name
