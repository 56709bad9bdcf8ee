import json
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from boostnets.metrics import (
    Metrics,
    binary_report,
    confusion_matrix_report,
    plot_history,
    plot_roc,
    plot_search_results,
    print_confusion_matrix,
)
from boostnets.random_search import RESULT_COLUMNS


def test_confusion_matrix_report_layout():
    report = confusion_matrix_report([0, 0, 1, 1, 1], [0, 1, 1, 1, 0])

    assert list(report.index) == ["true 0", "true 1"]
    assert list(report.columns) == ["pred 0", "pred 1"]
    assert report.loc["true 0", "pred 0"] == 1
    assert report.loc["true 0", "pred 1"] == 1
    assert report.loc["true 1", "pred 0"] == 1
    assert report.loc["true 1", "pred 1"] == 2


def test_confusion_matrix_report_keeps_absent_labels():
    report = confusion_matrix_report([0, 0], [0, 0], labels=[0, 1])
    assert report.values.tolist() == [[2, 0], [0, 0]]


def test_print_confusion_matrix(capsys):
    print_confusion_matrix([0, 1], [0, 1], labels=[0, 1])
    out = capsys.readouterr().out
    assert "Confusion matrix" in out
    assert "true 1" in out


def test_binary_report():
    y_true = [0, 0, 0, 1, 1]
    y_score = [0.1, 0.6, 0.2, 0.8, 0.4]

    report = binary_report(y_true, y_score)

    assert report["tn"] == 2
    assert report["fp"] == 1
    assert report["fn"] == 1
    assert report["tp"] == 1
    assert report["accuracy"] == pytest.approx(0.6)
    assert report["precision"] == pytest.approx(0.5)
    assert report["recall"] == pytest.approx(0.5)
    # 5 of the 6 positive/negative pairs are ranked correctly
    assert report["auc"] == pytest.approx(5 / 6)


def test_binary_report_threshold():
    report = binary_report([0, 1], [0.3, 0.35], threshold=0.3)
    assert report["fp"] == 1
    assert report["tp"] == 1
    assert report["threshold"] == 0.3


def test_plots_write_files(tmp_path):
    history = {
        "loss": [0.9, 0.5, 0.3],
        "accuracy": [0.6, 0.8, 0.9],
        "val_loss": [1.0, 0.6, 0.5],
        "val_accuracy": [0.55, 0.75, 0.8],
    }
    plot_history(history, str(tmp_path / "history.png"))
    plot_roc([0, 1, 0, 1], [0.2, 0.9, 0.4, 0.6], str(tmp_path / "roc.png"))

    results = pd.DataFrame(
        [
            [0, 0.1, 31, 5, 0.8, 0.8, True, 0.95, 40],
            [1, 0.01, 64, 8, 0.6, 0.9, False, 0.93, 200],
        ],
        columns=RESULT_COLUMNS,
    )
    plot_search_results(results, str(tmp_path / "search.png"))

    for name in ("history.png", "roc.png", "search.png"):
        assert (tmp_path / name).stat().st_size > 0


def test_plots_close_saved_figures_and_leave_unsaved_open(tmp_path):
    history = {"loss": [0.9, 0.5], "accuracy": [0.6, 0.8]}

    saved = plot_history(history, str(tmp_path / "history.png"))
    assert not plt.fignum_exists(saved.number)

    # without a path the caller owns the figure
    shown = [plot_roc([0, 1, 0, 1], [0.2, 0.9, 0.4, 0.6]) for _ in range(3)]
    try:
        for fig in shown:
            assert plt.fignum_exists(fig.number)
    finally:
        for fig in shown:
            plt.close(fig)
    assert not any(plt.fignum_exists(fig.number) for fig in shown)


def test_metrics_store(tmp_path):
    metrics = Metrics({"epochs": 3, "lr": 1e-3})
    metrics.store_summary_metrics(test_accuracy=np.float32(0.5), best_iteration=np.int64(7))
    metrics.add_history({"loss": [1.0, 0.5], "accuracy": [0.4, 0.7]})
    metrics.add_roc([0, 1, 1], [0.1, 0.8, 0.7])
    metrics.add_confusion_matrix(confusion_matrix_report([0, 1, 1], [0, 1, 0]))

    out = metrics.store(str(tmp_path / "run"))

    with open(os.path.join(out, "run_args.json")) as f:
        assert json.load(f) == {"epochs": 3, "lr": 1e-3}
    with open(os.path.join(out, "summary_metrics.json")) as f:
        summary = json.load(f)
    assert summary["test_accuracy"] == pytest.approx(0.5)
    assert summary["best_iteration"] == 7
    with open(os.path.join(out, "environment.json")) as f:
        assert "lightgbm_version" in json.load(f)

    figures = os.path.join(out, "figures")
    for name in ("plot_history.png", "plot_roc.png", "plot_confusion_matrix.png"):
        assert os.path.exists(os.path.join(figures, name))
