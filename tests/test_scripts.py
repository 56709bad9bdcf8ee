import importlib.util
import json
import sys
from pathlib import Path

import matplotlib
import numpy as np
import pandas as pd
import pytest

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def _load_script(name):
    spec = importlib.util.spec_from_file_location(f"{name}_driver", SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_creditcard_csv(path, n=600, n_fraud=60, seed=0):
    rng = np.random.default_rng(seed)
    labels = np.zeros(n, dtype=int)
    labels[:n_fraud] = 1
    frame = pd.DataFrame(
        {"Time": np.arange(n, dtype=float)}
        | {f"V{i}": rng.normal(size=n) + 2.0 * labels * (i <= 3) for i in range(1, 29)}
        | {"Amount": rng.exponential(50.0, size=n)}
    )
    frame["Class"] = labels
    frame.to_csv(path, index=False)


@pytest.mark.parametrize("name", ["train_network", "train_lightgbm", "random_search"])
def test_drivers_share_main_entry_point(name):
    driver = _load_script(name)

    assert callable(driver.main)
    assert callable(driver.parse_args)
    # loading a driver does not run it, and pins the file-only backend
    assert matplotlib.get_backend().lower() == "agg"


def test_train_lightgbm_driver(tmp_path, monkeypatch, capsys):
    csv = tmp_path / "creditcard.csv"
    _write_creditcard_csv(csv)
    save_dir = tmp_path / "run"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "train_lightgbm.py",
            "--csv", str(csv),
            "--num-boost-round", "30",
            "--early-stopping-rounds", "5",
            "--save-dir", str(save_dir),
        ],
    )

    _load_script("train_lightgbm").main()

    out = capsys.readouterr().out
    assert "Loaded 600 transactions, 60 frauds" in out
    assert "Test AUC" in out
    assert (save_dir / "lightgbm.txt").exists()
    with open(save_dir / "summary_metrics.json") as f:
        summary = json.load(f)
    assert 0.5 < summary["auc"] <= 1.0
    assert (save_dir / "figures" / "plot_roc.png").exists()


def test_random_search_driver(tmp_path, monkeypatch):
    csv = tmp_path / "creditcard.csv"
    _write_creditcard_csv(csv)
    save_dir = tmp_path / "search"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "random_search.py",
            "--csv", str(csv),
            "--n-iter", "2",
            "--nfold", "3",
            "--num-boost-round", "20",
            "--early-stopping-rounds", "5",
            "--save-dir", str(save_dir),
        ],
    )

    _load_script("random_search").main()

    ranked = pd.read_csv(next(save_dir.glob("ranked_*.csv")))
    assert len(ranked) == 2
    assert ranked["score"].is_monotonic_decreasing
    with open(next(save_dir.glob("best_params_*.json"))) as f:
        best = json.load(f)
    assert best["best_score"] == pytest.approx(ranked.loc[0, "score"])
    assert best["params"]["learning_rate"] == pytest.approx(ranked.loc[0, "learning_rate"])
